"""
Slot Management API

Single whitelisted endpoint that dispatches one slot action per request:
CREATE_SLOTS, BLOCK_DATE, DELETE_SLOTS, BOOK_SLOT, LOCK_SLOT,
MARK_UNAVAILABLE, RECOMMEND_SLOT, BULK_DELETE.
"""

import frappe
from typing import Any, Dict, Optional

from doctor_slots.doctor_slots.scheduling.dispatch import handle_slot_action as dispatch_action
from doctor_slots.doctor_slots.scheduling.exceptions import SlotError
from doctor_slots.doctor_slots.scheduling.frappe_backend import get_slot_service
from doctor_slots.doctor_slots.scheduling.models import ActionResult, Slot

from doctor_slots.api.shared import clean_slot_params

IGNORED_PARAMS = ("cmd", "csrf_token")


@frappe.whitelist(methods=["POST"])
def handle_slot_action(action: Optional[str] = None, **params) -> Dict[str, Any]:
	"""
	Ejecuta una acción de gestión de slots.

	Args:
		action: CREATE_SLOTS | BLOCK_DATE | DELETE_SLOTS | BOOK_SLOT | LOCK_SLOT |
			MARK_UNAVAILABLE | RECOMMEND_SLOT | BULK_DELETE
		**params: bolsa plana (doctorId/doctor_id, startDate, endDate, slotId,
			slotDuration, slotType, accessType, location, notes)

	Returns:
		dict: éxito
			{"success": True, "message": str, "count": int, "slots": [...]}
		o rechazo (con HTTP 400/404/409)
			{"success": False, "error": str, "message": str}

	Example:
		```javascript
		frappe.call({
			method: "doctor_slots.api.slot_management.handle_slot_action",
			args: {
				action: "CREATE_SLOTS",
				doctorId: "DR-001",
				startDate: "2026-10-19",
				endDate: "2026-10-23",
				slotDuration: 30,
				slotType: "CONSULTATION"
			}
		});
		```
	"""
	payload = {key: value for key, value in params.items() if key not in IGNORED_PARAMS}
	payload["action"] = action

	try:
		payload = clean_slot_params(payload)
		result = dispatch_action(get_slot_service(), payload)

	except SlotError as e:
		frappe.db.rollback()
		return _reject(e.error_kind, e.message, e.http_status, action)

	except frappe.ValidationError as e:
		# Validaciones de DocType o de validators.py
		frappe.db.rollback()
		return _reject("validation", str(e), 400, action)

	except Exception as e:
		frappe.log_error(f"Error in slot action {action}: {str(e)}", "Slot Management API")
		raise

	frappe.logger("doctor_slots").info(f"{action}: {result.message}")
	return serialize_result(result)


def serialize_result(result: ActionResult) -> Dict[str, Any]:
	return {
		"success": True,
		"message": result.message,
		"count": result.count,
		"slots": [serialize_slot(slot) for slot in result.slots]
	}


def serialize_slot(slot: Slot) -> Dict[str, Any]:
	return {
		"slot_id": slot.slot_id,
		"doctor_id": slot.doctor_id,
		"slot_date": slot.slot_date.isoformat(),
		"start_time": slot.start_time.strftime("%H:%M:%S"),
		"end_time": slot.end_time.strftime("%H:%M:%S"),
		"slot_type": slot.slot_type,
		"access_type": slot.access_type.value,
		"slot_status": slot.slot_status.value,
		"locked_at": slot.locked_at.strftime("%Y-%m-%d %H:%M:%S") if slot.locked_at else None,
		"location": slot.location,
		"notes": slot.notes
	}


def _reject(error_kind: str, message: str, http_status: int, action: Optional[str]) -> Dict[str, Any]:
	frappe.logger("doctor_slots").info(f"{action} rejected ({error_kind}): {message}")
	frappe.local.response["http_status_code"] = http_status

	return {
		"success": False,
		"error": error_kind,
		"message": message
	}
