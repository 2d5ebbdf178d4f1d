"""
Action Dispatch

Convierte la bolsa plana de parámetros en un SlotManagementRequest
y la despacha al método de SlotService correspondiente.

Acepta nombres snake_case (doctor_id) y camelCase (doctorId).
"""

from datetime import date, datetime
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional

from .exceptions import SlotValidationError
from .models import AccessType, ActionResult, SlotAction, SlotManagementRequest
from .service import SlotService

# campo del request -> nombres aceptados en los parámetros
FIELD_ALIASES: Dict[str, tuple] = {
	"slot_id": ("slot_id", "slotId"),
	"doctor_id": ("doctor_id", "doctorId"),
	"start_date": ("start_date", "startDate", "preferred_date", "preferredDate"),
	"end_date": ("end_date", "endDate"),
	"slot_duration": ("slot_duration", "slotDuration"),
	"slot_type": ("slot_type", "slotType"),
	"access_type": ("access_type", "accessType"),
	"location": ("location",),
	"notes": ("notes",),
}

RANGE_FIELDS = ("doctor_id", "start_date", "end_date")

# campos que consume cada acción; el resto de parámetros se ignora
ACTION_FIELDS: Dict[SlotAction, tuple] = {
	SlotAction.CREATE_SLOTS: RANGE_FIELDS + (
		"slot_duration", "slot_type", "access_type", "location", "notes"
	),
	SlotAction.BLOCK_DATE: RANGE_FIELDS,
	SlotAction.DELETE_SLOTS: RANGE_FIELDS,
	SlotAction.BOOK_SLOT: ("slot_id", "doctor_id"),
	SlotAction.LOCK_SLOT: ("slot_id", "doctor_id"),
	SlotAction.MARK_UNAVAILABLE: RANGE_FIELDS,
	SlotAction.RECOMMEND_SLOT: ("doctor_id", "start_date"),
	SlotAction.BULK_DELETE: RANGE_FIELDS,
}

ACTION_HANDLERS: Dict[SlotAction, str] = {
	SlotAction.CREATE_SLOTS: "create_slots",
	SlotAction.BLOCK_DATE: "block_date",
	SlotAction.DELETE_SLOTS: "delete_slots",
	SlotAction.BOOK_SLOT: "book_slot",
	SlotAction.LOCK_SLOT: "lock_slot",
	SlotAction.MARK_UNAVAILABLE: "mark_unavailable",
	SlotAction.RECOMMEND_SLOT: "recommend_slot",
	SlotAction.BULK_DELETE: "bulk_delete",
}


def parse_action(value: Any) -> SlotAction:
	"""
	Raises:
		SlotValidationError: acción ausente ("Missing action type.")
			o desconocida ("Unsupported action.")
	"""
	if isinstance(value, SlotAction):
		return value

	if value is None or not str(value).strip():
		raise SlotValidationError("Missing action type.")

	try:
		return SlotAction(str(value).strip().upper())
	except ValueError:
		raise SlotValidationError("Unsupported action.")


def parse_request(params: Mapping[str, Any]) -> SlotManagementRequest:
	"""
	Construye el request desde los parámetros del endpoint.

	Solo se parsean los campos que consume la acción (ACTION_FIELDS).
	Los campos vacíos ("" o None) se tratan como ausentes; cada acción
	decide después cuáles son requeridos.

	Raises:
		SlotValidationError: acción inválida o campo consumido con formato inválido
	"""
	action = parse_action(params.get("action"))

	fields = {
		name: FIELD_PARSERS[name](_pick(params, FIELD_ALIASES[name]))
		for name in ACTION_FIELDS[action]
	}
	return SlotManagementRequest(action=action, **fields)


def dispatch(service: SlotService, request: SlotManagementRequest) -> ActionResult:
	if request.action is None:
		raise SlotValidationError("Missing action type.")

	handler_name = ACTION_HANDLERS.get(request.action)
	if handler_name is None:
		raise SlotValidationError("Unsupported action.")

	return getattr(service, handler_name)(request)


def handle_slot_action(service: SlotService, params: Mapping[str, Any]) -> ActionResult:
	"""Punto de entrada único: parsea y despacha una acción."""
	return dispatch(service, parse_request(params))


# ===== COERCION =====

def _pick(params: Mapping[str, Any], aliases: tuple) -> Any:
	for alias in aliases:
		value = params.get(alias)
		if value is not None and value != "":
			return value
	return None


def _to_text(value: Any) -> Optional[str]:
	if value is None:
		return None
	value = str(value).strip()
	return value or None


def _to_date(value: Any, field_name: str) -> Optional[date]:
	if value is None:
		return None
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value

	try:
		return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
	except ValueError:
		raise SlotValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD")


def _to_int(value: Any, field_name: str) -> Optional[int]:
	if value is None:
		return None
	if isinstance(value, bool):
		raise SlotValidationError(f"Invalid {field_name}. Use a whole number of minutes")

	try:
		return int(str(value).strip())
	except ValueError:
		raise SlotValidationError(f"Invalid {field_name}. Use a whole number of minutes")


def _to_access_type(value: Any) -> Optional[AccessType]:
	if value is None:
		return None
	if isinstance(value, AccessType):
		return value

	try:
		return AccessType(str(value).strip().upper())
	except ValueError:
		raise SlotValidationError(f"Invalid accessType '{value}'")


FIELD_PARSERS: Dict[str, Callable[[Any], Any]] = {
	"slot_id": _to_text,
	"doctor_id": _to_text,
	"start_date": partial(_to_date, field_name="startDate"),
	"end_date": partial(_to_date, field_name="endDate"),
	"slot_duration": partial(_to_int, field_name="slotDuration"),
	"slot_type": _to_text,
	"access_type": _to_access_type,
	"location": _to_text,
	"notes": _to_text,
}
