"""
Frappe Backend

Implementa los puertos del motor sobre Frappe:
- FrappeSlotRepository (DocType "Doctor Slot")
- FrappeAuditLogRepository (DocType "Doctor Slot Audit Log")
- FrappeClock (now_datetime del sistema)
- doctor_lock: exclusión por doctor con filelock del bench
- load_policy: SchedulingPolicy desde "Slot Scheduling Settings"

Cada acción hace commit (o rollback si lanza) dentro de doctor_lock,
antes de soltar el filelock: el siguiente worker lee datos ya confirmados.
"""

import frappe
from frappe.utils import get_datetime, get_time, getdate, now_datetime
from frappe.utils.synchronization import filelock
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, List, Optional, Union

from .clock import Clock
from .models import AccessType, AuditEntry, Slot, SlotStatus
from .policy import DEFAULT_POLICY, SchedulingPolicy
from .repository import AuditLogRepository, SlotRepository
from .service import SlotService

SLOT_DOCTYPE = "Doctor Slot"
AUDIT_DOCTYPE = "Doctor Slot Audit Log"
SETTINGS_DOCTYPE = "Slot Scheduling Settings"

SLOT_FIELDS = [
	"name",
	"doctor",
	"slot_date",
	"start_time",
	"end_time",
	"slot_type",
	"access_type",
	"slot_status",
	"locked_at",
	"location",
	"notes",
]

LOCK_TIMEOUT_SECONDS = 30


def to_time(time_value: Union[time, timedelta, str]) -> time:
	"""
	Convierte los formatos de un campo Time de Frappe a datetime.time.

	MariaDB retorna timedelta (desde medianoche); Single DocTypes retornan string.
	"""
	if isinstance(time_value, time):
		return time_value
	elif isinstance(time_value, timedelta):
		return (datetime.min + time_value).time()
	elif isinstance(time_value, str):
		return get_time(time_value)
	else:
		raise ValueError(f"Cannot convert {type(time_value)} to time")


def slot_from_doc(row: Any) -> Slot:
	"""Slot desde un Doctor Slot (doc o dict de frappe.get_all)."""
	return Slot(
		slot_id=row.get("name"),
		doctor_id=row.get("doctor"),
		slot_date=getdate(row.get("slot_date")),
		start_time=to_time(row.get("start_time")),
		end_time=to_time(row.get("end_time")),
		slot_type=row.get("slot_type"),
		access_type=AccessType(row.get("access_type") or AccessType.NORMAL.value),
		slot_status=SlotStatus(row.get("slot_status") or SlotStatus.AVAILABLE.value),
		locked_at=get_datetime(row.get("locked_at")) if row.get("locked_at") else None,
		location=row.get("location"),
		notes=row.get("notes")
	)


def slot_to_fields(slot: Slot) -> dict:
	return {
		"doctor": slot.doctor_id,
		"slot_date": slot.slot_date,
		"start_time": slot.start_time,
		"end_time": slot.end_time,
		"slot_type": slot.slot_type,
		"access_type": slot.access_type.value,
		"slot_status": slot.slot_status.value,
		"locked_at": slot.locked_at,
		"location": slot.location,
		"notes": slot.notes,
	}


class FrappeSlotRepository(SlotRepository):
	def find_all(self) -> List[Slot]:
		rows = frappe.get_all(
			SLOT_DOCTYPE,
			fields=SLOT_FIELDS,
			order_by="slot_date asc, start_time asc"
		)
		return [slot_from_doc(row) for row in rows]

	def find_by_id(self, slot_id: str) -> Optional[Slot]:
		row = frappe.db.get_value(SLOT_DOCTYPE, slot_id, SLOT_FIELDS, as_dict=True, for_update=True)
		return slot_from_doc(row) if row else None

	def find_by_doctor_and_date_range(self, doctor_id: str, start_date: date, end_date: date) -> List[Slot]:
		rows = frappe.get_all(
			SLOT_DOCTYPE,
			filters={
				"doctor": doctor_id,
				"slot_date": ["between", [start_date, end_date]]
			},
			fields=SLOT_FIELDS,
			order_by="slot_date asc, start_time asc"
		)
		return [slot_from_doc(row) for row in rows]

	def save(self, slot: Slot) -> Slot:
		if slot.slot_id:
			doc = frappe.get_doc(SLOT_DOCTYPE, slot.slot_id)
			doc.update(slot_to_fields(slot))
			doc.save(ignore_permissions=True)
		else:
			doc = frappe.get_doc({"doctype": SLOT_DOCTYPE, **slot_to_fields(slot)})
			doc.insert(ignore_permissions=True)
			slot.slot_id = doc.name
		return slot

	def save_all(self, slots: Iterable[Slot]) -> List[Slot]:
		return [self.save(slot) for slot in slots]

	def delete_all(self, slots: Iterable[Slot]) -> None:
		for slot in slots:
			frappe.delete_doc(SLOT_DOCTYPE, slot.slot_id, ignore_permissions=True, force=True)


class FrappeAuditLogRepository(AuditLogRepository):
	def save(self, entry: AuditEntry) -> AuditEntry:
		frappe.get_doc({
			"doctype": AUDIT_DOCTYPE,
			"slot": entry.slot_id,
			"doctor": entry.doctor_id,
			"action": entry.action,
			"message": entry.message,
			"performed_by": entry.performed_by,
			"timestamp": entry.timestamp
		}).insert(ignore_permissions=True)
		return entry


class FrappeClock(Clock):
	def now(self) -> datetime:
		return now_datetime()


def get_current_actor() -> Optional[str]:
	"""Usuario de la sesión; None para Guest o sin sesión (el audit usa "system")."""
	user = frappe.session.user if getattr(frappe, "session", None) else None
	if not user or user == "Guest":
		return None
	return user


@contextmanager
def doctor_lock(doctor_id: str):
	"""
	Lock de archivo del bench, uno por doctor.

	La transacción se confirma antes de liberar el lock; si la acción
	lanza, se hace rollback y la excepción se propaga.
	"""
	with filelock(f"doctor_slots_{frappe.scrub(str(doctor_id))}", timeout=LOCK_TIMEOUT_SECONDS):
		try:
			yield
		except Exception:
			frappe.db.rollback()
			raise

		frappe.db.commit()


def load_policy() -> SchedulingPolicy:
	"""
	SchedulingPolicy desde Slot Scheduling Settings.

	Cada campo vacío cae al valor por defecto del motor; un 0 explícito se respeta.
	"""
	settings = frappe.get_cached_doc(SETTINGS_DOCTYPE)

	return SchedulingPolicy(
		workday_start=to_time(settings.workday_start) if settings.workday_start else DEFAULT_POLICY.workday_start,
		workday_end=to_time(settings.workday_end) if settings.workday_end else DEFAULT_POLICY.workday_end,
		max_daily_bookings=_setting_int(settings.max_daily_bookings, DEFAULT_POLICY.max_daily_bookings),
		min_gap_minutes=_setting_int(settings.min_gap_minutes, DEFAULT_POLICY.min_gap_minutes),
		max_advance_days=_setting_int(settings.max_advance_days, DEFAULT_POLICY.max_advance_days),
		same_day_cutoff=to_time(settings.same_day_cutoff) if settings.same_day_cutoff else DEFAULT_POLICY.same_day_cutoff
	)


def get_slot_service() -> SlotService:
	return SlotService(
		FrappeSlotRepository(),
		FrappeAuditLogRepository(),
		FrappeClock(),
		policy=load_policy(),
		actor_provider=get_current_actor,
		lock_factory=doctor_lock
	)


def _setting_int(value: Any, default: int) -> int:
	if value is None or value == "":
		return default
	return int(value)
