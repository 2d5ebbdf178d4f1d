"""
Booking Rule Validator

Cadena ordenada de reglas independientes aplicada a BOOK_SLOT.
La primera regla que falla determina el motivo del rechazo
(los motivos no se combinan).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from .exceptions import BookingRuleError, SlotNotFoundError, SlotStateError
from .models import AccessType, Slot, SlotStatus
from .policy import DEFAULT_POLICY, SchedulingPolicy

RESERVED_ACCESS_TYPES = (AccessType.WALK_IN, AccessType.EMERGENCY)


@dataclass
class BookingContext:
	"""
	Datos que necesitan las reglas.

	day_slots: todos los slots del doctor en la fecha del slot candidato.
	"""

	doctor_id: str
	now: datetime
	day_slots: List[Slot] = field(default_factory=list)
	policy: SchedulingPolicy = DEFAULT_POLICY


def check_slot_ownership(slot: Optional[Slot], context: BookingContext) -> None:
	if slot is None:
		raise SlotNotFoundError("Slot not found.")
	if slot.doctor_id != context.doctor_id:
		raise SlotNotFoundError("Slot does not belong to this doctor.")


def check_slot_available(slot: Slot, context: BookingContext) -> None:
	if slot.slot_status != SlotStatus.AVAILABLE:
		raise SlotStateError("Slot is not available.")


def check_access_type(slot: Slot, context: BookingContext) -> None:
	if slot.access_type in RESERVED_ACCESS_TYPES:
		raise BookingRuleError("This slot is reserved for walk-ins or emergencies only.")


def check_daily_cap(slot: Slot, context: BookingContext) -> None:
	daily_bookings = sum(
		1 for other in _same_day(slot, context) if other.slot_status == SlotStatus.BOOKED
	)
	if daily_bookings >= context.policy.max_daily_bookings:
		raise BookingRuleError(
			f"Doctor already has {context.policy.max_daily_bookings} bookings for {slot.slot_date.isoformat()}"
		)


def check_minimum_gap(slot: Slot, context: BookingContext) -> None:
	for other in _same_day(slot, context):
		if other.slot_status != SlotStatus.BOOKED:
			continue
		if minutes_between(other, slot) < context.policy.min_gap_minutes:
			raise BookingRuleError(
				f"Cannot book: Less than {context.policy.min_gap_minutes} minutes gap from another booking."
			)


def check_advance_window(slot: Slot, context: BookingContext) -> None:
	last_bookable = context.now.date() + timedelta(days=context.policy.max_advance_days)
	if slot.slot_date > last_bookable:
		raise BookingRuleError(
			f"You can only book slots up to {context.policy.max_advance_days} days in advance."
		)


def check_same_day_cutoff(slot: Slot, context: BookingContext) -> None:
	if slot.slot_date == context.now.date() and context.now.time() >= context.policy.same_day_cutoff:
		cutoff = context.policy.same_day_cutoff.strftime("%I:%M %p").lstrip("0")
		raise BookingRuleError(f"Same-day bookings must be made before {cutoff}.")


# Orden de evaluación
BOOKING_RULES: List[Callable[[Slot, BookingContext], None]] = [
	check_slot_ownership,
	check_slot_available,
	check_access_type,
	check_daily_cap,
	check_minimum_gap,
	check_advance_window,
	check_same_day_cutoff,
]


def validate_booking(slot: Optional[Slot], context: BookingContext) -> None:
	"""
	Aplica las reglas en orden; lanza la excepción de la primera que falla.

	Raises:
		SlotNotFoundError: slot inexistente o de otro doctor
		SlotStateError: slot no AVAILABLE
		BookingRuleError: acceso reservado, tope diario, gap mínimo,
			ventana de anticipación o corte del mismo día
	"""
	for rule in BOOKING_RULES:
		rule(slot, context)


def minutes_between(first: Slot, second: Slot) -> int:
	"""Diferencia absoluta entre los inicios, en minutos completos (trunca)."""
	first_start = datetime.combine(first.slot_date, first.start_time)
	second_start = datetime.combine(second.slot_date, second.start_time)
	return int(abs((second_start - first_start).total_seconds()) // 60)


def _same_day(slot: Slot, context: BookingContext) -> List[Slot]:
	return [
		other
		for other in context.day_slots
		if other.doctor_id == context.doctor_id and other.slot_date == slot.slot_date
	]
