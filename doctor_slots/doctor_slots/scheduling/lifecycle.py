"""
Slot Lifecycle

Máquina de estados del slot:

	AVAILABLE -> PENDING   (lock, setea locked_at)
	AVAILABLE -> BOOKED    (book, validado por rules.py)
	AVAILABLE -> BLOCKED   (mark unavailable)
	*         -> BLOCKED   (block date range, override administrativo)

No hay transiciones de salida de BOOKED ni BLOCKED, ni expiración de PENDING.
"""

from datetime import datetime
from typing import Dict, FrozenSet, Optional

from .exceptions import SlotStateError
from .models import Slot, SlotStatus

TRANSITIONS: Dict[SlotStatus, FrozenSet[SlotStatus]] = {
	SlotStatus.AVAILABLE: frozenset({SlotStatus.PENDING, SlotStatus.BOOKED, SlotStatus.BLOCKED}),
	SlotStatus.PENDING: frozenset(),
	SlotStatus.BOOKED: frozenset(),
	SlotStatus.BLOCKED: frozenset(),
}

# Estados que MARK_UNAVAILABLE no toca
UNAVAILABLE_EXCLUDED = frozenset({SlotStatus.BOOKED, SlotStatus.BLOCKED, SlotStatus.PENDING})


def can_transition(current: SlotStatus, target: SlotStatus) -> bool:
	return target in TRANSITIONS.get(current, frozenset())


def transition(
	slot: Slot,
	target: SlotStatus,
	now: Optional[datetime] = None,
	force: bool = False,
	error_message: Optional[str] = None
) -> Slot:
	"""
	Cambia el estado del slot en memoria (no persiste).

	Args:
		slot: slot a modificar
		target: estado destino
		now: timestamp para locked_at (requerido si target es PENDING)
		force: saltar la tabla de transiciones (block date range)
		error_message: mensaje si la transición es ilegal

	Raises:
		SlotStateError: transición no permitida desde el estado actual
	"""
	if not force and not can_transition(slot.slot_status, target):
		raise SlotStateError(
			error_message or f"Cannot move slot from {slot.slot_status.value} to {target.value}."
		)

	slot.slot_status = target
	if target == SlotStatus.PENDING:
		slot.locked_at = now
	else:
		slot.locked_at = None

	return slot


def lock(slot: Slot, now: datetime) -> Slot:
	return transition(slot, SlotStatus.PENDING, now=now, error_message="Slot is not available for locking.")


def book(slot: Slot) -> Slot:
	return transition(slot, SlotStatus.BOOKED, error_message="Slot is not available.")


def mark_unavailable(slot: Slot) -> Slot:
	return transition(slot, SlotStatus.BLOCKED)


def block(slot: Slot) -> Slot:
	"""Bloqueo administrativo: aplica sin importar el estado actual."""
	return transition(slot, SlotStatus.BLOCKED, force=True)


def is_markable_unavailable(slot: Slot) -> bool:
	return slot.slot_status not in UNAVAILABLE_EXCLUDED
