"""
Audit Recorder

Append-only log de cada acción que modifica slots.
Las entradas nunca se actualizan ni se borran desde el motor.
"""

from typing import Callable, Optional

from .clock import Clock
from .models import AuditEntry, Slot
from .repository import AuditLogRepository

SYSTEM_ACTOR = "system"

# Códigos y mensajes fijos por acción
CREATE_SLOT = ("CREATE_SLOT", "Slot created.")
BOOK_SLOT = ("BOOK_SLOT", "Slot booked successfully.")
LOCK_SLOT = ("LOCK_SLOT", "Slot locked (PENDING) for booking.")
BLOCK_DATE = ("BLOCK_DATE", "Slot blocked for date range.")
MARK_UNAVAILABLE = ("MARK_UNAVAILABLE", "Slot marked as UNAVAILABLE by system")
DELETE_SLOT = ("DELETE_SLOT", "Slot deleted due to leave or admin removal.")


class AuditRecorder:
	"""
	Registra una AuditEntry por slot afectado.

	actor_provider retorna el usuario autenticado o None; sin actor
	se usa SYSTEM_ACTOR.
	"""

	def __init__(
		self,
		repository: AuditLogRepository,
		clock: Clock,
		actor_provider: Optional[Callable[[], Optional[str]]] = None
	):
		self.repository = repository
		self.clock = clock
		self.actor_provider = actor_provider

	def current_actor(self) -> str:
		actor = self.actor_provider() if self.actor_provider else None
		return actor or SYSTEM_ACTOR

	def record(self, slot: Slot, action: str, message: str) -> AuditEntry:
		entry = AuditEntry(
			slot_id=slot.slot_id,
			doctor_id=slot.doctor_id,
			action=action,
			message=message,
			performed_by=self.current_actor(),
			timestamp=self.clock.now()
		)
		return self.repository.save(entry)

	def record_event(self, slot: Slot, event: tuple) -> AuditEntry:
		action, message = event
		return self.record(slot, action, message)
