"""
Slot Service

Una operación por acción del endpoint de gestión de slots.

Cada acción:
1. Valida campos requeridos (antes de tocar el repositorio)
2. Entra a la región de exclusión del doctor
3. Lee los slots candidatos, aplica conflicto/reglas/máquina de estados
4. Persiste y registra una entrada de auditoría por slot afectado
"""

import threading
from contextlib import AbstractContextManager
from datetime import time
from typing import Callable, Dict, List, Optional

from . import audit, lifecycle
from .audit import AuditRecorder
from .clock import Clock
from .exceptions import SlotNotFoundError, SlotValidationError
from .models import ActionResult, Slot, SlotManagementRequest
from .policy import DEFAULT_POLICY, SchedulingPolicy
from .recommendations import recommend_slot
from .repository import AuditLogRepository, SlotRepository
from .rules import BookingContext, validate_booking
from .slots import generate_slots

LockFactory = Callable[[str], AbstractContextManager]


class DoctorLocks:
	"""Un RLock por doctor (exclusión dentro de un mismo proceso)."""

	def __init__(self):
		self._guard = threading.Lock()
		self._locks: Dict[str, threading.RLock] = {}

	def __call__(self, doctor_id: str) -> threading.RLock:
		with self._guard:
			if doctor_id not in self._locks:
				self._locks[doctor_id] = threading.RLock()
			return self._locks[doctor_id]


class SlotService:
	def __init__(
		self,
		slot_repository: SlotRepository,
		audit_repository: AuditLogRepository,
		clock: Clock,
		policy: SchedulingPolicy = DEFAULT_POLICY,
		actor_provider: Optional[Callable[[], Optional[str]]] = None,
		lock_factory: Optional[LockFactory] = None
	):
		self.slots = slot_repository
		self.clock = clock
		self.policy = policy
		self.audit = AuditRecorder(audit_repository, clock, actor_provider)
		self.lock_factory = lock_factory or DoctorLocks()

	# ===== ACTIONS =====

	def create_slots(self, request: SlotManagementRequest) -> ActionResult:
		"""Genera los slots del rango en la ventana diaria; todo o nada."""
		if (
			not request.doctor_id
			or request.start_date is None
			or request.end_date is None
			or request.slot_duration is None
			or not request.slot_type
		):
			raise SlotValidationError("Missing required fields.")

		if request.start_date > request.end_date:
			raise SlotValidationError("startDate must be on or before endDate.")
		if request.slot_duration <= 0:
			raise SlotValidationError("slotDuration must be greater than zero.")

		with self.lock_factory(request.doctor_id):
			existing = self.slots.find_by_doctor_and_date_range(
				request.doctor_id, request.start_date, request.end_date
			)

			new_slots = generate_slots(
				request.doctor_id,
				request.start_date,
				request.end_date,
				request.slot_duration,
				request.slot_type,
				existing,
				access_type=request.access_type,
				location=request.location,
				notes=request.notes,
				policy=self.policy
			)

			saved = self.slots.save_all(new_slots)
			for slot in saved:
				self.audit.record_event(slot, audit.CREATE_SLOT)

		return ActionResult(f"Created {len(saved)} slots.", len(saved), saved)

	def block_date(self, request: SlotManagementRequest) -> ActionResult:
		"""Bloquea TODOS los slots del rango, sin importar su estado."""
		self._require_range(request, "Missing required fields.")

		with self.lock_factory(request.doctor_id):
			slots = self.slots.find_by_doctor_and_date_range(
				request.doctor_id, request.start_date, request.end_date
			)
			for slot in slots:
				lifecycle.block(slot)

			self.slots.save_all(slots)
			for slot in slots:
				self.audit.record_event(slot, audit.BLOCK_DATE)

		return ActionResult(
			f"Blocked {len(slots)} slots between {request.start_date.isoformat()} "
			f"and {request.end_date.isoformat()}",
			len(slots),
			slots
		)

	def delete_slots(self, request: SlotManagementRequest) -> ActionResult:
		"""Borra los slots del rango, auditando cada uno antes de borrarlo."""
		self._require_range(request, "Missing required fields.")

		with self.lock_factory(request.doctor_id):
			slots = self.slots.find_by_doctor_and_date_range(
				request.doctor_id, request.start_date, request.end_date
			)
			if not slots:
				return ActionResult("No slots found to delete.", 0, [])

			for slot in slots:
				self.audit.record_event(slot, audit.DELETE_SLOT)
			self.slots.delete_all(slots)

		return ActionResult(
			f"Deleted {len(slots)} slots between {request.start_date.isoformat()} "
			f"and {request.end_date.isoformat()}",
			len(slots),
			slots
		)

	def book_slot(self, request: SlotManagementRequest) -> ActionResult:
		if not request.slot_id or not request.doctor_id:
			raise SlotValidationError("Missing slotId or doctorId.")

		with self.lock_factory(request.doctor_id):
			slot = self.slots.find_by_id(request.slot_id)

			day_slots: List[Slot] = []
			if slot is not None and slot.doctor_id == request.doctor_id:
				day_slots = self.slots.find_by_doctor_and_date_range(
					request.doctor_id, slot.slot_date, slot.slot_date
				)

			validate_booking(slot, BookingContext(
				doctor_id=request.doctor_id,
				now=self.clock.now(),
				day_slots=day_slots,
				policy=self.policy
			))

			lifecycle.book(slot)
			self.slots.save(slot)
			self.audit.record_event(slot, audit.BOOK_SLOT)

		return ActionResult(f"Slot {slot.slot_id} has been booked.", 1, [slot])

	def lock_slot(self, request: SlotManagementRequest) -> ActionResult:
		"""Soft-hold: AVAILABLE -> PENDING con locked_at = ahora."""
		if not request.slot_id or not request.doctor_id:
			raise SlotValidationError("Missing slotId or doctorId.")

		with self.lock_factory(request.doctor_id):
			slot = self._get_owned_slot(request.slot_id, request.doctor_id)

			lifecycle.lock(slot, self.clock.now())
			self.slots.save(slot)
			self.audit.record_event(slot, audit.LOCK_SLOT)

		return ActionResult(f"Slot {slot.slot_id} is now locked (PENDING) for booking.", 1, [slot])

	def mark_unavailable(self, request: SlotManagementRequest) -> ActionResult:
		"""Bloquea solo los slots del rango que no estén BOOKED, BLOCKED o PENDING."""
		self._require_range(request, "Missing doctorId, startDate, or endDate.")

		with self.lock_factory(request.doctor_id):
			slots = [
				slot
				for slot in self.slots.find_by_doctor_and_date_range(
					request.doctor_id, request.start_date, request.end_date
				)
				if lifecycle.is_markable_unavailable(slot)
			]
			if not slots:
				return ActionResult("No slots were marked as unavailable.", 0, [])

			for slot in slots:
				lifecycle.mark_unavailable(slot)

			self.slots.save_all(slots)
			for slot in slots:
				self.audit.record_event(slot, audit.MARK_UNAVAILABLE)

		return ActionResult(f"Marked {len(slots)} slots as UNAVAILABLE (BLOCKED).", len(slots), slots)

	def recommend_slot(self, request: SlotManagementRequest) -> ActionResult:
		"""El slot AVAILABLE más temprano en la fecha preferida (start_date)."""
		if not request.doctor_id or request.start_date is None:
			raise SlotValidationError("Missing doctorId or preferredDate.")

		day_slots = self.slots.find_by_doctor_and_date_range(
			request.doctor_id, request.start_date, request.start_date
		)
		recommended = recommend_slot(day_slots, request.doctor_id, request.start_date)

		if recommended is None:
			return ActionResult("No available slots found for this doctor on given date.", 0, [])

		message = (
			f"Recommended slot: {recommended.slot_date.isoformat()} | "
			f"{_format_time(recommended.start_time)} to {_format_time(recommended.end_time)}"
		)
		if recommended.location:
			message += f" at {recommended.location}"

		return ActionResult(message, 1, [recommended])

	def bulk_delete(self, request: SlotManagementRequest) -> ActionResult:
		"""Borra el rango completo sin auditar."""
		self._require_range(request, "Missing required fields: doctorId, startDate, endDate.")

		with self.lock_factory(request.doctor_id):
			slots = self.slots.find_by_doctor_and_date_range(
				request.doctor_id, request.start_date, request.end_date
			)
			self.slots.delete_all(slots)

		return ActionResult(
			f"Deleted {len(slots)} slots for Doctor ID {request.doctor_id} between "
			f"{request.start_date.isoformat()} and {request.end_date.isoformat()}.",
			len(slots),
			slots
		)

	# ===== HELPERS =====

	def _require_range(self, request: SlotManagementRequest, message: str) -> None:
		if not request.doctor_id or request.start_date is None or request.end_date is None:
			raise SlotValidationError(message)

	def _get_owned_slot(self, slot_id: str, doctor_id: str) -> Slot:
		slot = self.slots.find_by_id(slot_id)
		if slot is None:
			raise SlotNotFoundError("Slot not found.")
		if slot.doctor_id != doctor_id:
			raise SlotNotFoundError("Slot does not belong to this doctor.")
		return slot


def _format_time(value: time) -> str:
	return value.strftime("%H:%M")
