"""
Repository Ports

Interfaces de persistencia que el motor necesita:
- SlotRepository: lectura, guardado y borrado de slots
- AuditLogRepository: append del audit log

InMemory* son implementaciones en memoria (tests y uso sin Frappe).
La implementación sobre DocTypes está en frappe_backend.py.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, Iterable, List, Optional

from .models import AuditEntry, Slot


class SlotRepository(ABC):
	"""
	Interfaz base para repositorios de slots.

	Los slots retornados son copias: modificarlos no cambia nada
	hasta llamar save/save_all.
	"""

	@abstractmethod
	def find_all(self) -> List[Slot]:
		pass

	@abstractmethod
	def find_by_id(self, slot_id: str) -> Optional[Slot]:
		pass

	@abstractmethod
	def find_by_doctor_and_date_range(self, doctor_id: str, start_date: date, end_date: date) -> List[Slot]:
		"""Slots del doctor con start_date <= slot_date <= end_date."""
		pass

	@abstractmethod
	def save(self, slot: Slot) -> Slot:
		"""Inserta o actualiza; asigna slot_id si el slot es nuevo."""
		pass

	@abstractmethod
	def save_all(self, slots: Iterable[Slot]) -> List[Slot]:
		pass

	@abstractmethod
	def delete_all(self, slots: Iterable[Slot]) -> None:
		pass


class AuditLogRepository(ABC):
	@abstractmethod
	def save(self, entry: AuditEntry) -> AuditEntry:
		pass


class InMemorySlotRepository(SlotRepository):
	def __init__(self, slots: Optional[Iterable[Slot]] = None):
		self._slots: Dict[str, Slot] = {}
		self._sequence = 0
		for slot in slots or []:
			self.save(slot)

	def _next_id(self) -> str:
		self._sequence += 1
		return f"SLOT-{self._sequence:05d}"

	def find_all(self) -> List[Slot]:
		return [slot.copy() for slot in self._slots.values()]

	def find_by_id(self, slot_id: str) -> Optional[Slot]:
		slot = self._slots.get(slot_id)
		return slot.copy() if slot else None

	def find_by_doctor_and_date_range(self, doctor_id: str, start_date: date, end_date: date) -> List[Slot]:
		return [
			slot.copy()
			for slot in self._slots.values()
			if slot.doctor_id == doctor_id and start_date <= slot.slot_date <= end_date
		]

	def save(self, slot: Slot) -> Slot:
		if not slot.slot_id:
			slot.slot_id = self._next_id()
		self._slots[slot.slot_id] = slot.copy()
		return slot

	def save_all(self, slots: Iterable[Slot]) -> List[Slot]:
		return [self.save(slot) for slot in slots]

	def delete_all(self, slots: Iterable[Slot]) -> None:
		for slot in slots:
			self._slots.pop(slot.slot_id, None)

	def __len__(self) -> int:
		return len(self._slots)


class InMemoryAuditLogRepository(AuditLogRepository):
	def __init__(self):
		self.entries: List[AuditEntry] = []

	def save(self, entry: AuditEntry) -> AuditEntry:
		self.entries.append(entry)
		return entry

	def actions(self) -> List[str]:
		return [entry.action for entry in self.entries]
