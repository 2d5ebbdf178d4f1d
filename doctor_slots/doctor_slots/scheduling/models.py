"""
Slot Data Model

Tipos del motor de agenda:
- Slot: intervalo reservable de un doctor en una fecha
- AuditEntry: registro inmutable de una acción sobre un slot
- Enums cerrados para estado, tipo de acceso y acciones
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from enum import Enum
from typing import List, Optional


class SlotStatus(str, Enum):
	AVAILABLE = "AVAILABLE"
	PENDING = "PENDING"
	BOOKED = "BOOKED"
	BLOCKED = "BLOCKED"


class AccessType(str, Enum):
	NORMAL = "NORMAL"
	WALK_IN = "WALK_IN"
	EMERGENCY = "EMERGENCY"


class SlotAction(str, Enum):
	"""Acciones aceptadas por el endpoint de gestión de slots."""

	CREATE_SLOTS = "CREATE_SLOTS"
	BLOCK_DATE = "BLOCK_DATE"
	DELETE_SLOTS = "DELETE_SLOTS"
	BOOK_SLOT = "BOOK_SLOT"
	LOCK_SLOT = "LOCK_SLOT"
	MARK_UNAVAILABLE = "MARK_UNAVAILABLE"
	RECOMMEND_SLOT = "RECOMMEND_SLOT"
	BULK_DELETE = "BULK_DELETE"


@dataclass
class Slot:
	"""
	Slot de agenda de un doctor.

	slot_id lo asigna el repositorio al guardar por primera vez.
	locked_at solo tiene valor mientras el slot está PENDING.
	"""

	doctor_id: str
	slot_date: date
	start_time: time
	end_time: time
	slot_type: Optional[str] = None
	access_type: AccessType = AccessType.NORMAL
	slot_status: SlotStatus = SlotStatus.AVAILABLE
	location: Optional[str] = None
	notes: Optional[str] = None
	locked_at: Optional[datetime] = None
	slot_id: Optional[str] = None

	def copy(self) -> "Slot":
		return replace(self)

	def describe_interval(self) -> str:
		return f"{self.start_time.strftime('%H:%M')} to {self.end_time.strftime('%H:%M')}"


@dataclass(frozen=True)
class AuditEntry:
	slot_id: Optional[str]
	doctor_id: str
	action: str
	message: str
	performed_by: str
	timestamp: datetime


@dataclass
class SlotManagementRequest:
	"""
	Bolsa plana de parámetros de una acción.

	Cada acción consume solo los campos que necesita; el resto se ignora.
	Para RECOMMEND_SLOT, start_date es la fecha preferida.
	"""

	action: Optional[SlotAction] = None
	slot_id: Optional[str] = None
	doctor_id: Optional[str] = None
	start_date: Optional[date] = None
	end_date: Optional[date] = None
	slot_duration: Optional[int] = None
	slot_type: Optional[str] = None
	access_type: Optional[AccessType] = None
	location: Optional[str] = None
	notes: Optional[str] = None


@dataclass
class ActionResult:
	"""Resultado exitoso de una acción: mensaje para el usuario + slots afectados."""

	message: str
	count: int = 0
	slots: List[Slot] = field(default_factory=list)
