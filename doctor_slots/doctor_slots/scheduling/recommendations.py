"""
Slot Recommendation

Consultas de solo lectura sobre los slots de un doctor.
"""

from datetime import date
from typing import Iterable, List, Optional

from .models import Slot, SlotStatus


def available_slots_for_day(slots: Iterable[Slot], doctor_id: str, target_date: date) -> List[Slot]:
	"""Slots AVAILABLE del doctor en la fecha, ordenados por hora de inicio."""
	available = [
		slot
		for slot in slots
		if slot.doctor_id == doctor_id
		and slot.slot_date == target_date
		and slot.slot_status == SlotStatus.AVAILABLE
	]
	available.sort(key=lambda slot: slot.start_time)
	return available


def recommend_slot(slots: Iterable[Slot], doctor_id: str, target_date: date) -> Optional[Slot]:
	"""El slot disponible más temprano, o None si no hay ninguno."""
	available = available_slots_for_day(slots, doctor_id, target_date)
	return available[0] if available else None
