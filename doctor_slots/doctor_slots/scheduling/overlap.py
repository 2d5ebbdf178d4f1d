"""
Overlap Detection Service

Detecta conflictos (overlaps) entre un intervalo candidato y los slots
existentes de un doctor en una fecha.
"""

from datetime import date, time
from typing import Iterable, List

from .models import Slot


def intervals_overlap(start: time, end: time, other_start: time, other_end: time) -> bool:
	"""
	Semántica half-open: [start, end) vs [other_start, other_end).

	Intervalos que solo se tocan en un extremo NO se solapan.
	"""
	return start < other_end and end > other_start


def find_conflicts(
	existing_slots: Iterable[Slot],
	doctor_id: str,
	slot_date: date,
	start_time: time,
	end_time: time
) -> List[Slot]:
	"""
	Retorna los slots existentes que se solapan con el intervalo candidato.

	Args:
		existing_slots: slots ya persistidos (puede incluir otros doctores/fechas)
		doctor_id: doctor del candidato
		slot_date: fecha del candidato
		start_time: inicio del candidato
		end_time: fin del candidato

	Returns:
		list[Slot]: slots en conflicto (vacío si no hay overlap)

	Algoritmo:
		1. Filtrar por doctor_id y slot_date
		2. Condición de overlap: start < other.end AND end > other.start
	"""
	return [
		slot
		for slot in existing_slots
		if slot.doctor_id == doctor_id
		and slot.slot_date == slot_date
		and intervals_overlap(start_time, end_time, slot.start_time, slot.end_time)
	]
