"""
Slot Generation Service

Genera slots discretos para un rango de fechas usando la ventana
de trabajo diaria fija y una duración en minutos.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, List, Optional

from .exceptions import SchedulingConflictError, SlotValidationError
from .models import AccessType, Slot, SlotStatus
from .overlap import find_conflicts
from .policy import DEFAULT_POLICY, SchedulingPolicy


def iter_dates(start_date: date, end_date: date) -> Iterator[date]:
	"""Fechas del rango inclusivo [start_date, end_date], sin pasar de end_date."""
	if start_date > end_date:
		return

	current_date = start_date
	while True:
		yield current_date
		if current_date >= end_date:
			return
		current_date += timedelta(days=1)


def generate_slots(
	doctor_id: str,
	start_date: date,
	end_date: date,
	slot_duration: int,
	slot_type: Optional[str],
	existing_slots: Iterable[Slot],
	access_type: Optional[AccessType] = None,
	location: Optional[str] = None,
	notes: Optional[str] = None,
	policy: SchedulingPolicy = DEFAULT_POLICY
) -> List[Slot]:
	"""
	Genera los slots candidatos del rango, sin persistirlos.

	Args:
		doctor_id: doctor dueño de los slots
		start_date: fecha inicial (inclusive)
		end_date: fecha final (inclusive)
		slot_duration: duración de cada slot en minutos
		slot_type: etiqueta libre
		existing_slots: slots ya persistidos contra los que se valida conflicto
		access_type: NORMAL por defecto

	Returns:
		list[Slot]: slots AVAILABLE ordenados por fecha y hora

	Raises:
		SlotValidationError: rango invertido o duración no positiva
		SchedulingConflictError: el primer candidato en conflicto aborta todo el batch

	Algoritmo:
		1. Para cada fecha del rango, recorrer la ventana workday_start..workday_end
		2. Emitir un candidato mientras su fin no pase del cierre de la ventana
		   (un último slot parcial se descarta)
		3. Validar cada candidato contra los slots existentes
	"""
	if start_date > end_date:
		raise SlotValidationError("startDate must be on or before endDate.")
	if slot_duration is None or slot_duration <= 0:
		raise SlotValidationError("slotDuration must be greater than zero.")

	# Una duración mayor que la ventana no produce slots en ningún día
	if slot_duration > window_minutes(policy):
		return []

	existing_slots = list(existing_slots)
	step = timedelta(minutes=slot_duration)
	slots = []

	for slot_date in iter_dates(start_date, end_date):
		current_start = datetime.combine(slot_date, policy.workday_start)
		window_end = datetime.combine(slot_date, policy.workday_end)

		while window_end - current_start >= step:
			current_end = current_start + step

			slot = Slot(
				doctor_id=doctor_id,
				slot_date=slot_date,
				start_time=current_start.time(),
				end_time=current_end.time(),
				slot_type=slot_type,
				access_type=access_type or AccessType.NORMAL,
				slot_status=SlotStatus.AVAILABLE,
				location=location,
				notes=notes
			)

			if find_conflicts(existing_slots, doctor_id, slot_date, slot.start_time, slot.end_time):
				raise SchedulingConflictError(
					f"Conflict: Slot for {slot_date.isoformat()} from {slot.describe_interval()} "
					f"overlaps with existing slot(s)."
				)

			slots.append(slot)
			current_start = current_end

	return slots


def window_minutes(policy: SchedulingPolicy) -> int:
	"""Minutos de la ventana de trabajo diaria."""
	window_start = datetime.combine(date.min, policy.workday_start)
	window_end = datetime.combine(date.min, policy.workday_end)
	return int((window_end - window_start).total_seconds() // 60)
