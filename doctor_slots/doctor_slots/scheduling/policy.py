"""
Scheduling Policy

Constantes de la ventana de trabajo y de las reglas de reserva.
En Frappe se pueden sobreescribir desde Slot Scheduling Settings.
"""

from dataclasses import dataclass
from datetime import time


@dataclass(frozen=True)
class SchedulingPolicy:
	workday_start: time = time(9, 0)
	workday_end: time = time(13, 0)
	max_daily_bookings: int = 10
	min_gap_minutes: int = 15
	max_advance_days: int = 7
	same_day_cutoff: time = time(17, 0)


DEFAULT_POLICY = SchedulingPolicy()
