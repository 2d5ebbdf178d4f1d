"""
Clock

Fuente de "ahora" para las reglas de corte y el audit log.
La implementación sobre Frappe vive en frappe_backend.FrappeClock.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta


class Clock(ABC):
	@abstractmethod
	def now(self) -> datetime:
		"""Fecha y hora actual (naive, hora local del sistema)."""
		pass


class FixedClock(Clock):
	"""Reloj detenido en un instante dado; se puede adelantar manualmente."""

	def __init__(self, current: datetime):
		self.current = current

	def now(self) -> datetime:
		return self.current

	def advance(self, **kwargs) -> None:
		self.current = self.current + timedelta(**kwargs)
