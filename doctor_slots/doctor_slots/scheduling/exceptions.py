"""
Scheduling Errors

Excepciones del motor de agenda. Se lanzan en los servicios de scheduling
y se traducen a respuestas en la capa API (api/slot_management.py).
"""


class SlotError(Exception):
	"""Excepción base para errores del motor de slots."""

	http_status = 400
	error_kind = "error"

	def __init__(self, message: str):
		super().__init__(message)
		self.message = message


class SlotValidationError(SlotError):
	"""Campo requerido ausente o con formato inválido."""

	error_kind = "validation"


class SlotNotFoundError(SlotError):
	"""El slot no existe o no pertenece al doctor indicado."""

	http_status = 404
	error_kind = "not_found"


class SlotStateError(SlotError):
	"""El slot no está en el estado requerido para la transición."""

	http_status = 409
	error_kind = "state_conflict"


class SchedulingConflictError(SlotError):
	"""Un slot candidato se solapa con un slot existente."""

	http_status = 409
	error_kind = "scheduling_conflict"


class BookingRuleError(SlotError):
	"""Una regla de negocio rechazó la reserva."""

	error_kind = "business_rule"
