# Copyright (c) 2026, Doctor Slots contributors
# For license information, please see license.txt

"""
Slot Scheduling Settings DocType (Single)

Sobreescribe la ventana de trabajo y las reglas de reserva.
Campos vacíos usan los valores por defecto del motor (scheduling/policy.py).
"""

import frappe
from frappe import _
from frappe.model.document import Document

from doctor_slots.doctor_slots.scheduling.frappe_backend import to_time


class SlotSchedulingSettings(Document):
	def validate(self) -> None:
		self._validate_workday()
		self._validate_non_negative()

	def _validate_workday(self) -> None:
		"""Valida workday_start < workday_end si ambos están presentes."""
		if self.workday_start and self.workday_end:
			start = to_time(self.workday_start)
			end = to_time(self.workday_end)

			if start >= end:
				frappe.throw(
					_("Workday Start ({0}) must be before Workday End ({1})").format(
						start.strftime("%H:%M"), end.strftime("%H:%M")
					)
				)

	def _validate_non_negative(self) -> None:
		for fieldname in ("max_daily_bookings", "min_gap_minutes", "max_advance_days"):
			value = self.get(fieldname)
			if value is not None and value < 0:
				frappe.throw(_("{0} cannot be negative").format(self.meta.get_label(fieldname)))
