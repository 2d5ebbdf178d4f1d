# Copyright (c) 2026, Doctor Slots contributors
# For license information, please see license.txt

"""
Doctor Slot Audit Log DocType

Registro append-only de las acciones sobre slots.
Una vez insertado no se modifica ni se borra.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from doctor_slots.doctor_slots.scheduling.audit import SYSTEM_ACTOR


class DoctorSlotAuditLog(Document):
	def before_insert(self) -> None:
		if not self.performed_by:
			self.performed_by = SYSTEM_ACTOR
		if not self.timestamp:
			self.timestamp = frappe.utils.now_datetime()

	def validate(self) -> None:
		if not self.is_new():
			frappe.throw(_("Audit log entries cannot be modified"))

		if not self.action:
			frappe.throw(_("Action is required"))

	def on_trash(self) -> None:
		frappe.throw(_("Audit log entries cannot be deleted"))
