# Copyright (c) 2026, Doctor Slots contributors
# For license information, please see license.txt

"""
Doctor Slot DocType

Slot de agenda de un doctor. El motor (scheduling/) lo lee y escribe vía
FrappeSlotRepository; este controller valida lo que llega desde el desk.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from doctor_slots.doctor_slots.scheduling.frappe_backend import SLOT_DOCTYPE, slot_from_doc, to_time
from doctor_slots.doctor_slots.scheduling.models import AccessType, SlotStatus
from doctor_slots.doctor_slots.scheduling.overlap import find_conflicts


class DoctorSlot(Document):
	"""
	Doctor Slot with validations.

	Validations:
	- doctor, slot_date, start_time, end_time required
	- start_time < end_time
	- slot_status / access_type within the closed enums
	- locked_at only kept while PENDING
	- No overlap with other slots of the same doctor/date (on insert only)
	"""

	def validate(self) -> None:
		self._validate_required_fields()
		self._validate_times()
		self._set_defaults()
		self._validate_enums()
		self._sync_locked_at()

		if self.is_new():
			self._validate_no_overlap()

	def _validate_required_fields(self) -> None:
		for fieldname, label in (
			("doctor", "Doctor"),
			("slot_date", "Slot Date"),
			("start_time", "Start Time"),
			("end_time", "End Time"),
		):
			if not self.get(fieldname):
				frappe.throw(_("{0} is required").format(label))

	def _validate_times(self) -> None:
		start = to_time(self.start_time)
		end = to_time(self.end_time)

		if start >= end:
			frappe.throw(
				_("Start Time ({0}) must be before End Time ({1})").format(
					start.strftime("%H:%M"), end.strftime("%H:%M")
				)
			)

	def _set_defaults(self) -> None:
		if not self.slot_status:
			self.slot_status = SlotStatus.AVAILABLE.value
		if not self.access_type:
			self.access_type = AccessType.NORMAL.value

	def _validate_enums(self) -> None:
		if self.slot_status not in {status.value for status in SlotStatus}:
			frappe.throw(_("Invalid Slot Status: {0}").format(self.slot_status))
		if self.access_type not in {access.value for access in AccessType}:
			frappe.throw(_("Invalid Access Type: {0}").format(self.access_type))

	def _sync_locked_at(self) -> None:
		if self.slot_status != SlotStatus.PENDING.value:
			self.locked_at = None

	def _validate_no_overlap(self) -> None:
		"""
		El invariante de no-overlap se valida solo al crear el slot.
		"""
		existing = frappe.get_all(
			SLOT_DOCTYPE,
			filters={"doctor": self.doctor, "slot_date": self.slot_date},
			fields=["name", "doctor", "slot_date", "start_time", "end_time", "slot_status", "access_type"]
		)

		candidate = slot_from_doc(self)
		conflicts = find_conflicts(
			[slot_from_doc(row) for row in existing],
			candidate.doctor_id,
			candidate.slot_date,
			candidate.start_time,
			candidate.end_time
		)

		if conflicts:
			frappe.throw(
				_("Conflict: Slot for {0} from {1} overlaps with existing slot(s): {2}").format(
					candidate.slot_date.isoformat(),
					candidate.describe_interval(),
					", ".join(slot.slot_id for slot in conflicts)
				)
			)
