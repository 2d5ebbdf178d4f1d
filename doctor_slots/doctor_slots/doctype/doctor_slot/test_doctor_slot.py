# Copyright (c) 2026, Doctor Slots contributors
# See license.txt

"""
Tests for Doctor Slot DocType

Tests DocType validation, the audit log DocType and the
slot management endpoint running on a site.
"""

import frappe
from contextlib import contextmanager
from frappe.tests.utils import FrappeTestCase
from frappe.utils import add_days, getdate
from unittest.mock import patch

from doctor_slots.api.slot_management import handle_slot_action
from doctor_slots.doctor_slots.scheduling import frappe_backend
from doctor_slots.doctor_slots.scheduling.frappe_backend import AUDIT_DOCTYPE, SLOT_DOCTYPE
from doctor_slots.doctor_slots.scheduling.policy import DEFAULT_POLICY

TEST_DOCTOR = "TEST-DR-SLOTS"


class TestDoctorSlot(FrappeTestCase):
	"""Tests for Doctor Slot DocType."""

	def setUp(self):
		"""Remove slots left by previous tests."""
		for name in frappe.get_all(SLOT_DOCTYPE, filters={"doctor": TEST_DOCTOR}, pluck="name"):
			frappe.delete_doc(SLOT_DOCTYPE, name, ignore_permissions=True, force=True)

		self.slot_date = add_days(getdate(), 1)

	def _make_slot(self, start_time, end_time, **kwargs):
		return frappe.get_doc({
			"doctype": SLOT_DOCTYPE,
			"doctor": TEST_DOCTOR,
			"slot_date": self.slot_date,
			"start_time": start_time,
			"end_time": end_time,
			"slot_type": "CONSULTATION",
			**kwargs
		})

	def test_start_must_be_before_end(self):
		"""Test that start_time must be before end_time."""
		slot = self._make_slot("10:00:00", "10:00:00")

		with self.assertRaises(frappe.ValidationError):
			slot.insert(ignore_permissions=True)

	def test_defaults(self):
		"""Test that status and access type default to AVAILABLE / NORMAL."""
		slot = self._make_slot("09:00:00", "09:30:00").insert(ignore_permissions=True)

		self.assertEqual(slot.slot_status, "AVAILABLE")
		self.assertEqual(slot.access_type, "NORMAL")

	def test_overlap_rejected_on_insert(self):
		"""Test that overlapping slots of the same doctor are rejected."""
		self._make_slot("09:00:00", "10:00:00").insert(ignore_permissions=True)

		with self.assertRaises(frappe.ValidationError):
			self._make_slot("09:30:00", "10:30:00").insert(ignore_permissions=True)

		# Extremos que se tocan no se solapan
		self._make_slot("10:00:00", "10:30:00").insert(ignore_permissions=True)

	def test_locked_at_cleared_unless_pending(self):
		slot = self._make_slot(
			"11:00:00", "11:30:00", slot_status="BOOKED", locked_at=frappe.utils.now_datetime()
		).insert(ignore_permissions=True)

		self.assertIsNone(slot.locked_at)

	def test_invalid_access_type(self):
		with self.assertRaises(frappe.ValidationError):
			self._make_slot("12:00:00", "12:30:00", access_type="VIP").insert(ignore_permissions=True)

	def test_audit_log_is_append_only(self):
		"""Test that audit entries cannot be modified or deleted."""
		entry = frappe.get_doc({
			"doctype": AUDIT_DOCTYPE,
			"slot": "SLOT-00001",
			"doctor": TEST_DOCTOR,
			"action": "CREATE_SLOT",
			"message": "Slot created."
		}).insert(ignore_permissions=True)

		self.assertEqual(entry.performed_by, "system")
		self.assertIsNotNone(entry.timestamp)

		entry.message = "Changed"
		with self.assertRaises(frappe.ValidationError):
			entry.save(ignore_permissions=True)

		with self.assertRaises(frappe.ValidationError):
			frappe.delete_doc(AUDIT_DOCTYPE, entry.name, ignore_permissions=True)


class TestSlotManagementAPI(FrappeTestCase):
	"""Tests for the slot management endpoint."""

	def setUp(self):
		for name in frappe.get_all(SLOT_DOCTYPE, filters={"doctor": TEST_DOCTOR}, pluck="name"):
			frappe.delete_doc(SLOT_DOCTYPE, name, ignore_permissions=True, force=True)

		self.slot_date = str(add_days(getdate(), 1))

	def _create(self, duration=60):
		return handle_slot_action(
			action="CREATE_SLOTS",
			doctorId=TEST_DOCTOR,
			startDate=self.slot_date,
			endDate=self.slot_date,
			slotDuration=duration,
			slotType="CONSULTATION"
		)

	def test_create_slots(self):
		result = self._create()

		self.assertTrue(result["success"])
		self.assertEqual(result["message"], "Created 4 slots.")
		self.assertEqual(frappe.db.count(SLOT_DOCTYPE, {"doctor": TEST_DOCTOR}), 4)

		slot_names = [slot["slot_id"] for slot in result["slots"]]
		self.assertEqual(
			frappe.db.count(AUDIT_DOCTYPE, {"slot": ["in", slot_names], "action": "CREATE_SLOT"}),
			4
		)

	def test_book_slot(self):
		slot_id = self._create()["slots"][0]["slot_id"]

		result = handle_slot_action(action="BOOK_SLOT", doctorId=TEST_DOCTOR, slotId=slot_id)

		self.assertTrue(result["success"])
		self.assertEqual(frappe.db.get_value(SLOT_DOCTYPE, slot_id, "slot_status"), "BOOKED")

	def test_unknown_action(self):
		result = handle_slot_action(action="CANCEL_SLOT", doctorId=TEST_DOCTOR)

		self.assertFalse(result["success"])
		self.assertEqual(result["error"], "validation")
		self.assertEqual(result["message"], "Unsupported action.")
		self.assertEqual(frappe.local.response["http_status_code"], 400)

	def test_unknown_slot(self):
		result = handle_slot_action(action="LOCK_SLOT", doctorId=TEST_DOCTOR, slotId="SLOT-UNKNOWN")

		self.assertFalse(result["success"])
		self.assertEqual(result["error"], "not_found")
		self.assertEqual(frappe.local.response["http_status_code"], 404)

	def test_unsafe_identifier(self):
		result = handle_slot_action(action="BOOK_SLOT", doctorId="DR; DROP TABLE", slotId="SLOT-00001")

		self.assertFalse(result["success"])
		self.assertEqual(result["error"], "validation")

	def test_too_long_location_is_rejected(self):
		"""Test that free text over its limit is rejected, not truncated."""
		result = handle_slot_action(
			action="CREATE_SLOTS",
			doctorId=TEST_DOCTOR,
			startDate=self.slot_date,
			endDate=self.slot_date,
			slotDuration=60,
			slotType="CONSULTATION",
			location="x" * 141
		)

		self.assertFalse(result["success"])
		self.assertEqual(result["error"], "validation")
		self.assertEqual(frappe.db.count(SLOT_DOCTYPE, {"doctor": TEST_DOCTOR}), 0)

	def test_location_at_limit_is_kept(self):
		result = handle_slot_action(
			action="CREATE_SLOTS",
			doctorId=TEST_DOCTOR,
			startDate=self.slot_date,
			endDate=self.slot_date,
			slotDuration=120,
			slotType="CONSULTATION",
			location="x" * 140
		)

		self.assertTrue(result["success"])
		self.assertEqual(result["slots"][0]["location"], "x" * 140)


class TestFrappeBackend(FrappeTestCase):
	"""Tests for the per-doctor lock and the settings policy."""

	def _patch_transaction(self, events):
		@contextmanager
		def recording_filelock(name, timeout=None):
			events.append("acquire")
			try:
				yield
			finally:
				events.append("release")

		return (
			patch.object(frappe_backend, "filelock", recording_filelock),
			patch.object(frappe.local.db, "commit", side_effect=lambda *args, **kwargs: events.append("commit")),
			patch.object(frappe.local.db, "rollback", side_effect=lambda *args, **kwargs: events.append("rollback")),
		)

	def test_doctor_lock_commits_before_release(self):
		"""Test that the transaction is committed while the lock is held."""
		events = []
		lock_patch, commit_patch, rollback_patch = self._patch_transaction(events)

		with lock_patch, commit_patch, rollback_patch:
			with frappe_backend.doctor_lock(TEST_DOCTOR):
				events.append("write")

		self.assertEqual(events, ["acquire", "write", "commit", "release"])

	def test_doctor_lock_rolls_back_on_error(self):
		events = []
		lock_patch, commit_patch, rollback_patch = self._patch_transaction(events)

		with lock_patch, commit_patch, rollback_patch:
			with self.assertRaises(ValueError):
				with frappe_backend.doctor_lock(TEST_DOCTOR):
					events.append("write")
					raise ValueError("failed")

		self.assertEqual(events, ["acquire", "write", "rollback", "release"])

	def test_action_commits_inside_lock(self):
		"""Test that a mutating action reaches commit before the lock is released."""
		for name in frappe.get_all(SLOT_DOCTYPE, filters={"doctor": TEST_DOCTOR}, pluck="name"):
			frappe.delete_doc(SLOT_DOCTYPE, name, ignore_permissions=True, force=True)

		events = []
		lock_patch, commit_patch, rollback_patch = self._patch_transaction(events)
		slot_date = str(add_days(getdate(), 1))

		with lock_patch, commit_patch, rollback_patch:
			result = handle_slot_action(
				action="CREATE_SLOTS",
				doctorId=TEST_DOCTOR,
				startDate=slot_date,
				endDate=slot_date,
				slotDuration=120,
				slotType="CONSULTATION"
			)

		self.assertTrue(result["success"])
		self.assertEqual(events, ["acquire", "commit", "release"])

	def test_zero_settings_are_respected(self):
		"""Test that an explicit 0 overrides the default and an empty value does not."""
		settings = frappe._dict({
			"workday_start": None,
			"workday_end": None,
			"same_day_cutoff": None,
			"max_daily_bookings": None,
			"min_gap_minutes": 0,
			"max_advance_days": "",
		})

		with patch.object(frappe, "get_cached_doc", return_value=settings):
			policy = frappe_backend.load_policy()

		self.assertEqual(policy.min_gap_minutes, 0)
		self.assertEqual(policy.max_daily_bookings, DEFAULT_POLICY.max_daily_bookings)
		self.assertEqual(policy.max_advance_days, DEFAULT_POLICY.max_advance_days)
		self.assertEqual(policy.workday_start, DEFAULT_POLICY.workday_start)
