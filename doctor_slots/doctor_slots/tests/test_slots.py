"""
Tests for scheduling/slots.py

Tests slot generation over the daily working window.
"""

import unittest
from datetime import date, time

from doctor_slots.doctor_slots.scheduling.exceptions import SchedulingConflictError, SlotValidationError
from doctor_slots.doctor_slots.scheduling.models import AccessType, SlotStatus
from doctor_slots.doctor_slots.scheduling.policy import SchedulingPolicy
from doctor_slots.doctor_slots.scheduling.slots import generate_slots, iter_dates

from .factories import DOCTOR, OTHER_DOCTOR, TOMORROW, make_slot


class TestSlots(unittest.TestCase):
	"""Tests for slot generation functions."""

	def _generate(self, duration, existing=None, start=TOMORROW, end=TOMORROW, **kwargs):
		return generate_slots(DOCTOR, start, end, duration, "CONSULTATION", existing or [], **kwargs)

	def test_sixty_minute_slots(self):
		"""Test that 60 minutes yields exactly four slots 09-13."""
		slots = self._generate(60)

		self.assertEqual(
			[(slot.start_time, slot.end_time) for slot in slots],
			[
				(time(9, 0), time(10, 0)),
				(time(10, 0), time(11, 0)),
				(time(11, 0), time(12, 0)),
				(time(12, 0), time(13, 0)),
			]
		)

	def test_generated_slot_defaults(self):
		"""Test status, access type and descriptive fields of new slots."""
		slots = self._generate(60, location="Room 4", notes="Bring reports")

		for slot in slots:
			self.assertEqual(slot.slot_status, SlotStatus.AVAILABLE)
			self.assertEqual(slot.access_type, AccessType.NORMAL)
			self.assertEqual(slot.doctor_id, DOCTOR)
			self.assertEqual(slot.slot_type, "CONSULTATION")
			self.assertEqual(slot.location, "Room 4")
			self.assertEqual(slot.notes, "Bring reports")
			self.assertIsNone(slot.slot_id)
			self.assertIsNone(slot.locked_at)

	def test_explicit_access_type(self):
		slots = self._generate(120, access_type=AccessType.WALK_IN)
		self.assertEqual({slot.access_type for slot in slots}, {AccessType.WALK_IN})

	def test_partial_last_slot_is_dropped(self):
		"""Test that 45 minutes drops the trailing 12:45-13:30 candidate."""
		slots = self._generate(45)

		self.assertEqual(len(slots), 5)
		self.assertEqual(slots[-1].start_time, time(12, 0))
		self.assertEqual(slots[-1].end_time, time(12, 45))

	def test_duration_longer_than_window(self):
		"""Test that a duration over four hours yields nothing."""
		self.assertEqual(self._generate(300), [])

	def test_inclusive_date_range(self):
		"""Test that both ends of the range get slots."""
		slots = self._generate(60, start=date(2026, 10, 20), end=date(2026, 10, 22))

		self.assertEqual(len(slots), 12)
		self.assertEqual(
			sorted({slot.slot_date for slot in slots}),
			[date(2026, 10, 20), date(2026, 10, 21), date(2026, 10, 22)]
		)

	def test_conflict_aborts_whole_batch(self):
		"""Test fail-fast rejection on the first overlapping candidate."""
		existing = [make_slot("11:30", "12:00", slot_date=date(2026, 10, 21))]

		with self.assertRaises(SchedulingConflictError) as ctx:
			self._generate(60, existing, start=date(2026, 10, 20), end=date(2026, 10, 22))

		self.assertEqual(
			ctx.exception.message,
			"Conflict: Slot for 2026-10-21 from 11:00 to 12:00 overlaps with existing slot(s)."
		)

	def test_adjacent_existing_slot_is_not_a_conflict(self):
		"""Test that an existing 13:00-14:00 slot does not block the window."""
		existing = [make_slot("13:00", "14:00"), make_slot("08:00", "09:00")]
		self.assertEqual(len(self._generate(60, existing)), 4)

	def test_other_doctor_slots_are_ignored(self):
		existing = [make_slot("09:00", "13:00", doctor_id=OTHER_DOCTOR)]
		self.assertEqual(len(self._generate(60, existing)), 4)

	def test_invalid_duration(self):
		with self.assertRaises(SlotValidationError):
			self._generate(0)
		with self.assertRaises(SlotValidationError):
			self._generate(-15)

	def test_inverted_range(self):
		with self.assertRaises(SlotValidationError):
			self._generate(60, start=date(2026, 10, 22), end=date(2026, 10, 20))

	def test_custom_window(self):
		"""Test generation with a policy window of 14:00-16:00."""
		policy = SchedulingPolicy(workday_start=time(14, 0), workday_end=time(16, 0))
		slots = self._generate(30, policy=policy)

		self.assertEqual(len(slots), 4)
		self.assertEqual(slots[0].start_time, time(14, 0))
		self.assertEqual(slots[-1].end_time, time(16, 0))

	def test_iter_dates_single_day(self):
		self.assertEqual(list(iter_dates(TOMORROW, TOMORROW)), [TOMORROW])

	def test_iter_dates_ends_on_last_supported_date(self):
		"""Test that the range may end on date.max."""
		self.assertEqual(
			list(iter_dates(date(9999, 12, 30), date.max)),
			[date(9999, 12, 30), date.max]
		)

	def test_range_ending_on_last_supported_date(self):
		slots = self._generate(60, start=date(9999, 12, 30), end=date.max)

		self.assertEqual(len(slots), 8)
		self.assertEqual(slots[-1].slot_date, date.max)
		self.assertEqual(slots[-1].end_time, time(13, 0))

	def test_huge_duration_yields_nothing(self):
		"""Test that a duration far beyond the window is not added to a datetime."""
		self.assertEqual(self._generate(10 ** 12), [])
		self.assertEqual(self._generate(10 ** 12, start=date.max, end=date.max), [])

	def test_wide_window_on_last_supported_date(self):
		"""Test that the walk stops without stepping past the window end."""
		policy = SchedulingPolicy(workday_start=time(0, 0), workday_end=time(23, 59))
		slots = self._generate(1000, start=date.max, end=date.max, policy=policy)

		self.assertEqual([(slot.start_time, slot.end_time) for slot in slots], [(time(0, 0), time(16, 40))])


def run_tests():
	"""Run all tests in this module."""
	unittest.main()
