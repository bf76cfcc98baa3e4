from datetime import date

import pytest

from core.attendance_logic import aggregate
from core.exceptions import ValidationError
from core.models import AttendanceRecord, AttendanceStatus
from core.records import (
    bulk_import,
    clear_records,
    mark_attendance,
    records_for,
    scheduled_periods,
    unmark_attendance,
)

WEDNESDAY = date(2025, 1, 8)
TUESDAY = date(2025, 1, 7)
SUNDAY = date(2025, 1, 5)


def test_scheduled_periods_follow_slot_starts(slots):
    assert scheduled_periods(slots, 1, WEDNESDAY) == [2, 5]
    assert scheduled_periods(slots, 2, TUESDAY) == [3]
    assert scheduled_periods(slots, 1, SUNDAY) == []


def test_mark_attendance_writes_one_record_per_class(slots):
    records = mark_attendance([], slots, 1, WEDNESDAY, "present")

    assert [r.period for r in records] == [2, 5]
    assert all(r.count == 1 for r in records)
    assert aggregate(records).present_units == 2


def test_mark_attendance_replaces_the_day(slots):
    records = mark_attendance([], slots, 1, WEDNESDAY, "present")
    records = mark_attendance(records, slots, 1, WEDNESDAY, "absent")

    assert len(records) == 2
    assert {r.status for r in records} == {AttendanceStatus.ABSENT}


def test_mark_attendance_without_timetable_uses_single_record(slots):
    records = mark_attendance([], slots, 1, SUNDAY, "present")

    assert len(records) == 1
    assert records[0].period is None


def test_mark_attendance_accepts_iso_date(slots):
    records = mark_attendance([], slots, 2, "2025-01-07", "holiday")
    assert records[0].date == TUESDAY
    assert records[0].status is AttendanceStatus.HOLIDAY


def test_mark_attendance_rejects_bad_status(slots):
    with pytest.raises(ValidationError):
        mark_attendance([], slots, 1, WEDNESDAY, "late")


def test_unmark_only_touches_that_subject_and_day(slots):
    records = mark_attendance([], slots, 1, WEDNESDAY, "present")
    records = mark_attendance(records, slots, 2, TUESDAY, "present")

    records = unmark_attendance(records, 1, WEDNESDAY)

    assert [r.subject_id for r in records] == [2]


def test_bulk_import_fills_periods_in_order(slots):
    # Mathematics has no Tuesday class: one period-less record, then duplicates
    dates = [WEDNESDAY, WEDNESDAY, WEDNESDAY, TUESDAY, TUESDAY]

    result = bulk_import([], slots, 1, dates, "present")

    assert result.imported == 3
    assert result.duplicates == [WEDNESDAY, TUESDAY]
    assert [r.period for r in result.records] == [2, 5, None]


def test_bulk_import_respects_existing_records(slots):
    existing = [AttendanceRecord(1, WEDNESDAY, "absent", period=2)]

    result = bulk_import(existing, slots, 1, [WEDNESDAY], "present")

    assert result.imported == 1
    assert result.records[-1].period == 5
    assert result.records[-1].status is AttendanceStatus.PRESENT


def test_bulk_import_does_not_mutate_input(slots):
    existing = []
    bulk_import(existing, slots, 1, [WEDNESDAY], "present")
    assert existing == []


def test_clear_records_by_status(slots):
    records = mark_attendance([], slots, 1, WEDNESDAY, "present")
    records = mark_attendance(records, slots, 1, date(2025, 1, 6), "absent")
    records = mark_attendance(records, slots, 2, TUESDAY, "absent")

    kept, removed = clear_records(records, 1, "absent")

    assert removed == 1
    assert len(kept) == 3

    kept, removed = clear_records(kept, 1, "all")

    assert removed == 2
    assert [r.subject_id for r in kept] == [2]


def test_clear_records_with_nothing_to_remove():
    kept, removed = clear_records([], 1, "present")
    assert kept == [] and removed == 0


def test_records_for_sorts_by_date_and_period(slots):
    records = mark_attendance([], slots, 1, WEDNESDAY, "present")
    records = mark_attendance(records, slots, 1, date(2025, 1, 6), "present")

    rows = records_for(records, 1)

    assert [(r.date.day, r.period) for r in rows] == [(6, 1), (8, 2), (8, 5)]
    assert len(records_for(records, 1, WEDNESDAY)) == 2
