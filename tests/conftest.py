from datetime import date

import pytest

from core.models import AttendanceRecord, Subject, TimetableSlot


@pytest.fixture
def today():
    # a Wednesday; the next Mondays are 2025-01-06 and 2025-01-13
    return date(2025, 1, 1)


@pytest.fixture
def subjects():
    return [
        Subject(id=1, name="Mathematics", color="#EF4444"),
        Subject(id=2, name="Physics", color="#10B981"),
    ]


@pytest.fixture
def slots():
    return [
        TimetableSlot(id=1, subject_id=1, day_of_week="monday", period_start=1),
        TimetableSlot(id=2, subject_id=1, day_of_week="wednesday", period_start=2),
        TimetableSlot(id=3, subject_id=1, day_of_week="wednesday", period_start=5),
        TimetableSlot(id=4, subject_id=2, day_of_week="tuesday", period_start=3, period_end=4, merged=True),
    ]


@pytest.fixture
def make_records():
    def _make(subject_id, present, absent, day=date(2024, 12, 2)):
        rows = [AttendanceRecord(subject_id, day, "present", count=1) for _ in range(present)]
        rows += [AttendanceRecord(subject_id, day, "absent", count=1) for _ in range(absent)]
        return rows
    return _make
