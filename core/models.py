from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from types import MappingProxyType
from typing import Optional

from core.exceptions import ValidationError

# Python weekday() order
WEEKDAYS = [
    "monday", "tuesday", "wednesday", "thursday",
    "friday", "saturday", "sunday",
]


class AttendanceStatus(str, Enum):
    """What happened to one class of a subject on a date."""

    PRESENT = "present"
    ABSENT = "absent"
    HOLIDAY = "holiday"


class DayMark(str, Enum):
    """Hypothetical exception placed on a future date by the predictor."""

    NORMAL = "normal"
    HOLIDAY = "holiday"  # college closed, class does not happen
    LEAVE = "leave"      # class happens, student is away


def parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {value!r}") from None


def parse_mark(value) -> DayMark:
    try:
        return DayMark(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown day mark: {value!r}") from None


@dataclass(frozen=True)
class Subject:
    id: int
    name: str
    color: str = "#3B82F6"


@dataclass(frozen=True)
class TimetableSlot:
    """
    One weekly block of a subject.
    period_end is inclusive; a merged slot spans several periods
    but still counts as a single class.
    """

    id: int
    subject_id: int
    day_of_week: str
    period_start: int
    period_end: Optional[int] = None
    merged: bool = False

    def __post_init__(self):
        day = str(self.day_of_week).strip().lower()
        if day not in WEEKDAYS:
            raise ValidationError(f"Unknown day of week: {self.day_of_week!r}")
        object.__setattr__(self, "day_of_week", day)

        if self.period_end is None:
            object.__setattr__(self, "period_end", self.period_start)

        if self.period_start < 1 or self.period_end < self.period_start:
            raise ValidationError(
                f"Invalid period range {self.period_start}-{self.period_end}"
            )

    @property
    def periods(self) -> range:
        return range(self.period_start, self.period_end + 1)

    def overlaps(self, period_start: int, period_end: int) -> bool:
        return self.period_start <= period_end and period_start <= self.period_end


@dataclass(frozen=True)
class AttendanceRecord:
    """One observation for a subject on a date."""

    subject_id: int
    date: date
    status: AttendanceStatus
    period: Optional[int] = None
    count: Optional[int] = 1

    def __post_init__(self):
        if not isinstance(self.status, AttendanceStatus):
            object.__setattr__(self, "status", parse_status(self.status))

        if self.count is not None and self.count < 0:
            raise ValidationError(f"Attendance count cannot be negative: {self.count}")

    @property
    def units(self) -> int:
        """Periods this record stands for. Missing or zero counts weigh 1."""
        if not self.count or self.count <= 0:
            return 1
        return self.count


@dataclass(frozen=True)
class Aggregate:
    present_units: int = 0
    total_units: int = 0
    percentage: float = 0


@dataclass(frozen=True)
class PredictionResult:
    subject: Subject
    current_attended: int
    current_total: int
    current_percentage: float
    classes_in_period: int
    attended_in_period: int
    future_total: int
    future_attended: int
    future_percentage: float
    percentage_change: float
    classes_for_target: int

    @property
    def missed_in_period(self) -> int:
        return self.classes_in_period - self.attended_in_period


class DayMarks(Mapping):
    """
    Immutable date -> DayMark map.

    A date holds at most one mark, so a date can never be both a
    holiday and a leave. Updates return a new DayMarks; NORMAL
    entries are dropped.
    """

    def __init__(self, marks=None):
        items = {}
        for day, mark in dict(marks or {}).items():
            if not isinstance(day, date):
                raise ValidationError(f"Day marks are keyed by date, got {day!r}")
            mark = parse_mark(mark)
            if mark is not DayMark.NORMAL:
                items[day] = mark
        self._marks = MappingProxyType(items)

    def __getitem__(self, day):
        return self._marks[day]

    def __iter__(self):
        return iter(sorted(self._marks))

    def __len__(self):
        return len(self._marks)

    def __repr__(self):
        inner = ", ".join(f"{d.isoformat()}: {m.value}" for d, m in self.items())
        return f"DayMarks({{{inner}}})"

    def mark_for(self, day) -> DayMark:
        return self._marks.get(day, DayMark.NORMAL)

    def with_mark(self, day, mark) -> "DayMarks":
        updated = dict(self._marks)
        updated[day] = parse_mark(mark)
        return DayMarks(updated)

    def toggle(self, day, mark) -> "DayMarks":
        """Set the mark, or clear it when the date already carries it."""
        mark = parse_mark(mark)
        if self.mark_for(day) is mark:
            return self.with_mark(day, DayMark.NORMAL)
        return self.with_mark(day, mark)

    @property
    def holidays(self) -> frozenset:
        return frozenset(d for d, m in self._marks.items() if m is DayMark.HOLIDAY)

    @property
    def leaves(self) -> frozenset:
        return frozenset(d for d, m in self._marks.items() if m is DayMark.LEAVE)
