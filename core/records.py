"""
Attendance record bookkeeping.

Every record is one class of one subject on one date:
(subject, date, period) is unique and count is always 1.
"""
import logging
from dataclasses import dataclass, field

from core.calendar_logic import parse_date, weekday_name
from core.models import AttendanceRecord, parse_status
from core.timetable import slots_for_day

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    records: list
    imported: int = 0
    duplicates: list = field(default_factory=list)


def scheduled_periods(slots, subject_id, day):
    """
    Period numbers (slot starts) a subject occupies on this date.
    A merged slot contributes a single period.
    """
    return [
        s.period_start
        for s in slots_for_day(slots, weekday_name(day))
        if s.subject_id == subject_id
    ]


def records_for(records, subject_id, day=None):
    rows = [r for r in records if r.subject_id == subject_id]
    if day is not None:
        day = parse_date(day)
        rows = [r for r in rows if r.date == day]
    return sorted(rows, key=lambda r: (r.date, r.period or 0))


def mark_attendance(records, slots, subject_id, day, status):
    """
    Marks a whole day for a subject: one record per scheduled
    class, or one period-less record when nothing is scheduled.
    Existing records of that subject and date are replaced.
    """
    day = parse_date(day)
    status = parse_status(status)

    kept = [
        r for r in records
        if not (r.subject_id == subject_id and r.date == day)
    ]

    periods = scheduled_periods(slots, subject_id, day) or [None]
    marked = [
        AttendanceRecord(subject_id=subject_id, date=day, status=status, period=p, count=1)
        for p in periods
    ]

    logger.debug("Marked subject %s on %s as %s", subject_id, day, status.value)
    return kept + marked


def unmark_attendance(records, subject_id, day):
    day = parse_date(day)
    return [
        r for r in records
        if not (r.subject_id == subject_id and r.date == day)
    ]


def bulk_import(records, slots, subject_id, dates, status):
    """
    Imports one class per listed date.

    Each occurrence of a date takes the next scheduled period of that
    date that has no record yet; when none is left, the date is
    reported as a duplicate and nothing is written for it.
    """
    status = parse_status(status)
    records = list(records)

    taken = {
        (r.date, r.period)
        for r in records
        if r.subject_id == subject_id
    }

    imported = 0
    duplicates = []

    for raw in dates:
        day = parse_date(raw)
        periods = scheduled_periods(slots, subject_id, day) or [None]
        free = [p for p in periods if (day, p) not in taken]

        if not free:
            duplicates.append(day)
            continue

        period = free[0]
        taken.add((day, period))
        records.append(
            AttendanceRecord(subject_id=subject_id, date=day, status=status, period=period, count=1)
        )
        imported += 1

    logger.info(
        "Bulk import for subject %s: %d imported, %d duplicate(s)",
        subject_id, imported, len(duplicates),
    )
    return ImportResult(records=records, imported=imported, duplicates=duplicates)


def clear_records(records, subject_id, status="all"):
    """
    Deletes a subject's records, all of them or only one status.
    Returns (records, removed).
    """
    if status == "all":
        match = None
    else:
        match = parse_status(status)

    kept = []
    removed = 0
    for record in records:
        if record.subject_id == subject_id and (match is None or record.status is match):
            removed += 1
            continue
        kept.append(record)

    logger.info("Cleared %d record(s) of subject %s (%s)", removed, subject_id, status)
    return kept, removed
