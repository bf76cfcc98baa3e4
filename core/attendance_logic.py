import logging
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal

from core.models import Aggregate, AttendanceStatus

logger = logging.getLogger(__name__)


# ==============================
# ATTENDANCE CALCULATIONS
# ==============================

def round_half_up(value, digits):
    """round(), but 6.25 -> 6.3 instead of banker's 6.2."""
    step = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(step, rounding=ROUND_HALF_UP))


def attendance_percentage(attended, total, digits=None):
    """
    attended / total as a percentage; 0 when nothing was held yet.
    """
    if total <= 0:
        return 0
    percent = attended / total * 100
    return percent if digits is None else round_half_up(percent, digits)


def aggregate(records):
    """
    Present/total units for a set of records.

    - holiday records never count
    - every other record weighs its period count (1 when unset)
    """
    present = 0
    total = 0

    for record in records:
        if record.status is AttendanceStatus.HOLIDAY:
            continue

        total += record.units
        if record.status is AttendanceStatus.PRESENT:
            present += record.units

    return Aggregate(
        present_units=present,
        total_units=total,
        percentage=attendance_percentage(present, total, digits=1),
    )


def aggregate_by_subject(records):
    """
    Returns subject_id -> Aggregate, derived from records only.
    """
    grouped = defaultdict(list)
    for record in records:
        grouped[record.subject_id].append(record)

    return {subject_id: aggregate(rows) for subject_id, rows in grouped.items()}


def subject_stats(records):
    """
    Breakdown used by the overview cards:
    present/absent units, classes held, percentage and
    how many non-holiday records produced them.
    """
    present = 0
    absent = 0
    record_count = 0

    for record in records:
        if record.status is AttendanceStatus.HOLIDAY:
            continue

        record_count += 1
        if record.status is AttendanceStatus.PRESENT:
            present += record.units
        else:
            absent += record.units

    total = present + absent

    return {
        "present": present,
        "absent": absent,
        "total": total,
        "percentage": attendance_percentage(present, total),
        "record_count": record_count,
    }
