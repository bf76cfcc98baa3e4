from config import TREND_WINDOW
from core.attendance_logic import attendance_percentage
from core.models import AttendanceStatus


def attendance_trend(records, window=TREND_WINDOW):
    """
    Cumulative attendance % after each class, oldest first.

    Only the last `window` non-holiday records get a point, but
    older records still seed the running totals.
    """
    ordered = sorted(
        (r for r in records if r.status is not AttendanceStatus.HOLIDAY),
        key=lambda r: (r.date, r.period or 0),
    )

    present, total = 0, 0
    cutoff = max(0, len(ordered) - window)
    data = []

    for i, record in enumerate(ordered):
        total += record.units
        if record.status is AttendanceStatus.PRESENT:
            present += record.units

        if i >= cutoff:
            data.append({
                "date": record.date,
                "percent": attendance_percentage(present, total, digits=1)
            })

    return data
