import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from core.exceptions import ValidationError
from core.models import WEEKDAYS, DayMark, DayMarks

logger = logging.getLogger(__name__)

GRID_DAYS = 42  # 6 rows x 7 days


# ==============================
# CORE HELPERS
# ==============================

def date_to_str(date_obj: date) -> str:
    return date_obj.strftime("%Y-%m-%d")


def parse_date(value) -> date:
    """
    Accepts a date, a datetime or an ISO 'YYYY-MM-DD' string.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Malformed date: {value!r}") from None


def weekday_name(date_obj: date) -> str:
    return WEEKDAYS[date_obj.weekday()]


def is_sunday(date_obj: date) -> bool:
    return date_obj.weekday() == 6


# ==============================
# DATE ITERATORS
# ==============================

def days_in_range(start, end):
    """
    Every calendar date from start to end, both inclusive.
    Empty when end is before start.
    """
    start, end = parse_date(start), parse_date(end)

    days = []
    current = start

    while current <= end:
        days.append(current)
        current += timedelta(days=1)

    return days


def days_for_month_grid(year: int, month: int):
    """
    42 dates for a month view that always starts on a Sunday:
    trailing days of the previous month, the month itself,
    then leading days of the next month.
    """
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")

    first = date(year, month, 1)
    # weekday(): Monday=0 .. Sunday=6
    offset = (first.weekday() + 1) % 7
    start = first - timedelta(days=offset)

    return [start + timedelta(days=i) for i in range(GRID_DAYS)]


# ==============================
# MONTH VIEW
# ==============================

@dataclass(frozen=True)
class CalendarDay:
    date: date
    weekday: str
    in_month: bool
    is_today: bool
    is_past: bool
    is_sunday: bool
    mark: DayMark = DayMark.NORMAL
    subject_ids: tuple = field(default_factory=tuple)


def month_calendar(year, month, slots=(), marks=None, today=None):
    """
    Month grid tagged with what the predictor and the attendance
    screen need to render each cell.
    """
    marks = marks if marks is not None else DayMarks()
    today = today or date.today()

    by_day = {}
    for slot in slots:
        ids = by_day.setdefault(slot.day_of_week, [])
        if slot.subject_id not in ids:
            ids.append(slot.subject_id)

    cells = []
    for day in days_for_month_grid(year, month):
        name = weekday_name(day)
        cells.append(CalendarDay(
            date=day,
            weekday=name,
            in_month=day.month == month,
            is_today=day == today,
            is_past=day < today,
            is_sunday=is_sunday(day),
            mark=marks.mark_for(day),
            subject_ids=tuple(by_day.get(name, ())),
        ))

    logger.debug("Built month calendar for %04d-%02d", year, month)
    return cells


def shift_month(year: int, month: int, step: int):
    """(year, month) moved by step months, for prev/next navigation."""
    index = year * 12 + (month - 1) + step
    return index // 12, index % 12 + 1
