import logging

import pandas as pd

from config import PERIODS_PER_DAY, TIMETABLE_DAYS
from core.models import TimetableSlot

logger = logging.getLogger(__name__)


def next_slot_id(slots):
    return max((s.id for s in slots), default=0) + 1


def place_slot(slots, subject_id, day_of_week, period_start, period_end=None):
    """
    Assigns a subject to a weekly block.
    Any slot on that day overlapping the new period range is removed
    first, so a day never holds two slots for the same period.
    Returns the new slot list.
    """
    slot = TimetableSlot(
        id=next_slot_id(slots),
        subject_id=subject_id,
        day_of_week=day_of_week,
        period_start=period_start,
        period_end=period_end,
        merged=period_end is not None and period_end > period_start,
    )

    kept = [
        s for s in slots
        if not (s.day_of_week == slot.day_of_week
                and s.overlaps(slot.period_start, slot.period_end))
    ]

    replaced = len(slots) - len(kept)
    if replaced:
        logger.info(
            "Replaced %d slot(s) on %s periods %d-%d",
            replaced, slot.day_of_week, slot.period_start, slot.period_end,
        )

    return kept + [slot]


def clear_period(slots, day_of_week, period):
    """Removes whatever slot covers this period on this day."""
    day = day_of_week.lower()
    return [
        s for s in slots
        if not (s.day_of_week == day and s.overlaps(period, period))
    ]


def slots_for_day(slots, day_of_week):
    day = day_of_week.lower()
    return sorted(
        (s for s in slots if s.day_of_week == day),
        key=lambda s: s.period_start,
    )


def classes_on_day(slots, subject_id, day_of_week):
    """
    Classes of a subject on a weekday. A merged slot is one class.
    """
    day = day_of_week.lower()
    return sum(
        1 for s in slots
        if s.subject_id == subject_id and s.day_of_week == day
    )


def subjects_on_day(slots, subjects, day_of_week):
    ids = {s.subject_id for s in slots_for_day(slots, day_of_week)}
    return [subject for subject in subjects if subject.id in ids]


def timetable_grid(slots, subjects, periods=PERIODS_PER_DAY, days=TIMETABLE_DAYS):
    """
    Period x day DataFrame of subject names for display.
    A merged slot fills every period it covers.
    """
    names = {subject.id: subject.name for subject in subjects}

    grid = pd.DataFrame(
        "",
        index=pd.Index(range(1, periods + 1), name="Period"),
        columns=[day.capitalize() for day in days],
    )

    for slot in slots:
        column = slot.day_of_week.capitalize()
        if column not in grid.columns:
            continue
        for period in slot.periods:
            if period in grid.index:
                grid.loc[period, column] = names.get(slot.subject_id, "?")

    return grid
