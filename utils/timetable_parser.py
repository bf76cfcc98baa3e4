import logging

import pandas as pd

from core.exceptions import ValidationError
from core.models import WEEKDAYS
from utils.attendance_parser import EXCEL_ERRORS
from core.subjects import add_subject
from core.timetable import place_slot

logger = logging.getLogger(__name__)


def _day_for_column(column):
    """'Mon', 'Tues', 'MONDAY ' -> 'monday'; None for other columns."""
    label = str(column).strip().lower()
    if len(label) < 3:
        return None
    for day in WEEKDAYS:
        if day.startswith(label):
            return day
    return None


def _cell_subject(cell):
    if pd.isna(cell):
        return None
    name = str(cell).strip()
    return name or None


def timetable_from_frame(df):
    """
    Rows of (day, period_start, period_end, subject) from a sheet
    with a 'Period' column and one column per weekday.
    The same subject in consecutive periods becomes one merged block.
    """
    period_col = next(
        (c for c in df.columns if str(c).strip().lower() == "period"), None
    )
    if period_col is None:
        raise ValidationError("Timetable sheet needs a 'Period' column")

    day_cols = {c: _day_for_column(c) for c in df.columns if c != period_col}
    day_cols = {c: d for c, d in day_cols.items() if d}

    if not day_cols:
        raise ValidationError("Timetable sheet has no weekday columns")

    table = df.dropna(subset=[period_col]).copy()

    periods = pd.to_numeric(table[period_col], errors="coerce")
    bad = periods.isna() | (periods % 1 != 0) | (periods < 1)
    if bad.any():
        values = ", ".join(str(v) for v in table.loc[bad, period_col])
        raise ValidationError(f"Period must be a whole number from 1 up, got: {values}")

    table[period_col] = periods.astype(int)
    table = table.sort_values(period_col)

    schedule = []

    for column, day in day_cols.items():
        block = None

        for _, row in table.iterrows():
            period = int(row[period_col])
            subject = _cell_subject(row.get(column))

            if block and subject == block["subject"] and period == block["period_end"] + 1:
                block["period_end"] = period
                continue

            if block:
                schedule.append(block)
            block = None

            if subject:
                block = {
                    "day": day,
                    "period_start": period,
                    "period_end": period,
                    "subject": subject
                }

        if block:
            schedule.append(block)

    return schedule


def parse_timetable(file):
    try:
        df = pd.read_excel(file, engine="openpyxl")
    except EXCEL_ERRORS as exc:
        raise ValidationError(f"Could not read timetable sheet: {exc}") from exc
    return timetable_from_frame(df)


def import_timetable(subjects, slots, schedule):
    """
    Places every parsed block, creating subjects that do not exist
    yet (matched by name, case-insensitive).
    Returns (subjects, slots).
    """
    subjects = list(subjects)
    slots = list(slots)

    for row in schedule:
        by_name = {s.name.lower(): s for s in subjects}
        subject = by_name.get(row["subject"].lower())

        if subject is None:
            subjects = add_subject(subjects, row["subject"])
            subject = subjects[-1]

        slots = place_slot(
            slots,
            subject.id,
            row["day"],
            row["period_start"],
            row["period_end"] if row["period_end"] > row["period_start"] else None,
        )

    logger.info("Imported %d timetable block(s)", len(schedule))
    return subjects, slots
