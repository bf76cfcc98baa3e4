import logging
import math
from datetime import date, timedelta

from config import TARGET
from core.attendance_logic import aggregate_by_subject, attendance_percentage
from core.calendar_logic import days_in_range, parse_date, weekday_name
from core.exceptions import ValidationError
from core.models import Aggregate, DayMark, DayMarks, PredictionResult
from core.timetable import classes_on_day

logger = logging.getLogger(__name__)


def check_target(target):
    """Target is a fraction strictly between 0 and 1."""
    if not 0 < target < 1:
        raise ValidationError(
            f"Attendance target must be between 0% and 100%, got {target * 100:g}%"
        )
    return target


def classes_for_target(attended, total, target=TARGET):
    """
    Consecutive classes to attend before attended/total reaches target.
    Solves (attended + x) / (total + x) = target for x.
    """
    check_target(target)
    needed = (target * total - attended) / (1 - target)
    return max(0, math.ceil(needed))


def validate_target_date(to_date, today=None):
    today = today or date.today()
    to_date = parse_date(to_date)

    if to_date <= today:
        raise ValidationError(
            f"Target date {to_date.isoformat()} is not in the future"
        )
    return to_date


def period_totals(subject_id, slots, from_date, to_date, marks):
    """
    Classes held and attended for one subject after from_date
    up to and including to_date.
    """
    held = 0
    attended = 0

    for day in days_in_range(from_date + timedelta(days=1), to_date):
        classes = classes_on_day(slots, subject_id, weekday_name(day))
        if classes == 0:
            continue

        mark = marks.mark_for(day)
        if mark is DayMark.HOLIDAY:
            continue

        held += classes
        if mark is not DayMark.LEAVE:
            attended += classes

    return held, attended


def predict(subject, weekly_slots, current, to_date, marks=None, today=None, from_date=None):
    """
    Projects a subject's attendance to to_date, assuming every
    scheduled class is attended except on leave days.
    Holidays cancel the class altogether.
    """
    today = today or date.today()
    to_date = validate_target_date(to_date, today)
    from_date = parse_date(from_date) if from_date is not None else today
    marks = marks if marks is not None else DayMarks()

    if from_date > to_date:
        raise ValidationError("Prediction range starts after its end date")

    held, attended = period_totals(subject.id, weekly_slots, from_date, to_date, marks)

    current_percentage = attendance_percentage(current.present_units, current.total_units)

    future_total = current.total_units + held
    future_attended = current.present_units + attended
    future_percentage = attendance_percentage(future_attended, future_total)

    logger.debug(
        "Predicted %s to %s: +%d held, +%d attended",
        subject.name, to_date.isoformat(), held, attended,
    )

    return PredictionResult(
        subject=subject,
        current_attended=current.present_units,
        current_total=current.total_units,
        current_percentage=current_percentage,
        classes_in_period=held,
        attended_in_period=attended,
        future_total=future_total,
        future_attended=future_attended,
        future_percentage=future_percentage,
        percentage_change=future_percentage - current_percentage,
        classes_for_target=classes_for_target(current.present_units, current.total_units),
    )


def predict_all(subjects, slots, records, to_date, marks=None, today=None):
    """
    Prediction for every subject, each from its own records.
    """
    today = today or date.today()
    to_date = validate_target_date(to_date, today)

    current = aggregate_by_subject(records)

    results = [
        predict(
            subject,
            slots,
            current.get(subject.id, Aggregate()),
            to_date,
            marks=marks,
            today=today,
        )
        for subject in subjects
    ]

    logger.info("Predicted %d subject(s) up to %s", len(results), to_date.isoformat())
    return results
