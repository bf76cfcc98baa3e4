from datetime import date, timedelta

from core.attendance_logic import attendance_percentage
from core.calendar_logic import days_in_range, is_sunday
from core.prediction import classes_for_target, validate_target_date


def what_if(attended, total, attend_more=0, skip_more=0):
    new_attended = attended + attend_more
    new_total = total + attend_more + skip_more

    if new_total == 0:
        return {
            "percent": 0.0,
            "status": "Not Started",
            "needed": None
        }

    percent = attendance_percentage(new_attended, new_total, digits=2)
    needed = classes_for_target(new_attended, new_total)

    return {
        "percent": percent,
        "status": "Safe" if needed == 0 else "Danger",
        "needed": needed
    }


def working_days_until(to_date, today=None):
    """
    Days after today up to to_date, Sundays excluded.
    """
    today = today or date.today()
    return [
        day for day in days_in_range(today + timedelta(days=1), to_date)
        if not is_sunday(day)
    ]


def project_scenarios(current, to_date, today=None):
    """
    Rough outlook without a timetable: one class per working day.
    """
    today = today or date.today()
    to_date = validate_target_date(to_date, today)

    classes = len(working_days_until(to_date, today))
    attended = current.present_units
    total = current.total_units

    return {
        "working_days": classes,
        "current": attendance_percentage(attended, total),
        "all_present": attendance_percentage(attended + classes, total + classes),
        "all_absent": attendance_percentage(attended, total + classes),
        "classes_for_target": classes_for_target(attended, total),
    }
