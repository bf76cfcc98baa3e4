import math

from config import TARGET
from core.prediction import check_target, classes_for_target


def status_band(percent):
    if percent >= 90:
        return "high"
    if percent >= 75:
        return "medium"
    return "low"


def skip_allowance(attended, total, target=TARGET):
    """
    Classes that can be missed in a row while staying at or above target.
    """
    check_target(target)
    if total == 0:
        return 0
    return max(0, math.floor(attended / target - total))


def subject_standing(current, target=TARGET):
    if current.total_units == 0:
        return {
            "percent": 0.0,
            "band": "low",
            "needed": None,
            "skippable": 0,
            "status": "Not Started"
        }

    attended, total = current.present_units, current.total_units
    needed = classes_for_target(attended, total, target)

    if needed > 0:
        status = "Must Attend"
    elif skip_allowance(attended, total, target) <= 1:
        status = "Attend Carefully"
    else:
        status = "Safe"

    return {
        "percent": current.percentage,
        "band": status_band(current.percentage),
        "needed": needed,
        "skippable": skip_allowance(attended, total, target),
        "status": status
    }
