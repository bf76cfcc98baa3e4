import pandas as pd

from core.attendance_logic import round_half_up

COLUMNS = [
    "Subject",
    "Current Attendance %",
    "Predicted Attendance %",
    "Change %",
    "Current Attended",
    "Current Total",
    "Future Attended",
    "Future Total",
]


def predictions_to_frame(results):
    rows = [
        [
            r.subject.name,
            round_half_up(r.current_percentage, 2),
            round_half_up(r.future_percentage, 2),
            round_half_up(r.percentage_change, 2),
            r.current_attended,
            r.current_total,
            r.future_attended,
            r.future_total,
        ]
        for r in results
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def predictions_to_csv(results) -> bytes:
    return predictions_to_frame(results).to_csv(index=False).encode("utf-8")
