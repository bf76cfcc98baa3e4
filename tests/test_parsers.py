from datetime import date, datetime

import pandas as pd
import pytest

from core.exceptions import ValidationError
from utils import pdf_reader
from utils.attendance_parser import find_dates, parse_date_lines, read_dates_from_excel
from utils.timetable_parser import import_timetable, parse_timetable, timetable_from_frame


# ------------------------------
# Dates
# ------------------------------

def test_parse_date_lines_formats_and_invalid_lines():
    text = "15-01-2025\n16/01/2025\n\n2025-01-17\n2025/01/16\nnot a date\n31-02-2025\n15-01-2025"

    dates, invalid = parse_date_lines(text)

    assert dates == [
        date(2025, 1, 15), date(2025, 1, 16), date(2025, 1, 17), date(2025, 1, 15),
    ]
    assert invalid == ["2025/01/16", "not a date", "31-02-2025"]


def test_parse_date_lines_takes_first_date_of_a_line():
    dates, invalid = parse_date_lines("Mon 6-1-2025 (P3) moved from 03-01-2025")

    assert dates == [date(2025, 1, 6)]
    assert invalid == []


def test_find_dates_keeps_text_order():
    assert find_dates("2025-01-09 then 08/01/2025") == [date(2025, 1, 9), date(2025, 1, 8)]


def test_read_dates_from_excel(tmp_path):
    path = tmp_path / "dates.xlsx"
    pd.DataFrame([[datetime(2025, 1, 6)], ["07-01-2025"], ["junk"]]).to_excel(
        path, index=False, header=False
    )

    dates, invalid = read_dates_from_excel(path)

    assert dates == [date(2025, 1, 6), date(2025, 1, 7)]
    assert invalid == ["junk"]


def test_unreadable_excel_file_is_a_validation_error(tmp_path):
    path = tmp_path / "dates.xlsx"
    path.write_bytes(b"this is not a workbook")

    with pytest.raises(ValidationError, match="Could not read Excel file"):
        read_dates_from_excel(path)


class _FakePage:
    def __init__(self, text):
        self.text = text

    def extract_text(self):
        return self.text


class _FakePDF:
    def __init__(self, texts):
        self.pages = [_FakePage(t) for t in texts]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def test_dates_from_pdf_reads_every_page(monkeypatch):
    pages = ["Absent on 06-01-2025 and 08/01/2025\nTotal 12", None, "2025-01-10"]
    monkeypatch.setattr(pdf_reader.pdfplumber, "open", lambda f: _FakePDF(pages))

    assert pdf_reader.dates_from_pdf("report.pdf") == [
        date(2025, 1, 6), date(2025, 1, 8), date(2025, 1, 10),
    ]


def test_unreadable_pdf_is_a_validation_error(monkeypatch):
    def broken_open(f):
        raise ValueError("No /Root object! - Is this really a PDF?")

    monkeypatch.setattr(pdf_reader.pdfplumber, "open", broken_open)

    with pytest.raises(ValidationError, match="Could not read PDF"):
        pdf_reader.dates_from_pdf("report.pdf")


# ------------------------------
# Timetable sheets
# ------------------------------

@pytest.fixture
def sheet():
    return pd.DataFrame({
        "Period": [1, 2, 3, 4],
        "Mon": ["Maths", "Maths", None, "Physics"],
        "Tuesday": [None, "Physics", "Physics", "Physics"],
        "Notes": ["a", "b", "c", "d"],
    })


def test_timetable_from_frame_merges_consecutive_periods(sheet):
    schedule = timetable_from_frame(sheet)

    assert schedule == [
        {"day": "monday", "period_start": 1, "period_end": 2, "subject": "Maths"},
        {"day": "monday", "period_start": 4, "period_end": 4, "subject": "Physics"},
        {"day": "tuesday", "period_start": 2, "period_end": 4, "subject": "Physics"},
    ]


def test_timetable_sheet_needs_period_column(sheet):
    with pytest.raises(ValidationError):
        timetable_from_frame(sheet.drop(columns=["Period"]))


def test_timetable_sheet_needs_weekday_columns():
    with pytest.raises(ValidationError):
        timetable_from_frame(pd.DataFrame({"Period": [1], "Room": ["A1"]}))


@pytest.mark.parametrize("periods", [
    ["P1", "P2"],
    [1, 1.5],
    [0, 1],
])
def test_timetable_rejects_bad_period_values(periods):
    frame = pd.DataFrame({"Period": periods, "Mon": ["Maths", "Physics"]})

    with pytest.raises(ValidationError, match="Period must be a whole number"):
        timetable_from_frame(frame)


def test_timetable_accepts_float_periods():
    frame = pd.DataFrame({"Period": [1.0, 2.0], "Mon": ["Maths", "Maths"]})

    assert timetable_from_frame(frame) == [
        {"day": "monday", "period_start": 1, "period_end": 2, "subject": "Maths"},
    ]


def test_unreadable_timetable_file_is_a_validation_error(tmp_path):
    path = tmp_path / "timetable.xlsx"
    path.write_bytes(b"\x00\x01garbage")

    with pytest.raises(ValidationError, match="Could not read timetable sheet"):
        parse_timetable(path)


def test_import_timetable_reuses_and_creates_subjects(sheet, subjects):
    new_subjects, slots = import_timetable(subjects, [], timetable_from_frame(sheet))

    assert [s.name for s in new_subjects] == ["Mathematics", "Physics", "Maths"]

    by_key = {(s.day_of_week, s.period_start): s for s in slots}
    assert by_key[("monday", 1)].subject_id == 3
    assert by_key[("monday", 1)].merged
    assert by_key[("monday", 4)].subject_id == 2
    assert not by_key[("monday", 4)].merged
    assert by_key[("tuesday", 2)].period_end == 4
