import logging
import re
import zipfile
from datetime import date, datetime

import pandas as pd

from core.exceptions import ValidationError

logger = logging.getLogger(__name__)

# YYYY-MM-DD, or DD-MM-YYYY / DD/MM/YYYY
ISO_DATE = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")
DMY_DATE = re.compile(r"(\d{1,2})[-/](\d{1,2})[-/](\d{4})")

# What openpyxl raises for files that are not a readable .xlsx workbook
EXCEL_ERRORS = (ValueError, KeyError, OSError, zipfile.BadZipFile)


def find_dates(text):
    """
    Every valid date in a piece of text, in order of appearance.
    Impossible dates (31-02-2025) are dropped.
    """
    found = []

    for match in ISO_DATE.finditer(text):
        year, month, day = match.groups()
        found.append((match.start(), year, month, day))

    for match in DMY_DATE.finditer(text):
        day, month, year = match.groups()
        found.append((match.start(), year, month, day))

    dates = []
    for _, year, month, day in sorted(found):
        try:
            dates.append(date(int(year), int(month), int(day)))
        except ValueError:
            continue
    return dates


def parse_date_lines(text):
    """
    One date per line, as pasted from an attendance portal.
    Returns (dates, invalid_lines). Duplicates are kept: the same
    date listed twice stands for two classes that day.
    """
    dates = []
    invalid = []

    for line in str(text).splitlines():
        clean = line.strip()
        if not clean:
            continue

        found = find_dates(clean)
        if found:
            dates.append(found[0])
        else:
            invalid.append(clean)

    if invalid:
        logger.warning("Skipped %d line(s) without a valid date", len(invalid))

    return dates, invalid


def read_dates_from_excel(file):
    """
    Dates from the first column of an .xlsx sheet.
    Cells may be real Excel dates or text.
    """
    try:
        df = pd.read_excel(file, engine="openpyxl", header=None)
    except EXCEL_ERRORS as exc:
        raise ValidationError(f"Could not read Excel file: {exc}") from exc

    dates = []
    invalid = []

    if df.empty:
        return dates, invalid

    for cell in df.iloc[:, 0]:
        if pd.isna(cell):
            continue
        if isinstance(cell, (datetime, pd.Timestamp)):
            dates.append(cell.date())
            continue
        if isinstance(cell, date):
            dates.append(cell)
            continue

        found = find_dates(str(cell))
        if found:
            dates.append(found[0])
        else:
            invalid.append(str(cell))

    return dates, invalid
