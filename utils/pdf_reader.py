import logging

import pdfplumber

from core.exceptions import ValidationError
from utils.attendance_parser import find_dates

logger = logging.getLogger(__name__)


def dates_from_pdf(pdf_file):
    """
    Every date printed in an attendance PDF (e.g. a portal's
    day-wise absence report), page by page, line by line.
    """
    dates = []

    try:
        with pdfplumber.open(pdf_file) as pdf:
            for page in pdf.pages:
                text = page.extract_text() or ""

                for line in text.split("\n"):
                    dates.extend(find_dates(line))
    # pdfminer has no common base class for malformed-file errors
    except Exception as exc:
        raise ValidationError(f"Could not read PDF: {exc}") from exc

    logger.info("Read %d date(s) from PDF", len(dates))
    return dates
