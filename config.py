import os
from pathlib import Path

from dotenv import load_dotenv

# ==============================
# LOAD ENV FILE (LOCAL SUPPORT)
# ==============================

env_path = Path(__file__).parent / ".env"

if env_path.exists():
    load_dotenv(dotenv_path=env_path)


# ==============================
# ATTENDANCE RULES
# ==============================

TARGET_PERCENT = float(os.getenv("CLASSMARK_TARGET_PERCENT", "75"))
if not 0 < TARGET_PERCENT < 100:
    raise ValueError(
        f"CLASSMARK_TARGET_PERCENT must be between 0 and 100, got {TARGET_PERCENT:g}"
    )
TARGET = TARGET_PERCENT / 100

PERIODS_PER_DAY = int(os.getenv("CLASSMARK_PERIODS_PER_DAY", "10"))

TIMETABLE_DAYS = [
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday",
]

DEFAULT_SUBJECT_COLOR = "#3B82F6"

# Points shown on the per-subject trend chart
TREND_WINDOW = int(os.getenv("CLASSMARK_TREND_WINDOW", "15"))


# ==============================
# LOGGING / ASSETS
# ==============================

LOG_LEVEL = os.getenv("CLASSMARK_LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("CLASSMARK_LOG_DIR", "logs")

LOGO_PATH = "assets/logo.png"
