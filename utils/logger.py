"""
Logging setup for ClassMark.
Console plus a dated file under the log directory.
"""
import logging
import os
from datetime import datetime

from config import LOG_DIR, LOG_LEVEL

# app.py logs as "classmark"; modules log under their package name
LOGGER_NAMES = ("classmark", "core", "utils")

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _build_handlers(log_dir):
    formatter = logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers = [logging.StreamHandler()]

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"classmark_{datetime.now().strftime('%Y%m%d')}.log")
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level=LOG_LEVEL, log_dir=LOG_DIR):
    """
    Configures the application loggers once; later calls only
    adjust the level. Streamlit reruns the script on every
    interaction, hence the guard.
    """
    loggers = [logging.getLogger(name) for name in LOGGER_NAMES]

    if not any(lg.handlers for lg in loggers):
        handlers = _build_handlers(log_dir)
        for lg in loggers:
            for handler in handlers:
                lg.addHandler(handler)
            lg.propagate = False

    for lg in loggers:
        lg.setLevel(level)

    return loggers[0]
