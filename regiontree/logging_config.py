# --------------------------------------------------------------
#  logging_config.py
# --------------------------------------------------------------
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    level: Optional[str] = None,
    log_file: Optional[Path | str] = None,
) -> logging.Logger:
    """Attach a *console* handler and optionally a *file* handler.

    *   **Console handler** - colour-less, human-readable output.
    *   **File handler** - plaintext log that rotates at 1 MiB and keeps
        3 backups.

    Returns the ``regiontree`` package logger.
    """
    level_name = (level or Settings.LOG_LEVEL).upper()
    package_logger = logging.getLogger("regiontree")
    package_logger.setLevel(level_name)

    # Clear existing handlers to avoid duplicates on repeated calls
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, "%H:%M:%S"))
    package_logger.addHandler(console_handler)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, "%Y-%m-%d %H:%M:%S"))
        package_logger.addHandler(file_handler)

    package_logger.propagate = False
    package_logger.debug(f"Logging configured at level {level_name}")
    return package_logger
