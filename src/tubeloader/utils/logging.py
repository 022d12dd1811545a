"""Logging utilities."""

import traceback
from pathlib import Path
from typing import Optional

ERROR_LOG_FILE = Path.home() / "tubeloader_error.log"


def log_error(msg: str, exc: Exception | None = None, log_file: Optional[Path] = None):
    """Append an error, with its traceback when given, to the error log file."""
    log_file = log_file or ERROR_LOG_FILE
    try:
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(f"{msg}\n")
            if exc is not None:
                f.write("".join(traceback.format_exception(exc)))
            f.write("-" * 50 + "\n")
    except OSError:
        pass  # Can't log if logging fails
