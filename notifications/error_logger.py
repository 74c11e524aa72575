"""
Error logging utility for reminder jobs.

Writes a timestamped report file for every failed run so a run that died
overnight can be diagnosed without the console output.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Any

from shared.errors import FAILURE_MARKER


def log_reminder_error(
    error_type: str,
    error_message: str,
    context: dict[str, Any] | None = None,
    log_dir: Path | None = None,
) -> str:
    """
    Log a reminder error to a timestamped file.

    Args:
        error_type: Type of error (e.g., 'source_read', 'configuration')
        error_message: The error message
        context: Optional dictionary with additional context (job, state, etc.)
        log_dir: Directory for reports, defaults to ./logs next to this module

    Returns:
        Path to the log file created
    """
    if log_dir is None:
        log_dir = Path(os.path.dirname(__file__)) / "logs"
    os.makedirs(log_dir, exist_ok=True)

    # Microseconds keep reports from back-to-back failures apart
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    filename = os.path.join(log_dir, f"reminder_error_{timestamp}.txt")

    with open(filename, "w", encoding="utf-8") as f:
        f.write(f"Reminder Error Report - {datetime.now()}\n")
        f.write("=" * 60 + "\n\n")
        f.write(f"{FAILURE_MARKER}\n")
        f.write(f"Error Type: {error_type}\n")
        f.write(f"Error Message: {error_message}\n\n")

        if context:
            f.write("Context:\n")
            f.write("-" * 60 + "\n")
            for key, value in context.items():
                f.write(f"{key}: {value}\n")

    return filename
