"""File logging for the interactive session.

The TUI owns stdout and stderr while it runs, so records go to a log file under
the user log directory instead of the terminal.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

APP_NAME = "pori"
LOG_FILENAME = "pori.log"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"

BASE_LOGGER = logging.getLogger(APP_NAME)


def configure_logging(log_path: Path | None = None, verbose: bool = False) -> Path | None:
    """Attach a file handler to the package logger and return the file in use.

    When the log file cannot be opened, a ``NullHandler`` is installed instead
    and ``None`` is returned; logging problems never stop the session.
    """
    target = log_path if log_path is not None else DEFAULT_LOG_PATH
    for existing in list(BASE_LOGGER.handlers):
        BASE_LOGGER.removeHandler(existing)
        existing.close()
    BASE_LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)
    BASE_LOGGER.propagate = False

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(target, encoding="utf-8")
    except OSError:
        BASE_LOGGER.addHandler(logging.NullHandler())
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    BASE_LOGGER.addHandler(handler)
    return target
