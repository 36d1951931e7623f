"""
Logging Setup Utilities.

Both servers run under uvicorn with ``log_config=None``, so uvicorn's own
loggers propagate to the root logger configured here.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# One line per proxied request is enough; these would add two more.
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Console logging level
        log_file: Optional file that receives every record at DEBUG and above
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root_logger.handlers.clear()

    console_handler = RichHandler(
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
