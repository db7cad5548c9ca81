"""
Logging configuration for Chalet BnB.

``setup_logging`` configures the root logger once with a console handler
and, optionally, a file handler. Modules log through
``logging.getLogger(__name__)`` and never configure handlers themselves.
"""

import logging
from pathlib import Path
from typing import Optional

"""
Configure the root logger.

Nothing happens when the root logger already has handlers, so calling
this twice (or under pytest) is harmless.

Parameters:
    level: Logging level name (e.g. "DEBUG"), case insensitive. Unknown
        names fall back to INFO.
    logfile: Path of a file to log to as well. Resolved against the
        current working directory.
"""
def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    logger = logging.getLogger()
    if logger.handlers:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logfile:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
