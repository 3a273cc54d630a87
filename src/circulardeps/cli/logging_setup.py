"""circulardeps CLI logging infrastructure.

Sets up logging with a Rich console handler for *stderr* and an optional
file handler with timestamps.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    *,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the ``circulardeps`` logger.

    Parameters
    ----------
    level:
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).
    log_file:
        Optional path to a log file. A :class:`~logging.FileHandler` with
        timestamps is added when provided.
    console:
        Optional Rich console for the console handler.

    Returns
    -------
    logging.Logger
        The configured ``circulardeps`` logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger("circulardeps")
    logger.setLevel(numeric_level)

    # Repeated calls replace handlers instead of stacking them
    logger.handlers.clear()

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
    )
    rich_handler.setLevel(numeric_level)
    logger.addHandler(rich_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file))
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    return logger
