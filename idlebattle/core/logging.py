"""
Logging configuration module for the engine.

Provides centralized logging setup with colored output using rich. Every
engine module logs under the `idlebattle` logger hierarchy.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Root of the engine's logger hierarchy.
LOGGER_NAME = "idlebattle"

# The scheduler logs every group cancellation, which floods debug output.
SCHEDULER_LOGGER_NAME = f"{LOGGER_NAME}.engine.scheduler"


def setup_logging(level: int = logging.INFO, trace_timers: bool = False) -> None:
    """
    Sets up logging with rich colored output for the engine loggers.

    Args:
        level (int): The level of the `idlebattle` loggers. Defaults to logging.INFO.
        trace_timers (bool): Whether scheduler debug records are kept. Defaults to False.

    """
    console = Console(width=120, force_terminal=True, force_jupyter=False)

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
        tracebacks_show_locals=True,
    )
    rich_handler.setFormatter(
        logging.Formatter("%(name)s - %(message)s", datefmt="[%X]")
    )

    # Third-party loggers stay at warning, the engine hierarchy follows `level`.
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
    )
    logging.getLogger(LOGGER_NAME).setLevel(level)
    logging.getLogger(SCHEDULER_LOGGER_NAME).setLevel(
        level if trace_timers else max(level, logging.INFO)
    )


def get_logger(name: str) -> logging.Logger:
    """
    Gets a logger inside the `idlebattle` hierarchy.

    Args:
        name (str): The module name, or a suffix under `idlebattle`.

    Returns:
        logging.Logger: The logger instance.

    """
    if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
