"""
Logging setup for AtomCascade.

All loggers of the package live below the ``atomcascade`` logger, so cascade
and pathway computations can be silenced or made verbose as a whole.
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "atomcascade"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

DEFAULT_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO", format_string: Optional[str] = None, stream: Optional[object] = None
) -> None:
    """
    Configure the root handler used by cascade runs and the CLI.

    Parameters
    ----------
    level : str
        One of LOG_LEVELS (case-insensitive); 'CRITICAL' is accepted as well
    format_string : str, optional
        Record format; DEFAULT_FORMAT when omitted
    stream : file-like object, optional
        Target stream, sys.stderr when omitted

    Raises
    ------
    ValueError
        If the level name is unknown
    """
    name = level.upper()
    if name not in LOG_LEVELS + ("CRITICAL",):
        raise ValueError(f"Unknown logging level '{level}'. Use one of {', '.join(LOG_LEVELS)}")

    logging.basicConfig(
        level=getattr(logging, name),
        format=format_string or DEFAULT_FORMAT,
        stream=stream or sys.stderr,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """
    Logger below the package logger.

    ``get_logger("cascade.propagation")`` and
    ``get_logger("atomcascade.cascade.propagation")`` return the same logger.
    """
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
