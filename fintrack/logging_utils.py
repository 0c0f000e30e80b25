"""Mini README: Logging helpers shared by every fintrack module.

Structure:
    * configure_root_logger - install the single console handler once.
    * get_logger - module-level logger factory used as ``LOGGER``.
    * resolve_level - translate CLI/environment level names into ints.

Usage:
    Modules declare ``LOGGER = get_logger(__name__)`` at import time. The
    first call wires a stream handler on the root logger; later calls reuse
    it so reloading modules during development never duplicates output.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_ROOT_CONFIGURED = False


def resolve_level(level: Union[int, str]) -> int:
    """Return a numeric logging level for names such as ``"debug"``."""

    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(str(level).strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown logging level: {level}")
    return numeric


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Attach the fintrack console handler to the root logger.

    Subsequent calls only adjust the level of the already configured root
    logger.
    """

    global _ROOT_CONFIGURED
    root_logger = logging.getLogger()
    root_logger.setLevel(resolve_level(level))
    if _ROOT_CONFIGURED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    root_logger.addHandler(handler)
    _ROOT_CONFIGURED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger, configuring the root handler on first use."""

    if not _ROOT_CONFIGURED:
        configure_root_logger()
    return logging.getLogger(name)
