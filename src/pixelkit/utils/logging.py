"""Logging helpers for pixelkit."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import get_settings

_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    """Return the package logger, configured on first use."""

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("pixelkit")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(get_settings().log_level)
    return _LOGGER


logger = get_logger()
