"""
Package logger.

All tapegrad modules log through children of the ``"tapegrad"`` logger. The
handler is installed once; the level comes from ``TAPEGRAD_LOG_LEVEL``
(default ``WARNING``) unless a `TapegradConfig` overrides it.
"""

import logging
import os
from typing import Optional

_ROOT_NAME = "tapegrad"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    root = logging.getLogger(_ROOT_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        level_name = os.getenv("TAPEGRAD_LOG_LEVEL", "WARNING").upper()
        root.setLevel(getattr(logging, level_name, logging.WARNING))
    if not name or name == _ROOT_NAME:
        return root
    if name.startswith(_ROOT_NAME + "."):
        name = name[len(_ROOT_NAME) + 1 :]
    return root.getChild(name)


def set_log_level(level: str) -> None:
    """Set the level of the package logger (e.g. ``"DEBUG"``)."""
    get_logger().setLevel(getattr(logging, level.upper(), logging.WARNING))
