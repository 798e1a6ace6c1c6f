"""Logger factory for the ``bktreex`` namespace."""

from __future__ import annotations

import logging

_ROOT = "bktreex"


def get_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(_ROOT)
    if name.startswith(f"{_ROOT}.") or name == _ROOT:
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")


__all__ = ["get_logger"]
