"""Simple logger utility."""
from __future__ import annotations

import logging

logger = logging.getLogger("bakery")
if not logger.handlers:
    h = logging.StreamHandler()
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    h.setFormatter(fmt)
    logger.addHandler(h)
    logger.setLevel(logging.INFO)


def get_logger(name: str | None = None) -> logging.Logger:
    return logger.getChild(name) if name else logger
