"""Logging helpers."""
from __future__ import annotations

import logging


def configure_logging(level: str | int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


__all__ = ["configure_logging"]
