"""Logging initialization helpers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from clipscribe.config import LoggingSettings, Settings

_ROOT_LOGGER = "clipscribe"


def _build_handlers(cfg: LoggingSettings, *, log_dir: str, level: int) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=str(cfg.format), datefmt=str(cfg.datefmt))

    handlers: list[logging.Handler] = []
    if cfg.console:
        stream = logging.StreamHandler()
        handlers.append(stream)

    if cfg.file:
        file_path = Path(str(cfg.file))
        if not file_path.is_absolute():
            file_path = Path(log_dir) / file_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                file_path,
                maxBytes=int(cfg.max_bytes),
                backupCount=int(cfg.backup_count),
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings) -> None:
    """Configure the `clipscribe` logger tree from Settings.

    Only `clipscribe.*` loggers are touched; framework loggers (uvicorn,
    httpx) keep their own configuration. Safe to call more than once.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    if getattr(logger, "_clipscribe_configured", False):
        return

    level_name = str(settings.logging.level or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    logger.setLevel(level)
    logger.handlers = _build_handlers(settings.logging, log_dir=settings.log_dir, level=level)
    logger.propagate = False
    setattr(logger, "_clipscribe_configured", True)
