"""Logging setup for the `subcast` logger tree.

Only `subcast` and its children are configured; uvicorn and other framework
loggers keep their own handlers. Child-process stderr goes to
`subcast.process` at DEBUG, so that logger gets its own level
(`LOG_PROCESS_LEVEL`) and stays quiet when `LOG_LEVEL=DEBUG` is set for the
rest of the package.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from subcast.config import LoggingSettings, Settings

ROOT_LOGGER = "subcast"
PROCESS_LOGGER = "subcast.process"

_CONFIGURED_FLAG = "_subcast_configured"


def _parse_level(name: str | None, default: int = logging.INFO) -> int:
    value = logging.getLevelName(str(name or "").strip().upper())
    return value if isinstance(value, int) else default


def _log_file_path(cfg: LoggingSettings, log_dir: str) -> Path | None:
    if not cfg.file:
        return None
    path = Path(str(cfg.file))
    if not path.is_absolute():
        path = Path(log_dir) / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _build_handlers(settings: Settings) -> list[logging.Handler]:
    cfg = settings.logging
    formatter = logging.Formatter(fmt=cfg.format, datefmt=cfg.datefmt)
    handlers: list[logging.Handler] = []
    if cfg.console:
        handlers.append(logging.StreamHandler())
    file_path = _log_file_path(cfg, settings.log_dir)
    if file_path is not None:
        handlers.append(
            RotatingFileHandler(
                file_path,
                maxBytes=cfg.max_bytes,
                backupCount=cfg.backup_count,
                encoding="utf-8",
            )
        )
    # Handlers stay at NOTSET; the logger levels below do the filtering.
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(settings: Settings, *, force: bool = False) -> logging.Logger:
    """Attach console/file handlers to the `subcast` logger once.

    Calling again is a no-op unless `force` is set, in which case the previous
    handlers are closed and replaced.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if getattr(logger, _CONFIGURED_FLAG, False) and not force:
        return logger

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.setLevel(_parse_level(settings.logging.level))
    for handler in _build_handlers(settings):
        logger.addHandler(handler)
    logger.propagate = False

    logging.getLogger(PROCESS_LOGGER).setLevel(
        _parse_level(settings.logging.process_level)
    )
    setattr(logger, _CONFIGURED_FLAG, True)
    return logger
