from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

_LOGGER_NAME = "heldcli"
_CONFIGURED_ATTR = "_heldcli_logging"
_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"


def _parse_level(raw: str) -> int:
    normalized = raw.strip().upper()
    return getattr(logging, normalized, logging.WARNING)


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """Configure the ``heldcli`` logger once; repeated calls only adjust the level.

    stderr gets WARNING and above by default so the REPL stays readable.
    A rotating file handler is added when a log file is configured.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(_parse_level(level or os.getenv("HELDCLI_LOG_LEVEL", "WARNING")))
    logger.propagate = False

    formatter = logging.Formatter(_FORMAT)

    if not any(
        getattr(handler, _CONFIGURED_ATTR, False) and not isinstance(handler, RotatingFileHandler)
        for handler in logger.handlers
    ):
        stderr_handler = logging.StreamHandler(stream=sys.stderr)
        stderr_handler.setFormatter(formatter)
        setattr(stderr_handler, _CONFIGURED_ATTR, True)
        logger.addHandler(stderr_handler)

    log_file = log_file or os.getenv("HELDCLI_LOG_FILE")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_exists = any(
            isinstance(handler, RotatingFileHandler)
            and getattr(handler, _CONFIGURED_ATTR, False)
            and handler.baseFilename == os.path.abspath(log_path)
            for handler in logger.handlers
        )
        if not file_exists:
            file_handler = RotatingFileHandler(
                filename=log_path,
                maxBytes=int(os.getenv("HELDCLI_LOG_MAX_BYTES", "1000000")),
                backupCount=int(os.getenv("HELDCLI_LOG_BACKUP_COUNT", "3")),
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            setattr(file_handler, _CONFIGURED_ATTR, True)
            logger.addHandler(file_handler)

    return logger
