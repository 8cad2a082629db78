"""Logging setup for parqpeek.

Modules log through the standard pattern:

    import logging
    logger = logging.getLogger(__name__)

The CLI calls ``setup_logging`` once at startup. Records go to a rotating
file rather than the console so they never draw over the TUI.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_file: Union[str, Path], level: Union[str, int] = logging.INFO) -> logging.Logger:
    """Attach a rotating file handler to the ``parqpeek`` logger."""
    logger = logging.getLogger("parqpeek")

    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    for handler in list(logger.handlers):
        if isinstance(handler, RotatingFileHandler):
            logger.removeHandler(handler)
            handler.close()

    handler = RotatingFileHandler(log_path, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)
    return logger
