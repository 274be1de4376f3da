"""Logging for the job board, driven by ``AppConfig.logging``."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from job_board.config import AppConfig, validate_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(config: AppConfig) -> logging.Logger:
    """Configure the ``job_board`` logger tree and report config warnings.

    Writes to a rotating file under ``config.logging.dir`` and to stdout.
    Calling it again replaces the handlers instead of stacking them, so the
    CLI and the app lifespan can both call it.
    """
    settings = config.logging
    log_path = Path(settings.dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger("job_board")
    logger.setLevel(settings.level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = RotatingFileHandler(
        log_path / settings.filename,
        maxBytes=settings.max_bytes,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler(sys.stdout)
    for handler in (file_handler, console_handler):
        handler.setLevel(settings.level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging to %s (%s, environment=%s)", file_handler.baseFilename, settings.level, config.environment)
    for warning in validate_config(config):
        logger.warning("Config: %s", warning)

    return logger
