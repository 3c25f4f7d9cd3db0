"""Structured JSON logging for the settlement engine."""
import json
import logging
import sys

ROOT_LOGGER = "wager_engine"


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record):
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_data"):
            log_entry["extra"] = record.extra_data
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def setup_logger(name=ROOT_LOGGER, level="INFO"):
    """Attach the JSON console handler to the engine's root logger."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(StructuredFormatter())
        logger.addHandler(console)

    return logger


def setup_from_settings(settings):
    return setup_logger(level=settings.log_level)


def get_logger(module_name):
    """Child logger under the engine root, e.g. ``wager_engine.pool_ledger``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{module_name}")
