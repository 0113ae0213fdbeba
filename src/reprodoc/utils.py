"""Utility functions for reprodoc.

Logging is configured on the ``reprodoc`` package logger only. reprodoc runs
inside a rendering session that owns the root logger, so handlers installed
by the host application are never touched.
"""

import json
import logging

PACKAGE_LOGGER = "reprodoc"
VALID_LOGGING_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; messages are escaped by json.dumps."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: str = "INFO", structured: bool = False) -> logging.Logger:
    """Configure the reprodoc package logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL), any case
        structured: Emit JSON lines instead of plain text (default: False)

    Returns:
        The configured ``reprodoc`` logger

    Raises:
        ValueError: If level is not a known logging level
    """
    if level.upper() not in VALID_LOGGING_LEVELS:
        raise ValueError(f"Invalid log level: {level}. Must be one of {VALID_LOGGING_LEVELS}")

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper()))

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
    package_logger.addHandler(handler)
    return package_logger
