"""JSON logging for the credential renewal tool.

Records carry the failing ``stage`` and the ``app`` identifier when the
caller passes them through ``extra``, so a failed run can be attributed
from the log line alone.
"""

import logging

from pythonjsonlogger import jsonlogger

LOGGER_NAME = "renew_apple_cert"

ALLOWED_FIELDS = frozenset(
    {
        "timestamp",
        "level",
        "message",
        "exc_info",
        "funcName",
        "lineno",
        "stage",
        "app",
    }
)


class CredentialJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter keeping the core fields plus the credential context fields."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        for key in [key for key in log_record if key not in ALLOWED_FIELDS]:
            log_record.pop(key)


def build_formatter() -> CredentialJsonFormatter:
    """Return the formatter used by the tool's stream handler."""
    return CredentialJsonFormatter(
        fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
        timestamp=True,
    )


def _setup_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    # Module reloads must not stack handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter())

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


LOGGER = _setup_logger()
