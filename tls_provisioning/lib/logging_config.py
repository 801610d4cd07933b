"""JSON logging configuration for certificate provisioning."""

import logging

from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter emitting a small, fixed set of fields.

    Each record carries timestamp, level, message, exc_info, funcName and
    lineno. Logger name, module, process and thread details are dropped so
    provisioning lines stay short in proxy logs.
    """

    def add_fields(self, log_record, record, message_dict):
        """Populate log_record, then strip it down to the allowed fields.

        Args:
            log_record: Dict serialized as the JSON line
            record: LogRecord emitted by the logging framework
            message_dict: Dict holding the formatted message and its args
        """
        super().add_fields(log_record, record, message_dict)

        # Report "level" instead of the stdlib "levelname"
        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        # Everything outside this set is removed from the record
        allowed_fields = {
            "timestamp",
            "level",
            "message",
            "exc_info",
            "funcName",
            "lineno",
        }

        for key in [key for key in log_record if key not in allowed_fields]:
            log_record.pop(key)


def _setup_logger() -> logging.Logger:
    """Initialize the provisioning logger once.

    Returns:
        Logger writing single-line JSON records to stderr
    """
    logger = logging.getLogger("tls_provisioning")

    # Module reloads must not stack handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        CustomJsonFormatter(
            fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
            timestamp=True,
        )
    )

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


LOGGER = _setup_logger()
