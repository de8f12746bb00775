"""Logging configuration helpers."""

import logging

LOGGER_NAME = "move_inventory"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# attributes every LogRecord carries; anything else arrived through ``extra``
_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class ContextFormatter(logging.Formatter):
    """Formatter that appends ``extra`` context as sorted ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS and not key.startswith("_")
        }
        if not context:
            return line
        pairs = " ".join(f"{key}={context[key]}" for key in sorted(context))
        head, newline, rest = line.partition("\n")
        return f"{head} [{pairs}]{newline}{rest}"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Configure the package logger once; later calls only adjust the level."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(ContextFormatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
