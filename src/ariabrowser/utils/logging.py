import logging
from typing import Any


_default_root_logger = logging.getLogger()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def create_stream_logging_handler(
    log_level: int,
    root_logger: logging.Logger = _default_root_logger,
    fmt: str | None = LOG_FORMAT,
) -> logging.StreamHandler[Any]:
    """
    Sets up logging with a single handler which emits logs to stderr.
    """
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(log_level)
    if fmt is not None:
        stream_handler.setFormatter(logging.Formatter(fmt))

    root_logger.setLevel(log_level)
    root_logger.addHandler(stream_handler)

    return stream_handler
