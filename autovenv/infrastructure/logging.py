import logging
import sys


def setup_logging(level: str = "WARNING"):
    """
    Configure root logger for autovenv.
    Logs to stdout in a simple format with timestamp, level, logger name, and message.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = logging.Formatter(
        fmt='%(asctime)s %(levelname)s %(name)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S%z'
    )
    handler.setFormatter(formatter)

    # Avoid adding multiple handlers when called more than once
    if not any(isinstance(h, logging.StreamHandler) for h in root_logger.handlers):
        root_logger.addHandler(handler)
