"""JSON log output, for deployments that ship logs to an aggregator."""

import logging
from pythonjsonlogger import jsonlogger


def setup_logger(level: int = logging.INFO) -> logging.Handler:
    """Send log records from all loggers to stderr, formatted as JSON."""
    logger = logging.getLogger()
    for handler in logger.handlers:
        if isinstance(handler.formatter, jsonlogger.JsonFormatter):
            logger.setLevel(level)
            return handler
    log_handler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(levelname)s %(name)s %(message)s',
        rename_fields={'levelname': 'level', 'asctime': 'timestamp'}
    )
    log_handler.setFormatter(formatter)
    logger.addHandler(log_handler)
    logger.setLevel(level)
    return log_handler
