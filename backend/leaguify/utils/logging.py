import logging

from leaguify.config import config


def create_logger(level: int | str) -> logging.Logger:
    log_format = "%(asctime)s - %(levelname)s - %(name)s - %(funcName)s - %(message)s"
    formatter = logging.Formatter(log_format)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    _logger = logging.getLogger("leaguify")
    _logger.setLevel(level)
    if not _logger.handlers:
        _logger.addHandler(handler)
    return _logger


logger = create_logger(config.log_level)
