"""Package-wide logger setup."""

import logging
from typing import Optional, Union

base_logger = logging.getLogger('originality')

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def set_logger(
    name: str,
    level: Union[int, str] = 'INFO',
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    remove_handlers: bool = False
) -> logging.Logger:
    """
    Attach a stream handler to a logger and set its level.

    Args:
        name: Logger name, e.g. 'originality'
        level: Level name or number
        fmt: Log record format (defaults to DEFAULT_FORMAT)
        datefmt: Timestamp format
        remove_handlers: Drop existing handlers before adding the new one

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if remove_handlers:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT, datefmt=datefmt))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
