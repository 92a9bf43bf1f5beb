import logging

from ..config import LOG_LEVEL

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name="retail_ledger", level=None):
    """
    Package logger with one console handler. Module loggers are children
    (`logging.getLogger(__name__)`) and propagate here.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level or LOG_LEVEL)
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(ch)
    elif level:
        logger.setLevel(level)
    return logger
