import logging
from os import PathLike
import sys

DEFAULT_LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(message)s'


def _console_handlers(logger: logging.Logger) -> list:
    return [
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)
    ]


def _file_handlers(logger: logging.Logger) -> list:
    return [handler for handler in logger.handlers if isinstance(handler, logging.FileHandler)]


def get_logger(
    name: str,
    log_filename: PathLike = None,
    file_level: int = None,
    console_level: int = None,
    log_format: str = None,
) -> logging.Logger:
    """
    Get a logger of the `wsprtrack` hierarchy. Only the top-level logger of a hierarchy prints to the console; the
    loggers of submodules (`wsprtrack.spots`) pass their records up to it.

    :param name: dotted name of logger
    :param log_filename: file to also write records to, replacing any previous log file of this logger
    :param file_level: minimum level written to the log file
    :param console_level: minimum level printed to the console
    :param log_format: record format
    :return: logger
    """

    if file_level is None:
        file_level = logging.DEBUG
    if console_level is None:
        console_level = logging.INFO
    if log_format is None:
        log_format = DEFAULT_LOG_FORMAT

    logger = logging.getLogger(name)
    formatter = logging.Formatter(log_format)

    if '.' in name:
        get_logger(name.rsplit('.', 1)[0])
    elif len(_console_handlers(logger)) == 0 and console_level != logging.NOTSET:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
        logger.setLevel(logging.DEBUG)
        # records are printed here, not again by the root logger
        logger.propagate = False

    if log_filename is not None:
        for file_handler in _file_handlers(logger):
            logger.removeHandler(file_handler)
            file_handler.close()
        file_handler = logging.FileHandler(log_filename)
        file_handler.setLevel(file_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
