import logging
from logging import StreamHandler
from logging.handlers import (
    RotatingFileHandler,
)
import os
from pathlib import Path
import sys
from typing import (
    Dict,
)

from eth_utils import (
    ExtendedDebugLogger,
    get_extended_debug_logger,
)

from beacon_node._utils.shellart import (
    bold_red,
    bold_yellow,
)

LOG_BACKUP_COUNT = 10
LOG_MAX_MB = 5


def get_logger(name: str) -> ExtendedDebugLogger:
    """
    Return an :class:`~eth_utils.ExtendedDebugLogger` for ``name``, making sure that every
    ancestor in the dotted hierarchy is an ``ExtendedDebugLogger`` as well.
    """
    parent_name, _, _ = name.rpartition('.')
    if parent_name:
        get_logger(parent_name)
    return get_extended_debug_logger(name)


class BeaconNodeLogFormatter(logging.Formatter):

    def __init__(self, fmt: str) -> None:
        super().__init__(fmt)

    def format(self, record: logging.LogRecord) -> str:
        record.shortname = record.name.split('.')[-1]  # type: ignore

        if record.levelno >= logging.ERROR:
            return bold_red(super().format(record))
        elif record.levelno >= logging.WARNING:
            return bold_yellow(super().format(record))
        else:
            return super().format(record)


LOG_FORMATTER = BeaconNodeLogFormatter(
    fmt='%(levelname)8s  %(asctime)s  %(shortname)20s  %(message)s',
)


def set_logger_levels(log_levels: Dict[str, int]) -> None:
    for name, level in log_levels.items():
        logger = logging.getLogger(name)
        logger.setLevel(level)


def setup_stderr_logging(level: int = None) -> StreamHandler:
    if level is None:
        level = logging.INFO
    logger = logging.getLogger()
    logger.setLevel(level)

    handler_stream = logging.StreamHandler(sys.stderr)
    handler_stream.setLevel(level)
    handler_stream.setFormatter(LOG_FORMATTER)

    logger.addHandler(handler_stream)

    logger.debug('Logging initialized: PID=%s', os.getpid())

    return handler_stream


def setup_file_logging(logfile_path: Path, level: int = None) -> RotatingFileHandler:
    if level is None:
        level = logging.DEBUG
    logger = logging.getLogger()

    logfile_path.parent.mkdir(parents=True, exist_ok=True)
    handler_file = RotatingFileHandler(
        str(logfile_path),
        maxBytes=(1024 * 1024 * LOG_MAX_MB),
        backupCount=LOG_BACKUP_COUNT,
    )
    handler_file.setLevel(level)
    handler_file.setFormatter(LOG_FORMATTER)

    logger.addHandler(handler_file)
    # the root logger must let through anything either handler wants to see
    logger.setLevel(min(logger.level or level, level))

    return handler_file
