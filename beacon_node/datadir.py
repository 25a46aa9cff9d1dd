import logging
import os
from pathlib import Path
from typing import Optional

from beacon_node._utils.logging import get_logger
from beacon_node._utils.tokens import random_string
from beacon_node.constants import (
    BACKUP_DIR_PREFIX,
    CLIENT_CONFIG_FILENAME,
    ETH2_CONFIG_FILENAME,
    RANDOM_TOKEN_LENGTH,
)
from beacon_node.exceptions import ConfigIOError


def exists(path: Path) -> bool:
    return path.exists()


def create_all(path: Path) -> None:
    """
    Create ``path`` and any missing parent directories.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise ConfigIOError(f"Unable to create directory {path}: {err}", path) from err


def _new_backup_dir(data_dir: Path) -> Path:
    while True:
        backup_dir = data_dir / f"{BACKUP_DIR_PREFIX}{random_string(RANDOM_TOKEN_LENGTH)}"
        if not backup_dir.exists():
            return backup_dir


def _move_to_backup_dir(path: Path, backup_dir: Path, logger: logging.Logger) -> None:
    if not path.exists():
        logger.debug("Nothing to back up at %s", path)
        return

    target = backup_dir / path.name
    try:
        os.rename(path, target)
    except OSError as err:
        logger.warning("Unable to move %s into %s: %s", path, backup_dir, err)
    else:
        logger.debug("Moved %s to %s", path, target)


def clean_and_backup(data_dir: Path,
                     db_path: Optional[Path],
                     logger: logging.Logger = None) -> Path:
    """
    Move any documents and database left in ``data_dir`` into a freshly created
    ``backup_<token>`` directory inside it and return that directory.

    Each move is attempted independently: missing sources are skipped and a failed
    move is logged without stopping the others. Only failing to create the backup
    directory itself raises :class:`~beacon_node.exceptions.ConfigIOError`.
    """
    if logger is None:
        logger = get_logger('beacon_node.datadir')

    backup_dir = _new_backup_dir(data_dir)
    create_all(backup_dir)
    logger.info("Backing up datadir contents to %s", backup_dir)

    _move_to_backup_dir(data_dir / CLIENT_CONFIG_FILENAME, backup_dir, logger)
    _move_to_backup_dir(data_dir / ETH2_CONFIG_FILENAME, backup_dir, logger)
    if db_path is not None:
        _move_to_backup_dir(db_path, backup_dir, logger)

    return backup_dir
