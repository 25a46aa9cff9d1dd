import logging

import eth_utils
import pytest

from beacon_node._utils.logging import (
    LOG_FORMATTER,
    get_logger,
    set_logger_levels,
    setup_file_logging,
)


def test_get_logger():
    logger = get_logger("foo.bar.baz")
    assert isinstance(logger, eth_utils.ExtendedDebugLogger)
    assert logger.parent.name == "foo.bar"
    assert isinstance(logger.parent, eth_utils.ExtendedDebugLogger)
    assert logger.parent.parent.name == "foo"
    assert isinstance(logger.parent.parent, eth_utils.ExtendedDebugLogger)


def test_get_logger_with_existing_ancestors():
    foo_logger = get_logger("foo")
    bar_logger = get_logger("foo.bar")
    assert bar_logger.parent == foo_logger
    baz_logger = get_logger("foo.bar.baz")
    assert baz_logger.parent == bar_logger


def test_formatter_uses_short_logger_name():
    record = logging.LogRecord(
        'beacon_node.builder.ConfigBuilder',
        logging.INFO,
        __file__,
        1,
        "Creating new datadir",
        None,
        None,
    )
    formatted = LOG_FORMATTER.format(record)
    assert 'ConfigBuilder' in formatted
    assert 'beacon_node.builder' not in formatted
    assert formatted.endswith("Creating new datadir")


def test_set_logger_levels():
    set_logger_levels({'beacon_node.test.levels': logging.ERROR})
    assert logging.getLogger('beacon_node.test.levels').level == logging.ERROR


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


def test_setup_file_logging(tmp_path, root_logger):
    root_logger.setLevel(logging.INFO)
    log_file = tmp_path / 'logs' / 'beacon.log'

    handler = setup_file_logging(log_file)
    try:
        assert root_logger.level == logging.DEBUG
        get_logger('beacon_node.test.file').debug("written to the file")
        handler.flush()
        assert "written to the file" in log_file.read_text()
    finally:
        root_logger.removeHandler(handler)
        handler.close()
