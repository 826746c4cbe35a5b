"""
Pytest suite for core/logger.py.

Covers get_logger level overrides, setup_logging handler management on a
named logger, and the ColoredFormatter output.
"""

import logging

import pytest

from core.logger import ColoredFormatter, get_logger, setup_logging


@pytest.fixture
def scratch_logger():
    name = 'dbsandbox_test_logger'
    yield name
    target = logging.getLogger(name)
    for handler in list(target.handlers):
        target.removeHandler(handler)
        handler.close()
    target.setLevel(logging.NOTSET)


@pytest.mark.unit
def test_get_logger_with_level(scratch_logger):
    logger = get_logger(scratch_logger, level='debug')

    assert logger.level == logging.DEBUG


@pytest.mark.unit
def test_setup_logging_replaces_only_its_own_handlers(scratch_logger):
    target = logging.getLogger(scratch_logger)
    foreign = logging.NullHandler()
    target.addHandler(foreign)

    setup_logging(log_level='INFO', logger_name=scratch_logger)
    setup_logging(log_level='WARNING', logger_name=scratch_logger)

    assert foreign in target.handlers
    assert len(target.handlers) == 2
    assert target.level == logging.WARNING


@pytest.mark.unit
def test_setup_logging_writes_file(scratch_logger, tmp_path):
    logger = setup_logging(
        log_level='DEBUG',
        log_file='sandbox.log',
        log_dir=str(tmp_path),
        console_output=False,
        logger_name=scratch_logger
    )
    logger.debug("provisioned dbsandbox_abc")
    for handler in logger.handlers:
        handler.flush()

    content = (tmp_path / 'sandbox.log').read_text(encoding='utf-8')
    assert 'provisioned dbsandbox_abc' in content
    assert 'DEBUG' in content


@pytest.mark.unit
def test_colored_formatter_keeps_record_untouched():
    formatter = ColoredFormatter('%(emoji)s %(levelname)s %(message)s')
    record = logging.LogRecord('x', logging.ERROR, __file__, 1, 'boom', None, None)

    output = formatter.format(record)

    assert '❌' in output
    assert '\033[31mERROR\033[0m' in output
    assert record.levelname == 'ERROR'
