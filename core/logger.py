"""
=====================================================
Logging setup for the sandbox packages.
=====================================================

Sandbox modules log through ``logging.getLogger(__name__)`` and never
install handlers themselves. setup_logging() attaches a console handler
(coloured, with a level marker) and optionally a file handler to one named
logger; the pytest plugin calls it for ``sandbox`` and ``utils`` when
``--dbsandbox-log-level`` is given.

Handlers installed here are tagged, so calling setup_logging() again
replaces them without touching handlers added by pytest or the caller.

Example:
    >>> from core.logger import setup_logging
    >>>
    >>> setup_logging(log_level='DEBUG', logger_name='sandbox')
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

RESET = '\033[0m'

# level name -> (ANSI colour, marker)
LEVEL_STYLES = {
    'DEBUG': ('\033[36m', '🔍'),
    'INFO': ('\033[32m', 'ℹ️ '),
    'WARNING': ('\033[33m', '⚠️ '),
    'ERROR': ('\033[31m', '❌'),
    'CRITICAL': ('\033[35m', '🔥'),
}

_OWNED = '_dbsandbox'


class ColoredFormatter(logging.Formatter):
    """Console formatter: coloured level name plus an ``%(emoji)s`` marker."""

    def format(self, record):
        colour, marker = LEVEL_STYLES.get(record.levelname, ('', ''))
        styled = logging.makeLogRecord(record.__dict__)
        styled.emoji = marker
        if colour:
            styled.levelname = f"{colour}{record.levelname}{RESET}"
        return super().format(styled)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Return the logger for ``name``, optionally setting its level."""
    logger = logging.getLogger(name)
    if level:
        logger.setLevel(level.upper())
    return logger


def _owned(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _OWNED, True)
    return handler


def setup_logging(
    log_level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console_output: bool = True,
    use_colors: bool = True,
    logger_name: Optional[str] = None
) -> logging.Logger:
    """Attach console and/or file handlers to one logger.

    Args:
        log_level: DEBUG/INFO/WARNING/ERROR/CRITICAL
        log_file: File name to write to; no file handler when None
        log_dir: Directory for log_file (created if missing, default 'logs')
        console_output: Write to stdout
        use_colors: Colour the console output
        logger_name: Logger to configure; the root logger when None

    Returns:
        The configured logger
    """
    level = logging.getLevelName(log_level.upper())
    target = logging.getLogger(logger_name)
    target.setLevel(level)

    for handler in [h for h in target.handlers if getattr(h, _OWNED, False)]:
        target.removeHandler(handler)
        handler.close()

    if console_output:
        if use_colors:
            formatter = ColoredFormatter(f'%(emoji)s {LOG_FORMAT}', datefmt=DATE_FORMAT)
        else:
            formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        target.addHandler(_owned(logging.StreamHandler(sys.stdout), level, formatter))

    if log_file:
        directory = Path(log_dir or 'logs')
        directory.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(directory / log_file, encoding='utf-8')
        target.addHandler(_owned(file_handler, level, logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)))

    return target
