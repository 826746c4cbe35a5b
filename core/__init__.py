"""
===========================================
Core infrastructure package for dbsandbox.
===========================================

Configuration resolution and logging infrastructure shared by the sandbox
packages.

Modules:
    config: Defaults records, option targets and configuration resolution
    logger: Logging configuration and utilities

Example:
    >>> from core.config import resolve_config
    >>> from core.logger import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info(f"Connecting to {resolve_config().host}")
"""

__version__ = "0.1.0"
__all__ = [
    'ConfigurationError',
    'ConnectionParams',
    'EffectiveConfig',
    'EnvironmentDefaults',
    'MYSQL_DEFAULTS',
    'POSTGRESQL_DEFAULTS',
    'SandboxConfig',
    'get_logger',
    'resolve_config',
    'setup_logging',
]

from core.config import (
    MYSQL_DEFAULTS,
    POSTGRESQL_DEFAULTS,
    ConfigurationError,
    ConnectionParams,
    EffectiveConfig,
    EnvironmentDefaults,
    SandboxConfig,
    resolve_config,
)
from core.logger import get_logger, setup_logging
