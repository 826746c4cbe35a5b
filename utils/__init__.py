"""
==========================
Utility Functions Package.
==========================

Reusable database connectivity helpers for the sandbox packages.

Modules:
    database_utils: Engine construction, availability probing and existence checks
"""

__version__ = "0.1.0"
__all__ = [
    'DatabaseConnectionError',
    'check_database_available',
    'create_sqlalchemy_engine',
    'execute_raw',
    'verify_database_exists',
    'verify_user_exists',
    'wait_for_database',
]

from .database_utils import (
    DatabaseConnectionError,
    check_database_available,
    create_sqlalchemy_engine,
    execute_raw,
    verify_database_exists,
    verify_user_exists,
    wait_for_database,
)
