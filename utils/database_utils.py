"""
==============================================
Database connectivity utilities for sandboxes.
==============================================

Provides engine construction, raw statement execution, availability probing
and existence checks shared by the provisioning, teardown and session code.

Key Features:
    - Engine building from ConnectionParams
    - Raw statement execution without parameter interpolation
    - Availability probing with a bounded retry budget
    - Database and user existence checks

Example:
    >>> from core.config import resolve_config
    >>> from utils.database_utils import create_sqlalchemy_engine, wait_for_database
    >>>
    >>> params = resolve_config().admin_params()
    >>> engine = create_sqlalchemy_engine(params, isolation_level='AUTOCOMMIT')
    >>> wait_for_database(engine, max_retries=5, retry_delay=1)
"""

import logging
import time
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import DEFAULT_PROBE_ATTEMPTS, DEFAULT_PROBE_INTERVAL, ConnectionParams
from sql.query_builder import check_database_exists_sql, check_user_exists_sql, ping_sql

logger = logging.getLogger(__name__)


class DatabaseConnectionError(Exception):
    """Exception raised when the server never accepts a connection."""

    step = 'availability'


def create_sqlalchemy_engine(params: ConnectionParams, isolation_level: Optional[str] = None) -> Engine:
    """
    Create a SQLAlchemy engine from connection parameters.

    Args:
        params: Connection parameters (URL parts, connect_args, engine_options)
        isolation_level: Optional isolation level, e.g. 'AUTOCOMMIT' for DDL

    Returns:
        Configured SQLAlchemy Engine (no connection is opened yet)
    """
    engine_options = dict(params.engine_options)
    if params.connect_args:
        engine_options['connect_args'] = dict(params.connect_args)
    if isolation_level:
        engine_options['isolation_level'] = isolation_level
    engine_options.setdefault('pool_pre_ping', True)

    return create_engine(params.to_url(), **engine_options)


def execute_raw(conn: Connection, statement: str):
    """
    Execute one statement exactly as written.

    The statement bypasses SQLAlchemy's bound-parameter parsing and the
    DBAPI's '%' interpolation, so literals such as 'user'@'%' pass through.

    Args:
        conn: Open connection
        statement: SQL text

    Returns:
        CursorResult of the statement
    """
    return conn.execution_options(no_parameters=True).exec_driver_sql(statement)


def check_database_available(engine: Engine) -> bool:
    """
    Check if the server behind an engine accepts connections.

    Args:
        engine: Engine to probe

    Returns:
        True if a connection could run the liveness query, False otherwise
    """
    try:
        with engine.connect() as conn:
            execute_raw(conn, ping_sql())
        return True
    except SQLAlchemyError as e:
        logger.debug(f"Database not available: {e}")
        return False


def wait_for_database(
    engine: Engine,
    max_retries: int = DEFAULT_PROBE_ATTEMPTS,
    retry_delay: float = DEFAULT_PROBE_INTERVAL
) -> bool:
    """
    Wait for the server to accept connections, with a bounded retry budget.

    Args:
        engine: Engine to probe
        max_retries: Maximum number of attempts
        retry_delay: Delay between failed attempts in seconds

    Returns:
        True once the server is available

    Raises:
        DatabaseConnectionError: If the server never becomes available

    Example:
        >>> wait_for_database(engine)
        >>> # Waits up to ~10 seconds with the defaults
    """
    target = engine.url.render_as_string(hide_password=True)
    logger.debug(f"Waiting for database at {target}...")

    for attempt in range(1, max_retries + 1):
        if check_database_available(engine):
            logger.debug(f"Database is available (attempt {attempt}/{max_retries})")
            return True

        if attempt < max_retries:
            logger.warning(
                f"⏳ Database not available yet (attempt {attempt}/{max_retries}), "
                f"retrying in {retry_delay}s..."
            )
            time.sleep(retry_delay)

    error_msg = f"failed to connect to the database at {target} after {max_retries} attempts"
    logger.error(f"❌ {error_msg}")
    raise DatabaseConnectionError(error_msg)


def verify_database_exists(engine: Engine, dialect: str, database_name: str) -> bool:
    """
    Verify if a database exists on the server.

    Args:
        engine: Administrative engine
        dialect: 'mysql' or 'postgresql'
        database_name: Name of database to check

    Returns:
        True if database exists, False otherwise
    """
    with engine.connect() as conn:
        result = conn.execute(text(check_database_exists_sql(dialect)), {"name": database_name})
        return result.fetchone() is not None


def verify_user_exists(engine: Engine, dialect: str, user: str) -> bool:
    """
    Verify if a login user exists on the server.

    Args:
        engine: Administrative engine
        dialect: 'mysql' or 'postgresql'
        user: Name of user to check

    Returns:
        True if user exists, False otherwise
    """
    with engine.connect() as conn:
        result = conn.execute(text(check_user_exists_sql(dialect)), {"name": user})
        return result.fetchone() is not None
