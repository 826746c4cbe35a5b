"""
=====================================
Metadata queries for sandbox checks.
=====================================

Read-only queries used to probe a server and to inspect whether sandbox
objects exist. Names are passed as bound parameters (':name') so the
queries are executed with sqlalchemy.text().

Metadata Query Functions:
- ping_sql: Lightweight liveness check
- check_database_exists_sql: Check if a database exists
- check_user_exists_sql: Check if a login user exists
"""

from sql.ddl import MYSQL_ANY_HOST, validate_dialect


def ping_sql() -> str:
    """Generate the liveness check query."""
    return "SELECT 1"


def check_database_exists_sql(dialect: str) -> str:
    """
    Generate SQL to check if a database exists.

    Args:
        dialect: 'mysql' or 'postgresql'

    Returns:
        SQL query binding ':name'; returns one row if the database exists
    """
    validate_dialect(dialect)
    if dialect == 'mysql':
        return "SELECT 1 FROM information_schema.schemata WHERE schema_name = :name"
    return "SELECT 1 FROM pg_database WHERE datname = :name"


def check_user_exists_sql(dialect: str) -> str:
    """
    Generate SQL to check if a login user exists.

    Args:
        dialect: 'mysql' or 'postgresql'

    Returns:
        SQL query binding ':name'; returns one row if the user exists
    """
    validate_dialect(dialect)
    if dialect == 'mysql':
        return f"SELECT 1 FROM mysql.user WHERE user = :name AND host = '{MYSQL_ANY_HOST}'"
    return "SELECT 1 FROM pg_roles WHERE rolname = :name"
