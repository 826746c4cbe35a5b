"""
==============================================================
Data Definition Language (DDL) for sandbox users and databases.
==============================================================

Generates the dialect-specific statements that create and remove one
sandbox: a login user, a database, and a grant binding the two. All
functions are pure and return SQL text; execution (with AUTOCOMMIT on an
administrative connection) is left to the caller.

Supported dialects:
    - mysql: MySQL 8 and MariaDB (users are created for host '%'; a
      mariadb+ driver resolves to this dialect in core.config)
    - postgresql: PostgreSQL 13+ (the sandbox user owns its database)

Functions:
    quote_identifier: Quote a database/user identifier
    quote_literal: Quote a string literal
    create_user_sql: Generate CREATE USER
    create_database_sql: Generate CREATE DATABASE
    grant_privileges_sql: Generate the grant plus privilege reload statements
    drop_user_sql: Generate DROP USER
    drop_database_sql: Generate DROP DATABASE
    teardown_sql: Generate the ordered statements removing a sandbox

Example:
    >>> from sql.ddl import create_user_sql, grant_privileges_sql
    >>>
    >>> create_user_sql('mysql', 'abc', 'secret')
    "CREATE USER 'abc'@'%' IDENTIFIED BY 'secret'"
    >>> grant_privileges_sql('mysql', 'abc', 'dbsandbox_xyz')
    ["GRANT ALL ON `dbsandbox_xyz`.* TO 'abc'@'%'", 'FLUSH PRIVILEGES']
"""

from typing import List

from core.config import SUPPORTED_DIALECTS

# MySQL accounts are (user, host) pairs; sandbox users may connect from anywhere
MYSQL_ANY_HOST = '%'


def validate_dialect(dialect: str) -> None:
    if dialect not in SUPPORTED_DIALECTS:
        raise ValueError(
            f"Unsupported dialect {dialect!r}; expected one of {', '.join(SUPPORTED_DIALECTS)}"
        )


def quote_identifier(dialect: str, name: str) -> str:
    """Quote an identifier for the given dialect.

    Args:
        dialect: 'mysql' or 'postgresql'
        name: Identifier to quote

    Returns:
        Backtick-quoted (MySQL) or double-quoted (PostgreSQL) identifier
    """
    validate_dialect(dialect)
    if dialect == 'mysql':
        return '`' + name.replace('`', '``') + '`'
    return '"' + name.replace('"', '""') + '"'


def quote_literal(dialect: str, value: str) -> str:
    """Quote a string literal for the given dialect."""
    validate_dialect(dialect)
    escaped = value.replace("'", "''")
    if dialect == 'mysql':
        escaped = escaped.replace('\\', '\\\\')
    return f"'{escaped}'"


def _mysql_account(user: str) -> str:
    return f"{quote_literal('mysql', user)}@{quote_literal('mysql', MYSQL_ANY_HOST)}"


def create_user_sql(dialect: str, user: str, password: str) -> str:
    """Generate CREATE USER statement.

    Args:
        dialect: 'mysql' or 'postgresql'
        user: Name of the user to create
        password: Login password

    Returns:
        SQL CREATE USER statement
    """
    validate_dialect(dialect)
    if dialect == 'mysql':
        return f"CREATE USER {_mysql_account(user)} IDENTIFIED BY {quote_literal(dialect, password)}"
    return (
        f"CREATE USER {quote_identifier(dialect, user)} "
        f"WITH LOGIN PASSWORD {quote_literal(dialect, password)}"
    )


def create_database_sql(dialect: str, database_name: str) -> str:
    """Generate CREATE DATABASE statement.

    Note: PostgreSQL refuses CREATE DATABASE inside a transaction block, so
    the statement must run on an AUTOCOMMIT connection.
    """
    validate_dialect(dialect)
    return f"CREATE DATABASE {quote_identifier(dialect, database_name)}"


def grant_privileges_sql(dialect: str, user: str, database_name: str) -> List[str]:
    """Generate statements granting a user full rights on one database only.

    MySQL grants ALL on the database's objects and reloads the grant tables.
    PostgreSQL hands ownership of the database to the user (so it may create
    objects in the public schema on 15+), grants ALL on the database and
    revokes the default PUBLIC rights; there is no reload statement.

    Args:
        dialect: 'mysql' or 'postgresql'
        user: Grantee
        database_name: The only database the grant covers

    Returns:
        Ordered list of SQL statements
    """
    validate_dialect(dialect)
    if dialect == 'mysql':
        return [
            f"GRANT ALL ON {quote_identifier(dialect, database_name)}.* TO {_mysql_account(user)}",
            "FLUSH PRIVILEGES",
        ]
    database = quote_identifier(dialect, database_name)
    grantee = quote_identifier(dialect, user)
    return [
        f"ALTER DATABASE {database} OWNER TO {grantee}",
        f"GRANT ALL PRIVILEGES ON DATABASE {database} TO {grantee}",
        f"REVOKE ALL ON DATABASE {database} FROM PUBLIC",
    ]


def drop_user_sql(dialect: str, user: str) -> str:
    """Generate DROP USER statement (no IF EXISTS: a missing user is an error)."""
    validate_dialect(dialect)
    if dialect == 'mysql':
        return f"DROP USER {_mysql_account(user)}"
    return f"DROP USER {quote_identifier(dialect, user)}"


def drop_database_sql(dialect: str, database_name: str, force: bool = True) -> str:
    """Generate DROP DATABASE statement.

    Args:
        dialect: 'mysql' or 'postgresql'
        database_name: Name of the database to drop
        force: Add WITH (FORCE) clause (PostgreSQL 13+, ignored for MySQL)

    Returns:
        SQL DROP DATABASE statement
    """
    validate_dialect(dialect)
    sql_parts = ["DROP DATABASE", quote_identifier(dialect, database_name)]

    if force and dialect == 'postgresql':
        sql_parts.append("WITH (FORCE)")

    return " ".join(sql_parts)


def teardown_sql(dialect: str, user: str, database_name: str) -> List[str]:
    """Generate the ordered statements removing a sandbox.

    MySQL drops the user first, then the database. PostgreSQL must drop the
    database first because a role cannot be dropped while it owns one.
    """
    validate_dialect(dialect)
    if dialect == 'mysql':
        return [drop_user_sql(dialect, user), drop_database_sql(dialect, database_name)]
    return [drop_database_sql(dialect, database_name), drop_user_sql(dialect, user)]
