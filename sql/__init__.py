"""
=========================================
SQL utilities package for dbsandbox.
=========================================

Pure functions generating the SQL text used to create, inspect and remove
sandbox users and databases. Nothing here touches a connection.

The package follows a clear organization:
    - ddl.py: CREATE/GRANT/DROP statements for users and databases
    - query_builder.py: Liveness and existence queries

Example:
    >>> from sql.ddl import create_database_sql, teardown_sql
    >>>
    >>> create_database_sql('postgresql', 'dbsandbox_abc')
    'CREATE DATABASE "dbsandbox_abc"'
    >>> teardown_sql('mysql', 'usr', 'dbsandbox_abc')
    ["DROP USER 'usr'@'%'", 'DROP DATABASE `dbsandbox_abc`']
"""

__version__ = "0.1.0"
__all__ = [
    # DDL functions
    'create_user_sql', 'create_database_sql', 'grant_privileges_sql',
    'drop_user_sql', 'drop_database_sql', 'teardown_sql',
    'quote_identifier', 'quote_literal',
    # Metadata queries
    'ping_sql', 'check_database_exists_sql', 'check_user_exists_sql',
]

from .ddl import (
    create_database_sql,
    create_user_sql,
    drop_database_sql,
    drop_user_sql,
    grant_privileges_sql,
    quote_identifier,
    quote_literal,
    teardown_sql,
)
from .query_builder import check_database_exists_sql, check_user_exists_sql, ping_sql
