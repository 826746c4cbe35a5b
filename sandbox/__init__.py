"""
=================================================
Isolated, short-lived databases for tests.
=================================================

For each test this package creates a uniquely named database and a user
that may only access it, runs the caller's setup statements, and hands back
a ready connection. The database and user are dropped when the test ends
unless preservation was requested.

Modules:
    identifiers: Random user, password and database names
    options: Option functions accepted by setup_database()
    lifecycle: pytest and ExitStack adapters for cleanup and failure reporting
    provisioner: CREATE USER / CREATE DATABASE / GRANT
    teardown: DROP USER / DROP DATABASE at the end of the test
    session: Scoped connection and initial statements
    database: setup_database() and sandbox_database() entry points
    pytest_plugin: The sandbox_database fixture

Example:
    >>> from sandbox import options, setup_database
    >>> from sandbox.lifecycle import PytestLifecycle
    >>>
    >>> def test_todos(request):
    ...     db = setup_database(
    ...         PytestLifecycle(request),
    ...         options.root_user_credentials('root', 'root'),
    ...         options.add_initial_query(
    ...             'CREATE TABLE todos (id INT AUTO_INCREMENT PRIMARY KEY, '
    ...             'item VARCHAR(255) NOT NULL)'
    ...         ),
    ...     )
"""

__version__ = "0.1.0"
__all__ = [
    'ProvisionedIdentity',
    'SandboxDatabase',
    'SandboxError',
    'SandboxSetupError',
    'SandboxTeardownError',
    'options',
    'sandbox_database',
    'setup_database',
]

from sandbox import options
from sandbox.database import sandbox_database, setup_database
from sandbox.errors import SandboxError, SandboxSetupError, SandboxTeardownError
from sandbox.provisioner import ProvisionedIdentity
from sandbox.session import SandboxDatabase
