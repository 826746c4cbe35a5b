"""
================================================
Provisioning of sandbox users and databases.
================================================

Creates the per-test identity on an administrative connection:

    1. a random user with a random password, allowed to connect from any host
    2. a random database named ``dbsandbox_<suffix>``
    3. a grant giving the user full rights on that database only

There is no rollback: if a later step fails, objects created by earlier
steps stay on the server. The error lists them, and the ``dbsandbox_``
prefix makes orphaned databases easy to find.

Example:
    >>> from sandbox.provisioner import Provisioner
    >>>
    >>> identity = Provisioner(admin_engine, "mysql").provision()
    >>> print(identity.user, identity.database)
"""

import logging
from dataclasses import dataclass, field
from typing import List

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from sandbox.errors import ProvisioningError
from sandbox.identifiers import random_database_name, random_suffix
from sql.ddl import create_database_sql, create_user_sql, grant_privileges_sql
from utils.database_utils import execute_raw

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProvisionedIdentity:
    """Generated credentials and database of one sandbox."""

    user: str
    password: str = field(repr=False)
    database: str


class Provisioner:
    """Creates a sandbox user, database and grant.

    Attributes:
        engine: Administrative engine (AUTOCOMMIT)
        dialect: 'mysql' or 'postgresql'
        created: Human-readable list of objects created so far
    """

    def __init__(self, engine: Engine, dialect: str):
        self.engine = engine
        self.dialect = dialect
        self.created: List[str] = []

    def _execute(self, statements: List[str], action: str) -> None:
        try:
            with self.engine.connect() as conn:
                for statement in statements:
                    execute_raw(conn, statement)
        except SQLAlchemyError as e:
            message = f"failed to {action}: {e}"
            if self.created:
                message += f" (left behind: {', '.join(self.created)})"
                logger.warning(f"Provisioning aborted, manual cleanup needed for {', '.join(self.created)}")
            raise ProvisioningError(message, created=self.created) from e

    def create_random_user(self):
        """Create a user with random name and password.

        Returns:
            Tuple of (user, password)
        """
        user = random_suffix()
        password = random_suffix()
        self._execute([create_user_sql(self.dialect, user, password)], f"create user {user}")
        self.created.append(f"user {user}")
        logger.debug(f"Created user {user}")
        return user, password

    def create_random_database(self) -> str:
        """Create a database with a random, prefixed name."""
        database = random_database_name()
        self._execute([create_database_sql(self.dialect, database)], f"create database {database}")
        self.created.append(f"database {database}")
        logger.debug(f"Created database {database}")
        return database

    def grant_all_privileges(self, user: str, database: str) -> None:
        """Grant the user all privileges on the database, then reload grants."""
        self._execute(
            grant_privileges_sql(self.dialect, user, database),
            f"grant privileges on {database} to {user}"
        )

    def provision(self) -> ProvisionedIdentity:
        """Run all provisioning steps in order.

        Returns:
            ProvisionedIdentity of the new sandbox

        Raises:
            ProvisioningError: If any statement fails
        """
        user, password = self.create_random_user()
        database = self.create_random_database()
        self.grant_all_privileges(user, database)
        logger.info(f"Provisioned database '{database}' for user '{user}'")
        return ProvisionedIdentity(user=user, password=password, database=database)
