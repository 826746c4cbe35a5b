"""
=====================================
Teardown of sandbox users and databases.
=====================================

The teardown is registered as a cleanup right after provisioning and runs
when the test ends. By then the provisioning connection is gone, so the
agent opens a fresh administrative engine from the resolved configuration.

Dropping an object that no longer exists is a failure: a sandbox that
vanished before teardown points at interference between tests, and pytest
reports it as a teardown error without changing the test's own outcome.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from core.config import EffectiveConfig
from sandbox.errors import TeardownError
from sandbox.provisioner import ProvisionedIdentity
from sql.ddl import teardown_sql
from utils.database_utils import create_sqlalchemy_engine, execute_raw

logger = logging.getLogger(__name__)


class TeardownAgent:
    """Callable that removes a provisioned sandbox.

    Attributes:
        config: Resolved configuration (admin credentials, preserve flag)
        identity: Sandbox to remove
    """

    def __init__(self, config: EffectiveConfig, identity: ProvisionedIdentity):
        self.config = config
        self.identity = identity

    def __call__(self) -> None:
        user, database = self.identity.user, self.identity.database
        if self.config.preserve:
            logger.info(f"dbsandbox: database '{database}' and user '{user}' are preserved")
            return

        try:
            engine = create_sqlalchemy_engine(self.config.admin_params(), isolation_level='AUTOCOMMIT')
        except (SQLAlchemyError, ImportError) as e:
            raise TeardownError(f"failed to open administrative connection: {e}") from e

        try:
            with engine.connect() as conn:
                for statement in teardown_sql(self.config.dialect, user, database):
                    logger.debug(f"Teardown: {statement}")
                    execute_raw(conn, statement)
        except SQLAlchemyError as e:
            raise TeardownError(f"failed to teardown database '{database}' and user '{user}': {e}") from e
        finally:
            engine.dispose()

        logger.info(f"Removed database '{database}' and user '{user}'")
