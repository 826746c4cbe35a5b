"""
=======================================
Scoped sessions handed to the test.
=======================================

Opens the connection a test works with: authenticated as the generated
user, bound to the generated database, with the caller's initial
statements already applied.

The engine's disposal is registered as a cleanup before any statement
runs, so it is released even when setup fails. Statements run in order on
one connection and each is committed on its own; the first failure stops
the sequence and earlier statements stay applied.
"""

import logging
from dataclasses import dataclass, field

from sqlalchemy import Engine
from sqlalchemy.engine import URL, Connection
from sqlalchemy.exc import SQLAlchemyError

from core.config import EffectiveConfig
from sandbox.errors import InitialStatementError, SessionError
from sandbox.lifecycle import Lifecycle
from sandbox.provisioner import ProvisionedIdentity
from utils.database_utils import create_sqlalchemy_engine, execute_raw

logger = logging.getLogger(__name__)


@dataclass
class SandboxDatabase:
    """Connection handle and identity of one sandbox.

    Attributes:
        engine: Engine authenticated as the sandbox user
        database: Generated database name
        user: Generated user name
        password: Generated password
    """

    engine: Engine
    database: str
    user: str
    password: str = field(repr=False)

    @property
    def url(self) -> URL:
        return self.engine.url

    def connect(self) -> Connection:
        """Open a new connection to the sandbox database."""
        return self.engine.connect()

    def close(self) -> None:
        """Dispose of the engine; failures are logged, never raised."""
        try:
            self.engine.dispose()
        except SQLAlchemyError as e:
            logger.warning(f"dbsandbox: failed to close database: {e}")


def run_initial_queries(conn: Connection, queries) -> None:
    """Execute and commit each statement in order.

    Raises:
        InitialStatementError: On the first failing statement
    """
    for index, query in enumerate(queries, start=1):
        try:
            execute_raw(conn, query)
            conn.commit()
        except SQLAlchemyError as e:
            raise InitialStatementError(
                f"initial statement #{index} failed: {e}", index=index, statement=query
            ) from e
        logger.debug(f"Initial statement #{index} applied")


def open_session(
    config: EffectiveConfig,
    identity: ProvisionedIdentity,
    lifecycle: Lifecycle
) -> SandboxDatabase:
    """Open the scoped connection and apply the initial statements.

    Args:
        config: Resolved configuration
        identity: Provisioned user, password and database
        lifecycle: Where the engine's disposal is registered

    Returns:
        SandboxDatabase owned by the caller until cleanup

    Raises:
        SessionError: If the scoped connection cannot be opened
        InitialStatementError: If an initial statement fails
    """
    params = config.scoped_params(identity.user, identity.password, identity.database)
    message = f"dbsandbox: Connecting as test user - {params.render()}"
    if config.verbose:
        logger.info(message)
    else:
        logger.debug(message)

    try:
        engine = create_sqlalchemy_engine(params)
    except (SQLAlchemyError, ImportError) as e:
        raise SessionError(f"failed to create engine for {params.render()}: {e}") from e

    handle = SandboxDatabase(
        engine=engine,
        database=identity.database,
        user=identity.user,
        password=identity.password
    )
    lifecycle.add_cleanup(handle.close)

    try:
        conn = engine.connect()
    except SQLAlchemyError as e:
        raise SessionError(f"failed to connect as '{identity.user}': {e}") from e
    with conn:
        run_initial_queries(conn, config.initial_queries)

    return handle
