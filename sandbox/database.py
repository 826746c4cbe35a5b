"""
===========================================
Entry point: one isolated database per test.
===========================================

setup_database() runs the whole sandbox lifecycle for one test:

    Resolve-Config -> Open-Admin-Conn -> Probe-Available -> Provision
    -> Register-Teardown -> Open-Scoped-Conn -> Run-Initial-Statements -> Ready

Any failing step is reported through the lifecycle's ``fatal`` with a
message of the form ``dbsandbox: <step>: <error>`` and no further step runs.
Cleanups run last-registered-first: the scoped engine is disposed, then the
user and database are dropped (unless preserved).

Example:
    >>> from sandbox import options
    >>> from sandbox.database import sandbox_database
    >>>
    >>> with sandbox_database(options.add_initial_query("CREATE TABLE t (id INT)")) as db:
    ...     with db.connect() as conn:
    ...         conn.exec_driver_sql("INSERT INTO t VALUES (1)")
"""

import contextlib
import logging
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError

from core.config import MYSQL_DEFAULTS, ConfigurationError, EnvironmentDefaults, Option, resolve_config
from sandbox.errors import AdminConnectionError, SandboxError, SandboxTeardownError
from sandbox.lifecycle import ExitStackLifecycle, Lifecycle
from sandbox.provisioner import Provisioner
from sandbox.session import SandboxDatabase, open_session
from sandbox.teardown import TeardownAgent
from utils.database_utils import DatabaseConnectionError, create_sqlalchemy_engine, wait_for_database

logger = logging.getLogger(__name__)

_FATAL_ERRORS = (SandboxError, ConfigurationError, DatabaseConnectionError)


def _fatal(lifecycle: Lifecycle, error: Exception):
    lifecycle.fatal(f"dbsandbox: {error.step}: {error}")


def _guarded_teardown(agent: TeardownAgent, lifecycle: Lifecycle):
    def cleanup() -> None:
        try:
            agent()
        except SandboxError as e:
            lifecycle.teardown_failed(f"dbsandbox: {e.step}: {e}")
    return cleanup


def _close_after_error(stack: contextlib.ExitStack) -> None:
    try:
        stack.close()
    except SandboxTeardownError as e:
        logger.error(f"{e} (raised while handling an earlier error)")


def setup_database(
    lifecycle: Lifecycle,
    *options: Option,
    defaults: EnvironmentDefaults = MYSQL_DEFAULTS
) -> SandboxDatabase:
    """Create an isolated database and user, and return a connection to it.

    Args:
        lifecycle: Cleanup registration and fatal-failure reporting
        *options: Option functions from sandbox.options
        defaults: Env-var names and fallback values (MySQL by default)

    Returns:
        SandboxDatabase authenticated as the generated user
    """
    try:
        config = resolve_config(options, defaults=defaults)

        admin_params = config.admin_params()
        message = f"dbsandbox: Connecting as root user - {admin_params.render()}"
        if config.verbose:
            logger.info(message)
        else:
            logger.debug(message)

        try:
            admin_engine = create_sqlalchemy_engine(admin_params, isolation_level='AUTOCOMMIT')
        except (SQLAlchemyError, ImportError) as e:
            raise AdminConnectionError(str(e)) from e

        try:
            wait_for_database(
                admin_engine,
                max_retries=config.probe_attempts,
                retry_delay=config.probe_interval
            )
            identity = Provisioner(admin_engine, config.dialect).provision()
        finally:
            admin_engine.dispose()

        lifecycle.add_cleanup(_guarded_teardown(TeardownAgent(config, identity), lifecycle))

        return open_session(config, identity, lifecycle)
    except _FATAL_ERRORS as e:
        _fatal(lifecycle, e)


@contextlib.contextmanager
def sandbox_database(
    *options: Option,
    defaults: EnvironmentDefaults = MYSQL_DEFAULTS
) -> Iterator[SandboxDatabase]:
    """Context manager version of setup_database() for use outside pytest.

    Setup failures raise SandboxSetupError and teardown failures raise
    SandboxTeardownError. Cleanups run on exit, including when setup failed
    halfway. When the body (or setup) already raised, a teardown failure is
    logged and the original exception propagates unchanged.
    """
    with contextlib.ExitStack() as stack:
        try:
            yield setup_database(ExitStackLifecycle(stack), *options, defaults=defaults)
        except BaseException:
            _close_after_error(stack)
            raise
