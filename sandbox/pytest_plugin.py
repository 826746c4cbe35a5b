"""
pytest integration for dbsandbox.

Enable it in a conftest.py::

    pytest_plugins = ["sandbox.pytest_plugin"]

and request the ``sandbox_database`` fixture::

    def test_todos(sandbox_database):
        db = sandbox_database(options.add_initial_query("CREATE TABLE todos (...)"))
        with db.connect() as conn:
            ...
"""

import pytest

from core.config import MYSQL_DEFAULTS
from core.logger import setup_logging
from sandbox.database import setup_database
from sandbox.lifecycle import PytestLifecycle


def pytest_addoption(parser):
    group = parser.getgroup("dbsandbox", "isolated test databases")
    group.addoption(
        "--dbsandbox-log-level",
        action="store",
        default=None,
        help="Log sandbox setup and teardown to stdout at this level (e.g. DEBUG).",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "dbsandbox: test provisions an isolated database")
    log_level = config.getoption("--dbsandbox-log-level")
    if log_level:
        for name in ("sandbox", "utils"):
            setup_logging(log_level=log_level, logger_name=name)


@pytest.fixture
def sandbox_database(request):
    """Factory provisioning isolated databases for the requesting test.

    Each call creates a new database and user; all of them are removed when
    the test finishes.
    """
    lifecycle = PytestLifecycle(request)

    def factory(*options, defaults=MYSQL_DEFAULTS):
        return setup_database(lifecycle, *options, defaults=defaults)

    return factory
