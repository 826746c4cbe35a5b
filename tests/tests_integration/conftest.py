"""
Fixtures for tests that talk to a real MySQL server.

Start one with:

    docker run --name todo-db -d --rm -p 33060:3306 --tmpfs /var/lib/mysql \\
        -e MYSQL_ROOT_PASSWORD=root -e MYSQL_ROOT_HOST=% mysql/mysql-server:8.0.28 \\
        --max-connections=1000

and export MYSQL_PORT=33060. Tests requesting ``mysql_admin_engine`` are
skipped when no server answers.
"""

import pytest

from core.config import resolve_config
from utils.database_utils import check_database_available, create_sqlalchemy_engine


@pytest.fixture(scope="session")
def mysql_admin_engine():
    """Administrative engine for out-of-band checks; skips when unreachable."""
    params = resolve_config().admin_params()
    params.connect_args['connect_timeout'] = 2
    engine = create_sqlalchemy_engine(params, isolation_level='AUTOCOMMIT')
    if not check_database_available(engine):
        engine.dispose()
        pytest.skip(f"MySQL server not reachable at {params.render()}")
    yield engine
    engine.dispose()
