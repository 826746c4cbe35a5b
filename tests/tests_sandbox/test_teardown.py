"""
Pytest suite for sandbox/teardown.py.

Covers the preserve skip, the fresh administrative engine, drop order per
dialect, and failure reporting (including a second run against objects
that are already gone).
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import ArgumentError

from core.config import POSTGRESQL_DEFAULTS
from sandbox import options
from sandbox.errors import TeardownError
from sandbox.provisioner import ProvisionedIdentity
from sandbox.teardown import TeardownAgent

IDENTITY = ProvisionedIdentity(user='u1', password='p1', database='dbsandbox_d1')


@pytest.mark.unit
def test_teardown_drops_user_then_database(config_factory, fake_engine_factory):
    engine = fake_engine_factory()

    with patch('sandbox.teardown.create_sqlalchemy_engine', return_value=engine) as mock_create:
        TeardownAgent(config_factory(), IDENTITY)()

    params = mock_create.call_args.args[0]
    assert (params.user, params.password, params.database) == ('root', 'root', None)
    assert mock_create.call_args.kwargs == {'isolation_level': 'AUTOCOMMIT'}
    assert engine.connection.executed == ["DROP USER 'u1'@'%'", "DROP DATABASE `dbsandbox_d1`"]
    assert engine.disposed == 1


@pytest.mark.unit
def test_teardown_postgresql_drops_database_first(config_factory, fake_engine_factory):
    engine = fake_engine_factory()
    config = config_factory(defaults=POSTGRESQL_DEFAULTS)

    with patch('sandbox.teardown.create_sqlalchemy_engine', return_value=engine):
        TeardownAgent(config, IDENTITY)()

    assert engine.connection.executed == ['DROP DATABASE "dbsandbox_d1" WITH (FORCE)', 'DROP USER "u1"']


@pytest.mark.unit
def test_teardown_skipped_when_preserved(config_factory, caplog):
    config = config_factory(options.preserve())

    with patch('sandbox.teardown.create_sqlalchemy_engine') as mock_create, \
         caplog.at_level('INFO', logger='sandbox.teardown'):
        TeardownAgent(config, IDENTITY)()

    mock_create.assert_not_called()
    assert "database 'dbsandbox_d1' and user 'u1' are preserved" in caplog.text


@pytest.mark.unit
def test_teardown_preserved_via_environment(config_factory):
    config = config_factory(environ={'PRESERVE_TEST_DB': 'true'})

    with patch('sandbox.teardown.create_sqlalchemy_engine') as mock_create:
        TeardownAgent(config, IDENTITY)()

    mock_create.assert_not_called()


@pytest.mark.edge_case
def test_drop_failure_raises_and_disposes(config_factory, fake_engine_factory, driver_error):
    engine = fake_engine_factory(fail_on=['DROP USER'], error=driver_error("Operation DROP USER failed"))

    with patch('sandbox.teardown.create_sqlalchemy_engine', return_value=engine):
        with pytest.raises(TeardownError) as exc_info:
            TeardownAgent(config_factory(), IDENTITY)()

    assert 'dbsandbox_d1' in str(exc_info.value)
    assert engine.connection.executed == []
    assert engine.disposed == 1


@pytest.mark.edge_case
def test_second_run_fails_when_objects_are_gone(config_factory, fake_engine_factory, driver_error):
    """Already-absent objects are a hard failure, not a silent no-op."""
    first = fake_engine_factory()
    second = fake_engine_factory(fail_on=['DROP'], error=driver_error('unknown user'))
    agent = TeardownAgent(config_factory(), IDENTITY)

    with patch('sandbox.teardown.create_sqlalchemy_engine', side_effect=[first, second]):
        agent()
        with pytest.raises(TeardownError):
            agent()

    assert len(first.connection.executed) == 2


@pytest.mark.edge_case
def test_engine_creation_failure(config_factory):
    with patch('sandbox.teardown.create_sqlalchemy_engine', side_effect=ArgumentError('bad url')):
        with pytest.raises(TeardownError) as exc_info:
            TeardownAgent(config_factory(), IDENTITY)()

    assert 'administrative connection' in str(exc_info.value)
