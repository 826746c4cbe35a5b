"""
===============================================
Configuration management for database sandboxes.
===============================================

Resolves the administrative connection parameters for one sandbox from three
layers, applied in this order:

- An explicit defaults record (env-var names and fallback values per dialect)
- Caller-supplied option functions, applied in registration order
- Environment variables (optionally loaded from a .env file)

The system-owned connection fields (host, port, user, password, database)
are always written last, so option functions can never redirect them.

Example:
    >>> from core.config import MYSQL_DEFAULTS, resolve_config
    >>>
    >>> def slow_network(config):
    ...     config.connection.connect_args['connect_timeout'] = 30
    >>>
    >>> effective = resolve_config([slow_network], defaults=MYSQL_DEFAULTS)
    >>> print(f"Host: {effective.host}, Port: {effective.port}")
"""

import copy
import os
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from dotenv import dotenv_values, find_dotenv
from sqlalchemy.engine import URL

DEFAULT_PROBE_ATTEMPTS = 20
DEFAULT_PROBE_INTERVAL = 0.5

_FALSE_VALUES = ('', '0', 'false', 'no', 'off')

SUPPORTED_DIALECTS = ('mysql', 'postgresql')

# MariaDB speaks the MySQL account and grant syntax
DIALECT_ALIASES = {'mariadb': 'mysql'}


class ConfigurationError(Exception):
    """Exception raised when the environment holds unusable settings."""

    step = 'config'


@dataclass
class ConnectionParams:
    """Parameters used to build one SQLAlchemy engine.

    Attributes:
        drivername: SQLAlchemy driver name (e.g. 'mysql+pymysql')
        host: Server hostname or IP address (system-owned)
        port: Server port number (system-owned)
        user: Login user (system-owned)
        password: Login password (system-owned)
        database: Database to connect to (system-owned)
        query: URL query options passed to the dialect
        connect_args: Keyword arguments for the DBAPI connect() call
        engine_options: Extra keyword arguments for create_engine()
    """

    drivername: str
    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None
    query: Dict[str, str] = field(default_factory=dict)
    connect_args: Dict[str, Any] = field(default_factory=dict)
    engine_options: Dict[str, Any] = field(default_factory=dict)

    @property
    def dialect(self) -> str:
        """Get the SQL dialect ('mysql', 'postgresql', ...); MariaDB maps to 'mysql'."""
        backend = self.drivername.split('+', 1)[0]
        return DIALECT_ALIASES.get(backend, backend)

    def to_url(self) -> URL:
        """Build a SQLAlchemy URL from these parameters."""
        return URL.create(
            drivername=self.drivername,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
            query=self.query
        )

    def render(self) -> str:
        """Render the connection URL with the password masked."""
        return self.to_url().render_as_string(hide_password=True)


@dataclass(frozen=True)
class EnvironmentDefaults:
    """Environment variable names and fallback values for one dialect.

    Attributes:
        drivername: Default SQLAlchemy driver name
        host_env: Variable holding the server host
        port_env: Variable holding the server port
        root_user_env: Variable holding the administrative user
        root_password_env: Variable holding the administrative password
        preserve_env: Variable that, when truthy, disables teardown
        host: Fallback host
        port: Fallback port
        root_user: Fallback administrative user
        root_password: Fallback administrative password
        admin_database: Database the administrative connection opens, if any
    """

    drivername: str
    host_env: str
    port_env: str
    root_user_env: str
    root_password_env: str
    preserve_env: str
    host: str
    port: int
    root_user: str
    root_password: str
    admin_database: Optional[str] = None


MYSQL_DEFAULTS = EnvironmentDefaults(
    drivername='mysql+pymysql',
    host_env='MYSQL_HOST',
    port_env='MYSQL_PORT',
    root_user_env='MYSQL_ROOT_USER',
    root_password_env='MYSQL_ROOT_PASSWORD',
    preserve_env='PRESERVE_TEST_DB',
    host='127.0.0.1',
    port=3306,
    root_user='root',
    root_password='root'
)

POSTGRESQL_DEFAULTS = EnvironmentDefaults(
    drivername='postgresql+psycopg2',
    host_env='POSTGRES_HOST',
    port_env='POSTGRES_PORT',
    root_user_env='POSTGRES_USER',
    root_password_env='POSTGRES_PASSWORD',
    preserve_env='PRESERVE_TEST_DB',
    host='127.0.0.1',
    port=5432,
    root_user='postgres',
    root_password='',
    admin_database='postgres'
)


@dataclass
class SandboxConfig:
    """Mutable configuration that option functions operate on.

    Created from an EnvironmentDefaults record; never used directly by the
    provisioning code, which only sees the frozen EffectiveConfig.
    """

    host_env: str
    port_env: str
    root_user_env: str
    root_password_env: str
    preserve_env: str
    connection: ConnectionParams
    root_user: Optional[str] = None
    root_password: Optional[str] = None
    preserve: bool = False
    verbose: bool = False
    initial_queries: List[str] = field(default_factory=list)
    probe_attempts: int = DEFAULT_PROBE_ATTEMPTS
    probe_interval: float = DEFAULT_PROBE_INTERVAL

    @classmethod
    def from_defaults(cls, defaults: EnvironmentDefaults) -> 'SandboxConfig':
        return cls(
            host_env=defaults.host_env,
            port_env=defaults.port_env,
            root_user_env=defaults.root_user_env,
            root_password_env=defaults.root_password_env,
            preserve_env=defaults.preserve_env,
            connection=ConnectionParams(drivername=defaults.drivername)
        )


Option = Callable[[SandboxConfig], None]


@dataclass(frozen=True)
class EffectiveConfig:
    """Resolved, immutable configuration for one sandbox.

    The connection templates are private; admin_params() and scoped_params()
    hand out copies so callers cannot alter the resolved state.
    """

    host: str
    port: int
    root_user: str
    root_password: str
    admin_database: Optional[str]
    preserve: bool
    verbose: bool
    initial_queries: Tuple[str, ...]
    probe_attempts: int
    probe_interval: float
    _template: ConnectionParams = field(repr=False, compare=False)

    @property
    def dialect(self) -> str:
        return self._template.dialect

    def _with_identity(self, user: str, password: str, database: Optional[str]) -> ConnectionParams:
        params = copy.deepcopy(self._template)
        params.host = self.host
        params.port = self.port
        params.user = user
        params.password = password
        params.database = database
        return params

    def admin_params(self) -> ConnectionParams:
        """Get parameters for an administrative connection."""
        return self._with_identity(self.root_user, self.root_password, self.admin_database)

    def scoped_params(self, user: str, password: str, database: str) -> ConnectionParams:
        """Get parameters for a connection as the sandbox user."""
        return self._with_identity(user, password, database)


def is_truthy(value: Optional[str]) -> bool:
    """Interpret a boolean-like environment value."""
    if value is None:
        return False
    return value.strip().lower() not in _FALSE_VALUES


def _get_env(environ: Mapping[str, str], key: str, default: str) -> str:
    value = environ.get(key, '')
    return value if value else default


def _load_environment(load_env_file: bool) -> Dict[str, str]:
    # Real environment variables take precedence over .env entries
    values: Dict[str, str] = {}
    if load_env_file:
        env_path = find_dotenv(usecwd=True)
        if env_path:
            values.update({k: v for k, v in dotenv_values(env_path).items() if v is not None})
    values.update(os.environ)
    return values


def resolve_config(
    options: Iterable[Option] = (),
    defaults: EnvironmentDefaults = MYSQL_DEFAULTS,
    environ: Optional[Mapping[str, str]] = None,
    load_env_file: bool = True
) -> EffectiveConfig:
    """Merge defaults, options and environment into an EffectiveConfig.

    Args:
        options: Option functions, applied in order
        defaults: Env-var names and fallback values
        environ: Mapping to read instead of the process environment
        load_env_file: If True and environ is None, also read a .env file

    Returns:
        Frozen EffectiveConfig

    Raises:
        ConfigurationError: If the driver has no supported dialect or the
            port variable is not an integer
    """
    config = SandboxConfig.from_defaults(defaults)
    for option in options:
        option(config)

    if config.connection.dialect not in SUPPORTED_DIALECTS:
        raise ConfigurationError(
            f"unsupported driver {config.connection.drivername!r}; "
            f"expected a {' or '.join(SUPPORTED_DIALECTS)} driver"
        )

    if environ is None:
        environ = _load_environment(load_env_file)

    host = _get_env(environ, config.host_env, defaults.host)
    raw_port = _get_env(environ, config.port_env, str(defaults.port))
    try:
        port = int(raw_port)
    except ValueError:
        raise ConfigurationError(
            f"{config.port_env} must be an integer port number, got {raw_port!r}"
        )

    root_user = config.root_user
    if root_user is None:
        root_user = _get_env(environ, config.root_user_env, defaults.root_user)
    root_password = config.root_password
    if root_password is None:
        root_password = _get_env(environ, config.root_password_env, defaults.root_password)

    preserve = config.preserve or is_truthy(environ.get(config.preserve_env))

    return EffectiveConfig(
        host=host,
        port=port,
        root_user=root_user,
        root_password=root_password,
        admin_database=defaults.admin_database,
        preserve=preserve,
        verbose=config.verbose,
        initial_queries=tuple(config.initial_queries),
        probe_attempts=config.probe_attempts,
        probe_interval=config.probe_interval,
        _template=copy.deepcopy(config.connection)
    )
