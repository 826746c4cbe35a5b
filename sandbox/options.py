"""
Option functions accepted by setup_database().

Each option returns a callable that mutates one aspect of a SandboxConfig.
Options are applied in the order given; later options win, except for the
system-owned connection fields (host, port, user, password, database),
which the resolver always overwrites afterwards.

Example:
    >>> from sandbox import options
    >>>
    >>> def tcp_with_timeouts(params):
    ...     params.connect_args.update(connect_timeout=30, read_timeout=10)
    >>>
    >>> sandbox_database(
    ...     options.root_user_credentials('root', 'secret'),
    ...     options.modify_connection_params(tcp_with_timeouts),
    ...     options.add_initial_query('CREATE TABLE todos (id INT PRIMARY KEY)'),
    ... )
"""

from typing import Callable, Iterable

from core.config import ConnectionParams, Option, SandboxConfig


def root_user_credentials(user: str, password: str) -> Option:
    """Use these administrative credentials instead of the environment."""
    def apply(config: SandboxConfig) -> None:
        config.root_user = user
        config.root_password = password
    return apply


def preserve() -> Option:
    """Keep the database and user after the test for inspection."""
    def apply(config: SandboxConfig) -> None:
        config.preserve = True
    return apply


def verbose() -> Option:
    """Log connection details at INFO level during setup."""
    def apply(config: SandboxConfig) -> None:
        config.verbose = True
    return apply


def modify_connection_params(func: Callable[[ConnectionParams], None]) -> Option:
    """Apply a modification function to the connection parameter template.

    Use this to choose the driver or set timeouts and driver flags.

    Note: host, port, user, password and database are overwritten afterwards
    with the resolved administrative values or the generated sandbox
    identity; changes to them are discarded.
    """
    def apply(config: SandboxConfig) -> None:
        func(config.connection)
    return apply


def add_initial_query(query: str) -> Option:
    """Append one statement to run after provisioning."""
    def apply(config: SandboxConfig) -> None:
        config.initial_queries.append(query)
    return apply


def add_initial_queries(queries: Iterable[str]) -> Option:
    """Append several statements to run after provisioning."""
    queries = list(queries)

    def apply(config: SandboxConfig) -> None:
        config.initial_queries.extend(queries)
    return apply


def set_initial_queries(queries: Iterable[str]) -> Option:
    """Replace the statements to run after provisioning."""
    queries = list(queries)

    def apply(config: SandboxConfig) -> None:
        config.initial_queries = list(queries)
    return apply


def set_host_env(env: str) -> Option:
    """Read the server host from another environment variable."""
    def apply(config: SandboxConfig) -> None:
        config.host_env = env
    return apply


def set_port_env(env: str) -> Option:
    """Read the server port from another environment variable."""
    def apply(config: SandboxConfig) -> None:
        config.port_env = env
    return apply


def set_root_user_env(env: str) -> Option:
    """Read the administrative user from another environment variable."""
    def apply(config: SandboxConfig) -> None:
        config.root_user_env = env
    return apply


def set_root_password_env(env: str) -> Option:
    """Read the administrative password from another environment variable."""
    def apply(config: SandboxConfig) -> None:
        config.root_password_env = env
    return apply


def set_preserve_env(env: str) -> Option:
    """Read the preserve flag from another environment variable."""
    def apply(config: SandboxConfig) -> None:
        config.preserve_env = env
    return apply


def set_availability_probe(max_attempts: int, interval: float) -> Option:
    """Override the availability probe budget (defaults: 20 attempts, 0.5 s apart)."""
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def apply(config: SandboxConfig) -> None:
        config.probe_attempts = max_attempts
        config.probe_interval = interval
    return apply
