"""
Exceptions raised while setting up or tearing down a sandbox.

Every exception carries a ``step`` label naming the lifecycle step that
failed, so the fatal message reported to the test runner reads
``dbsandbox: <step>: <error>``.
"""


class SandboxError(Exception):
    """Base exception for sandbox lifecycle failures."""

    step = 'sandbox'


class EntropyError(SandboxError):
    """Raised when the secure random source is unavailable."""

    step = 'identifiers'


class AdminConnectionError(SandboxError):
    """Raised when the administrative engine cannot be created."""

    step = 'admin connection'


class ProvisioningError(SandboxError):
    """Raised when CREATE USER, CREATE DATABASE or a grant statement fails.

    Attributes:
        created: Objects created before the failure (left in place)
    """

    step = 'provisioning'

    def __init__(self, message, created=()):
        super().__init__(message)
        self.created = tuple(created)


class SessionError(SandboxError):
    """Raised when the scoped connection cannot be opened."""

    step = 'session'


class InitialStatementError(SessionError):
    """Raised when an initial statement fails.

    Attributes:
        index: 1-based position of the failing statement
        statement: SQL text of the failing statement
    """

    step = 'initial statements'

    def __init__(self, message, index, statement):
        super().__init__(message)
        self.index = index
        self.statement = statement


class TeardownError(SandboxError):
    """Raised when dropping the sandbox user or database fails."""

    step = 'teardown'


class SandboxSetupError(SandboxError):
    """Raised by ExitStackLifecycle.fatal outside of pytest."""


class SandboxTeardownError(SandboxError):
    """Raised by ExitStackLifecycle.teardown_failed outside of pytest."""
