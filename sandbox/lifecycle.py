"""
Adapters between the sandbox code and a test runner's lifecycle hooks.

A lifecycle provides a place to register cleanups that run when the test
ends (last registered runs first), a way to abort setup with a message, and
a way to report a cleanup that failed. ``fatal`` and ``teardown_failed``
must raise.
"""

import contextlib
from typing import Callable, NoReturn, Protocol

import pytest

from sandbox.errors import SandboxSetupError, SandboxTeardownError


class Lifecycle(Protocol):
    def add_cleanup(self, func: Callable[[], None]) -> None:
        ...

    def fatal(self, message: str) -> NoReturn:
        ...

    def teardown_failed(self, message: str) -> NoReturn:
        ...


class PytestLifecycle:
    """Lifecycle bound to a pytest ``request`` fixture.

    Cleanups become finalizers of the requesting test; a failure raised by a
    finalizer is reported by pytest as a teardown error, separately from the
    test's own outcome.
    """

    def __init__(self, request):
        self.request = request

    def add_cleanup(self, func: Callable[[], None]) -> None:
        self.request.addfinalizer(func)

    def fatal(self, message: str) -> NoReturn:
        pytest.fail(message, pytrace=False)

    def teardown_failed(self, message: str) -> NoReturn:
        pytest.fail(message, pytrace=False)


class ExitStackLifecycle:
    """Lifecycle backed by a contextlib.ExitStack, for use outside pytest."""

    def __init__(self, stack: contextlib.ExitStack):
        self.stack = stack

    def add_cleanup(self, func: Callable[[], None]) -> None:
        self.stack.callback(func)

    def fatal(self, message: str) -> NoReturn:
        raise SandboxSetupError(message)

    def teardown_failed(self, message: str) -> NoReturn:
        raise SandboxTeardownError(message)
