"""
Random identifiers for sandbox users, passwords and databases.

Identifiers are 7 bytes from the operating system's secure random source,
base32-encoded without padding and lowercased: 12 characters drawn from
``[a-z2-7]``, safe inside quoted identifiers and string literals of every
supported dialect.
"""

import base64
import secrets

from sandbox.errors import EntropyError

SUFFIX_BYTES = 7
DATABASE_PREFIX = 'dbsandbox_'


def random_suffix(nbytes: int = SUFFIX_BYTES) -> str:
    """Generate one random lowercase identifier.

    Raises:
        EntropyError: If the secure random source cannot be read
    """
    try:
        raw = secrets.token_bytes(nbytes)
    except (OSError, NotImplementedError) as e:
        raise EntropyError(f"secure random source unavailable: {e}") from e
    return base64.b32encode(raw).decode('ascii').rstrip('=').lower()


def random_database_name() -> str:
    """Generate a database name carrying the sandbox namespace prefix."""
    return DATABASE_PREFIX + random_suffix()
