"""Storage key derivation for link records."""

import hashlib
import os
from pathlib import Path

KEY_BYTES = 16
# NUL never appears inside a path, so the joined form is unambiguous
SEPARATOR = b"\0"


def derive_key(source: str | Path, target: str | Path) -> str:
    """Derive the storage key for a (source, target) pair.

    Paths are hashed exactly as given; callers are expected to pass
    already normalized absolute paths.

    Args:
        source: Canonical source path
        target: Absolute target path

    Returns:
        Lowercase hex string of fixed width, safe to use as a file name
    """
    hasher = hashlib.blake2b()
    hasher.update(os.fsencode(source))
    hasher.update(SEPARATOR)
    hasher.update(os.fsencode(target))
    return hasher.digest()[:KEY_BYTES].hex()
