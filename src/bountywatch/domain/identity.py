"""Stable identity keys for canonical programs."""

from __future__ import annotations

import hashlib

KEY_SEPARATOR = "|"


def program_key(name: str, url: str) -> str:
    """Return the identity key for a program listing.

    The key is the SHA-256 hex digest of ``name|url``. Both fields are used
    verbatim, so a renamed program or a moved URL produces a different key.
    """

    return hashlib.sha256(f"{name}{KEY_SEPARATOR}{url}".encode()).hexdigest()
