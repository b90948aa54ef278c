"""Server certificate name resolution."""

from __future__ import annotations

import secrets
from datetime import UTC, datetime

MAX_NAME_LENGTH = 128
# 18 timestamp digits + 8 random hex digits
UNIQUE_ID_SUFFIX_LENGTH = 26
MAX_NAME_PREFIX_LENGTH = MAX_NAME_LENGTH - UNIQUE_ID_SUFFIX_LENGTH
DEFAULT_NAME_PREFIX = "cert-reconciler-"


def _unique_suffix() -> str:
    """Return a sortable, collision-resistant suffix of UNIQUE_ID_SUFFIX_LENGTH characters.

    The timestamp is UTC at 1/10000 second resolution so names generated later
    sort after earlier ones; the random tail keeps concurrent resources apart
    without sharing a counter between them.
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 100:04d}"
    return timestamp + secrets.token_hex(4)


def prefixed_unique_id(prefix: str) -> str:
    return prefix + _unique_suffix()


def unique_id() -> str:
    return prefixed_unique_id(DEFAULT_NAME_PREFIX)


def resolve_name(name: str | None, name_prefix: str | None) -> str:
    """Pick the server certificate name: explicit name, prefix + suffix, or fully generated."""
    if name:
        return name
    if name_prefix:
        return prefixed_unique_id(name_prefix)
    return unique_id()
