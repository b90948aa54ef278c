"""Content signatures for certificate material.

A signature lets a later plan compare freshly supplied PEM text against what
was uploaded before without keeping the plaintext in state. Signatures are
only ever compared for equality.
"""

from __future__ import annotations

import hashlib


def trim_space(raw: str | None) -> str:
    """Normalize a PEM value before it is uploaded or stored."""
    return (raw or "").strip()


def signature(raw: str | None) -> str:
    """Return the lowercase hex SHA-1 of ``raw`` with CRs removed and outer whitespace trimmed.

    ``None``, the empty string and whitespace-only text all map to the empty
    signature.
    """
    cleaned = (raw or "").replace("\r", "").strip()
    if not cleaned:
        return ""
    return hashlib.sha1(cleaned.encode("utf-8")).hexdigest()


def suppress_diff(old_signature: str, new_raw: str | None) -> bool:
    """True when ``new_raw`` is semantically the value that produced ``old_signature``."""
    return signature(new_raw) == old_signature
