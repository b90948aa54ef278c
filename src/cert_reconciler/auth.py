"""Shared AWS session management."""

from __future__ import annotations

import boto3

_session: boto3.session.Session | None = None


def get_session(profile: str | None = None) -> boto3.session.Session:
    """Return a cached boto3 Session.

    Sessions are not thread-safe; build clients from it once and share the
    clients, which are.
    """
    global _session
    if _session is None:
        _session = boto3.session.Session(profile_name=profile)
    return _session
