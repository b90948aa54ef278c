"""Local sanity checks on PEM certificate bundles before they are uploaded."""

from __future__ import annotations

from datetime import datetime

from cryptography import x509
from cryptography.hazmat.primitives import serialization


def _load_certificates(pem: str, field_name: str) -> list[x509.Certificate]:
    try:
        certs = x509.load_pem_x509_certificates(pem.encode())
    except ValueError as e:
        raise ValueError(f"{field_name} is not valid PEM certificate data: {e}") from e
    if not certs:
        raise ValueError(f"No certificates found in {field_name}")
    return certs


def check_bundle(certificate_body: str, private_key: str, certificate_chain: str | None = None) -> None:
    """Raise ValueError if the body, chain or key cannot be parsed.

    The body must hold exactly one certificate; the chain, when given, one or more.
    """
    body = _load_certificates(certificate_body, "certificate_body")
    if len(body) != 1:
        raise ValueError(f"certificate_body must contain exactly one certificate, found {len(body)}")
    if certificate_chain:
        _load_certificates(certificate_chain, "certificate_chain")
    try:
        serialization.load_pem_private_key(private_key.encode(), password=None)
    except (ValueError, TypeError) as e:
        raise ValueError(f"private_key could not be loaded: {e}") from e


def certificate_expiry(certificate_body: str) -> datetime:
    """Return the notAfter timestamp (UTC) of the end-entity certificate."""
    return _load_certificates(certificate_body, "certificate_body")[0].not_valid_after_utc
