"""Resource managers plugged into the orchestrator's Create/Read/Delete lifecycle."""

from __future__ import annotations

from cert_reconciler.resources.certificate_validation import CertificateValidationResource
from cert_reconciler.resources.server_certificate import ServerCertificateResource, parse_in_use_by

__all__ = ["CertificateValidationResource", "ServerCertificateResource", "parse_in_use_by"]
