"""Exception taxonomy shared by the resource managers and cloud adapters."""

from __future__ import annotations


class CertReconcilerError(Exception):
    """Base class for all errors raised by cert_reconciler."""


class ResourceNotFoundError(CertReconcilerError):
    """The remote system reports that the requested resource does not exist."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} '{identifier}' not found")
        self.kind = kind
        self.identifier = identifier


class DeleteConflictError(CertReconcilerError):
    """A delete was refused because another resource still references the target."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(f"Delete conflict for '{name}': {message}")
        self.name = name
        self.message = message


class RetryableError(CertReconcilerError):
    """Raised from inside a poll attempt to signal a transient, retryable failure."""

    def __init__(self, cause: BaseException | str) -> None:
        super().__init__(str(cause))
        self.cause = cause


class RetryTimeoutError(CertReconcilerError):
    """The deadline expired and the final check still had not converged."""

    def __init__(self, timeout: float, last_error: RetryableError) -> None:
        super().__init__(f"Timed out after {timeout:g}s: {last_error}")
        self.timeout = timeout
        self.last_error = last_error


class UnsupportedCertificateTypeError(CertReconcilerError):
    """The certificate was not issued by ACM, so there is nothing to wait for."""


class UnsupportedValidationMethodError(CertReconcilerError):
    """validation_record_fqdns was given for a certificate not validated through DNS."""


class ValidationOptionsUnavailableError(CertReconcilerError):
    """ACM never populated the certificate's domain validation options."""


class CertificateNotIssuedError(CertReconcilerError):
    """The certificate is not in the ISSUED state."""

    def __init__(self, certificate_arn: str, status: str) -> None:
        super().__init__(f"Expected certificate {certificate_arn} to be issued but was in state {status}")
        self.certificate_arn = certificate_arn
        self.status = status


class MissingValidationRecordsError(CertReconcilerError):
    """One or more DNS validation records were not declared.

    ``missing`` holds every ``(domain, record_name)`` pair that is still
    outstanding so the caller can fix them all in one pass.
    """

    def __init__(self, missing: list[tuple[str, str]]) -> None:
        lines = [f"missing {domain} DNS validation record: {record}" for domain, record in missing]
        super().__init__(f"{len(missing)} DNS validation record(s) missing:\n  " + "\n  ".join(lines))
        self.missing = missing
