"""ACM certificate validation waiter.

Creating this resource blocks until ACM reports the certificate as ISSUED.
It owns nothing remotely: deleting it is a no-op and the certificate itself
is managed elsewhere.
"""

from __future__ import annotations

import logging

from cert_reconciler.clients.base import CertificateApi
from cert_reconciler.config import Timeouts
from cert_reconciler.errors import (
    CertificateNotIssuedError,
    ResourceNotFoundError,
    RetryableError,
    RetryTimeoutError,
    UnsupportedCertificateTypeError,
)
from cert_reconciler.models import (
    CertificateDetail,
    CertificateType,
    CertificateValidationConfig,
    CertificateValidationState,
)
from cert_reconciler.retry import RetryPolicy, retry_until
from cert_reconciler.validation import reconcile_validation_records

logger = logging.getLogger(__name__)


class CertificateValidationResource:
    """Create/Read/Delete for an ACM certificate validation."""

    def __init__(
        self,
        api: CertificateApi,
        timeouts: Timeouts | None = None,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._api = api
        self._timeouts = timeouts or Timeouts()
        self._policy = policy

    def create(self, config: CertificateValidationConfig) -> CertificateValidationState:
        """Wait for the certificate to be issued and return the resulting state.

        Imported and private certificates are rejected before any polling.
        When ``validation_record_fqdns`` is set, the declared records are
        checked against ACM's requirements first; a mismatch aborts creation.
        """
        config.validate()
        arn = config.certificate_arn

        certificate = self._api.describe_certificate(arn)
        if certificate.type != CertificateType.AMAZON_ISSUED:
            raise UnsupportedCertificateTypeError(
                f"Certificate {arn} has type {certificate.type}, no validation necessary"
            )

        if config.validation_record_fqdns:
            reconcile_validation_records(
                self._api,
                certificate,
                config.validation_record_fqdns,
                self._timeouts.validation_options,
                policy=self._policy,
            )
        else:
            logger.info("No validation_record_fqdns set for %s, skipping check", arn)

        def attempt() -> CertificateDetail:
            current = self._api.describe_certificate(arn)
            if not current.is_issued:
                raise RetryableError(CertificateNotIssuedError(arn, current.status))
            return current

        try:
            retry_until(self._timeouts.validation_create, attempt, policy=self._policy)
        except RetryTimeoutError as e:
            raise CertificateNotIssuedError(arn, e.last_error.cause.status) from e
        logger.info("ACM certificate validation for %s done, certificate was issued", arn)

        state = self.read(
            CertificateValidationState(
                id="",
                certificate_arn=arn,
                validation_record_fqdns=config.validation_record_fqdns,
            )
        )
        if state is None:
            raise CertificateNotIssuedError(arn, "unknown after issuance")
        return state

    def read(self, state: CertificateValidationState) -> CertificateValidationState | None:
        """Refresh ``state``; ``None`` means the validation no longer exists.

        A certificate that has left the ISSUED state (or vanished) makes the
        validation invalid so it is recreated on the next apply.
        """
        arn = state.certificate_arn
        try:
            certificate = self._api.describe_certificate(arn)
        except ResourceNotFoundError:
            logger.warning("ACM certificate %s not found, removing validation from state", arn)
            return None

        if not certificate.is_issued:
            logger.info("Certificate %s status not issued, was %s, tainting validation", arn, certificate.status)
            return None

        return CertificateValidationState(
            id=str(certificate.issued_at),
            certificate_arn=arn,
            validation_record_fqdns=state.validation_record_fqdns,
        )

    def delete(self, state: CertificateValidationState) -> None:
        """Forget the validation. The certificate is removed with its own resource."""
        logger.info("Removing validation of %s from state; nothing to delete remotely", state.certificate_arn)
