"""Reconcile declared DNS validation records against ACM's validation requirements."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from cert_reconciler.clients.base import CertificateApi
from cert_reconciler.errors import (
    MissingValidationRecordsError,
    RetryableError,
    RetryTimeoutError,
    UnsupportedValidationMethodError,
    ValidationOptionsUnavailableError,
)
from cert_reconciler.models import CertificateDetail, DomainValidation, ValidationMethod
from cert_reconciler.retry import RetryPolicy, retry_until

logger = logging.getLogger(__name__)

_DNS_ONLY = "validation_record_fqdns is only valid for DNS validation"


def normalize_fqdn(fqdn: str) -> str:
    """Strip the trailing root dot, if any."""
    return fqdn.removesuffix(".")


def _options_populated(certificate: CertificateDetail) -> bool:
    options = certificate.domain_validation_options
    if not options:
        return False
    # ACM can list a DNS option before it has generated the CNAME for it
    return all(
        option.resource_record is not None
        for option in options
        if option.validation_method == ValidationMethod.DNS
    )


def wait_for_validation_options(
    api: CertificateApi,
    certificate: CertificateDetail,
    timeout: float,
    *,
    policy: RetryPolicy | None = None,
) -> CertificateDetail:
    """Return ``certificate`` once ACM has populated its domain validation options.

    ACM fills these in asynchronously after RequestCertificate, so an empty set
    right after creation is not an error. Describe failures are fatal.
    """
    if _options_populated(certificate):
        return certificate

    arn = certificate.certificate_arn

    def attempt() -> CertificateDetail:
        logger.debug("Certificate domain validation options empty for %s, retrying", arn)
        current = api.describe_certificate(arn)
        if not _options_populated(current):
            raise RetryableError(f"Certificate domain validation options empty for {arn}")
        return current

    try:
        return retry_until(timeout, attempt, policy=policy)
    except RetryTimeoutError as e:
        raise ValidationOptionsUnavailableError(str(e.last_error)) from e


def expected_validation_records(requirements: Iterable[DomainValidation]) -> dict[str, DomainValidation]:
    """Map each normalized DNS validation record name to its requirement.

    Raises UnsupportedValidationMethodError as soon as a requirement is not DNS.
    """
    expected: dict[str, DomainValidation] = {}
    for requirement in requirements:
        method = requirement.validation_method
        if method:
            if method != ValidationMethod.DNS:
                raise UnsupportedValidationMethodError(_DNS_ONLY)
            if requirement.resource_record is None:
                raise ValidationOptionsUnavailableError(
                    f"No DNS validation record published yet for {requirement.domain_name}"
                )
            expected[normalize_fqdn(requirement.resource_record.name)] = requirement
        elif requirement.validation_emails:
            # ACM sometimes omits ValidationMethod for EMAIL validation
            raise UnsupportedValidationMethodError(_DNS_ONLY)
    return expected


def check_validation_records(declared_fqdns: Iterable[str], requirements: Iterable[DomainValidation]) -> None:
    """Fail unless every DNS validation record ACM expects is among ``declared_fqdns``.

    All missing records are reported together in one MissingValidationRecordsError.
    """
    expected = expected_validation_records(requirements)
    for fqdn in declared_fqdns:
        expected.pop(normalize_fqdn(fqdn), None)

    if expected:
        missing = sorted((requirement.domain_name, fqdn) for fqdn, requirement in expected.items())
        raise MissingValidationRecordsError(missing)


def reconcile_validation_records(
    api: CertificateApi,
    certificate: CertificateDetail,
    declared_fqdns: Iterable[str],
    timeout: float,
    *,
    policy: RetryPolicy | None = None,
) -> CertificateDetail:
    """Wait for the validation options to appear, then check them against ``declared_fqdns``."""
    certificate = wait_for_validation_options(api, certificate, timeout, policy=policy)
    check_validation_records(declared_fqdns, certificate.domain_validation_options)
    logger.info(
        "All %d DNS validation record(s) declared for %s",
        len(certificate.domain_validation_options),
        certificate.certificate_arn,
    )
    return certificate
