"""Tests for cert_reconciler.validation."""

from unittest.mock import MagicMock

import pytest

from cert_reconciler.errors import (
    MissingValidationRecordsError,
    UnsupportedValidationMethodError,
    ValidationOptionsUnavailableError,
)
from cert_reconciler.models import CertificateDetail, DomainValidation, ResourceRecord
from cert_reconciler.validation import (
    check_validation_records,
    expected_validation_records,
    normalize_fqdn,
    reconcile_validation_records,
    wait_for_validation_options,
)

_ARN = "arn:aws:acm:us-east-1:123456789012:certificate/abc"


def _dns(domain, record_name=None):
    record_name = record_name or f"_x1.{domain}."
    return DomainValidation(
        domain_name=domain,
        validation_method="DNS",
        resource_record=ResourceRecord(name=record_name, type="CNAME", value="_y.acm-validations.aws."),
    )


def _email(domain, method="EMAIL"):
    return DomainValidation(
        domain_name=domain,
        validation_method=method,
        validation_emails=(f"admin@{domain}",),
    )


def _cert(options=()):
    return CertificateDetail(
        certificate_arn=_ARN,
        status="PENDING_VALIDATION",
        type="AMAZON_ISSUED",
        domain_validation_options=tuple(options),
    )


def test_normalize_fqdn_strips_single_trailing_dot():
    assert normalize_fqdn("_x1.example.com.") == "_x1.example.com"
    assert normalize_fqdn("_x1.example.com") == "_x1.example.com"


# --- check_validation_records ---


def test_check_passes_when_all_records_declared():
    requirements = [_dns("example.com"), _dns("www.example.com")]

    check_validation_records(["_x1.example.com", "_x1.www.example.com."], requirements)


def test_check_ignores_extra_declared_records():
    check_validation_records(["_x1.example.com", "_unrelated.example.org"], [_dns("example.com")])


def test_check_reports_every_missing_record():
    requirements = [_dns("example.com"), _dns("www.example.com"), _dns("api.example.com")]

    with pytest.raises(MissingValidationRecordsError) as exc_info:
        check_validation_records(["_x1.www.example.com."], requirements)

    assert exc_info.value.missing == [
        ("api.example.com", "_x1.api.example.com"),
        ("example.com", "_x1.example.com"),
    ]
    message = str(exc_info.value)
    assert "missing api.example.com DNS validation record: _x1.api.example.com" in message
    assert "missing example.com DNS validation record: _x1.example.com" in message
    assert "www.example.com DNS" not in message


def test_check_with_nothing_declared_reports_everything():
    with pytest.raises(MissingValidationRecordsError) as exc_info:
        check_validation_records([], [_dns("example.com")])

    assert exc_info.value.missing == [("example.com", "_x1.example.com")]


def test_wildcard_and_apex_share_one_record():
    # ACM issues the same CNAME for example.com and *.example.com
    requirements = [_dns("example.com", "_x1.example.com."), _dns("*.example.com", "_x1.example.com.")]

    check_validation_records(["_x1.example.com."], requirements)


@pytest.mark.parametrize("declared", [[], ["_x1.example.com"], ["_x1.example.com", "admin@example.org"]])
def test_check_rejects_email_validation_regardless_of_declared(declared):
    with pytest.raises(UnsupportedValidationMethodError, match="only valid for DNS validation"):
        check_validation_records(declared, [_dns("example.com"), _email("example.org")])


def test_check_rejects_email_when_method_missing():
    with pytest.raises(UnsupportedValidationMethodError):
        check_validation_records([], [_email("example.org", method=None)])


def test_expected_records_keyed_by_normalized_name():
    expected = expected_validation_records([_dns("example.com")])

    assert list(expected) == ["_x1.example.com"]
    assert expected["_x1.example.com"].domain_name == "example.com"


def test_expected_records_skips_requirement_without_method_or_emails():
    assert expected_validation_records([DomainValidation(domain_name="example.com")]) == {}


# --- wait_for_validation_options ---


def test_wait_returns_populated_certificate_without_polling(policy):
    api = MagicMock()
    cert = _cert([_dns("example.com")])

    assert wait_for_validation_options(api, cert, 60, policy=policy) is cert
    api.describe_certificate.assert_not_called()


def test_wait_polls_until_options_appear(clock, policy):
    api = MagicMock()
    populated = _cert([_dns("example.com")])
    api.describe_certificate.side_effect = [_cert(), _cert(), populated]

    result = wait_for_validation_options(api, _cert(), 60, policy=policy)

    assert result is populated
    assert api.describe_certificate.call_count == 3
    api.describe_certificate.assert_called_with(_ARN)


def test_wait_treats_dns_option_without_record_as_unpopulated(clock, policy):
    api = MagicMock()
    pending = _cert([DomainValidation(domain_name="example.com", validation_method="DNS")])
    populated = _cert([_dns("example.com")])
    api.describe_certificate.side_effect = [pending, populated]

    assert wait_for_validation_options(api, pending, 60, policy=policy) is populated


def test_wait_times_out_after_final_check(clock, policy):
    api = MagicMock()
    api.describe_certificate.return_value = _cert()

    with pytest.raises(ValidationOptionsUnavailableError, match="validation options empty"):
        wait_for_validation_options(api, _cert(), 60, policy=policy)

    assert clock() == 60


def test_wait_propagates_describe_errors(clock, policy):
    api = MagicMock()
    api.describe_certificate.side_effect = RuntimeError("throttled")

    with pytest.raises(RuntimeError, match="throttled"):
        wait_for_validation_options(api, _cert(), 60, policy=policy)
    assert api.describe_certificate.call_count == 1


# --- reconcile_validation_records ---


def test_reconcile_waits_then_checks(clock, policy):
    api = MagicMock()
    api.describe_certificate.side_effect = [_cert(), _cert([_dns("example.com")])]

    with pytest.raises(MissingValidationRecordsError):
        reconcile_validation_records(api, _cert(), ["_other.example.com"], 60, policy=policy)


def test_reconcile_returns_refreshed_certificate(policy):
    api = MagicMock()
    cert = _cert([_dns("example.com")])

    assert reconcile_validation_records(api, cert, ["_x1.example.com."], 60, policy=policy) is cert
