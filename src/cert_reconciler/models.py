"""Data classes exchanged between the cloud adapters, resource managers and orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from cert_reconciler.naming import MAX_NAME_LENGTH, MAX_NAME_PREFIX_LENGTH

DEFAULT_PATH = "/"


class CertificateStatus(StrEnum):
    PENDING_VALIDATION = "PENDING_VALIDATION"
    ISSUED = "ISSUED"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"
    VALIDATION_TIMED_OUT = "VALIDATION_TIMED_OUT"
    REVOKED = "REVOKED"
    FAILED = "FAILED"


class CertificateType(StrEnum):
    AMAZON_ISSUED = "AMAZON_ISSUED"
    IMPORTED = "IMPORTED"
    PRIVATE = "PRIVATE"


class ValidationMethod(StrEnum):
    DNS = "DNS"
    EMAIL = "EMAIL"


def _parse_datetime(value: datetime | str | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class ResourceRecord:
    """CNAME record ACM expects to find for DNS validation."""

    name: str
    type: str
    value: str

    @classmethod
    def from_api(cls, data: dict) -> ResourceRecord:
        return cls(name=data["Name"], type=data.get("Type", "CNAME"), value=data["Value"])


@dataclass(frozen=True)
class DomainValidation:
    """Validation requirement for a single domain on an ACM certificate."""

    domain_name: str
    validation_method: str | None = None
    resource_record: ResourceRecord | None = None
    validation_emails: tuple[str, ...] = ()
    validation_status: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> DomainValidation:
        record = data.get("ResourceRecord")
        return cls(
            domain_name=data["DomainName"],
            validation_method=data.get("ValidationMethod"),
            resource_record=ResourceRecord.from_api(record) if record else None,
            validation_emails=tuple(data.get("ValidationEmails", ())),
            validation_status=data.get("ValidationStatus"),
        )


@dataclass(frozen=True)
class CertificateDetail:
    """Snapshot of an ACM certificate as returned by DescribeCertificate."""

    certificate_arn: str
    status: str
    type: str
    domain_name: str | None = None
    domain_validation_options: tuple[DomainValidation, ...] = ()
    issued_at: datetime | None = None

    @property
    def is_issued(self) -> bool:
        return self.status == CertificateStatus.ISSUED

    @classmethod
    def from_api(cls, data: dict) -> CertificateDetail:
        return cls(
            certificate_arn=data["CertificateArn"],
            status=data["Status"],
            type=data["Type"],
            domain_name=data.get("DomainName"),
            domain_validation_options=tuple(
                DomainValidation.from_api(option) for option in data.get("DomainValidationOptions", ())
            ),
            issued_at=data.get("IssuedAt"),
        )


@dataclass(frozen=True)
class ServerCertificateMetadata:
    """Identity block IAM returns for a server certificate."""

    server_certificate_id: str
    name: str
    arn: str
    path: str
    upload_date: datetime | None = None
    expiration: datetime | None = None

    @classmethod
    def from_api(cls, data: dict) -> ServerCertificateMetadata:
        return cls(
            server_certificate_id=data["ServerCertificateId"],
            name=data["ServerCertificateName"],
            arn=data["Arn"],
            path=data["Path"],
            upload_date=data.get("UploadDate"),
            expiration=data.get("Expiration"),
        )


@dataclass(frozen=True)
class ServerCertificate:
    """IAM server certificate including its public material."""

    metadata: ServerCertificateMetadata
    certificate_body: str
    certificate_chain: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> ServerCertificate:
        return cls(
            metadata=ServerCertificateMetadata.from_api(data["ServerCertificateMetadata"]),
            certificate_body=data["CertificateBody"],
            certificate_chain=data.get("CertificateChain"),
        )


@dataclass(frozen=True)
class CertificateValidationConfig:
    """Desired state of an ACM certificate validation resource."""

    certificate_arn: str
    validation_record_fqdns: frozenset[str] | None = None

    def validate(self) -> None:
        if not self.certificate_arn:
            raise ValueError("certificate_arn is required")

    def to_dict(self) -> dict:
        fqdns = self.validation_record_fqdns
        return {
            "certificate_arn": self.certificate_arn,
            "validation_record_fqdns": sorted(fqdns) if fqdns is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CertificateValidationConfig:
        fqdns = data.get("validation_record_fqdns")
        return cls(
            certificate_arn=data["certificate_arn"],
            validation_record_fqdns=frozenset(fqdns) if fqdns is not None else None,
        )


@dataclass(frozen=True)
class CertificateValidationState:
    """Persisted state of a certificate validation resource.

    ``id`` is the certificate's issuance timestamp rendered as a string.
    """

    id: str
    certificate_arn: str
    validation_record_fqdns: frozenset[str] | None = None

    def to_dict(self) -> dict:
        fqdns = self.validation_record_fqdns
        return {
            "id": self.id,
            "certificate_arn": self.certificate_arn,
            "validation_record_fqdns": sorted(fqdns) if fqdns is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CertificateValidationState:
        fqdns = data.get("validation_record_fqdns")
        return cls(
            id=data["id"],
            certificate_arn=data["certificate_arn"],
            validation_record_fqdns=frozenset(fqdns) if fqdns is not None else None,
        )


@dataclass(frozen=True)
class ServerCertificateConfig:
    """Desired state of an IAM server certificate.

    The PEM fields are secrets; ``private_key`` is excluded from ``repr``.
    """

    certificate_body: str
    private_key: str = field(repr=False)
    certificate_chain: str | None = None
    path: str = DEFAULT_PATH
    name: str | None = None
    name_prefix: str | None = None

    def validate(self) -> None:
        if not self.certificate_body:
            raise ValueError("certificate_body is required")
        if not self.private_key:
            raise ValueError("private_key is required")
        if self.name and self.name_prefix:
            raise ValueError("name and name_prefix are mutually exclusive")
        if self.name and len(self.name) > MAX_NAME_LENGTH:
            raise ValueError(f"name must be at most {MAX_NAME_LENGTH} characters, got {len(self.name)}")
        if self.name_prefix and len(self.name_prefix) > MAX_NAME_PREFIX_LENGTH:
            raise ValueError(
                f"name_prefix must be at most {MAX_NAME_PREFIX_LENGTH} characters, got {len(self.name_prefix)}"
            )

    @classmethod
    def from_dict(cls, data: dict) -> ServerCertificateConfig:
        return cls(
            certificate_body=data["certificate_body"],
            private_key=data["private_key"],
            certificate_chain=data.get("certificate_chain"),
            path=data.get("path") or DEFAULT_PATH,
            name=data.get("name"),
            name_prefix=data.get("name_prefix"),
        )


@dataclass(frozen=True)
class ServerCertificateState:
    """Persisted state of an IAM server certificate.

    Secrets are only kept as signatures; see :mod:`cert_reconciler.signature`.
    """

    id: str
    name: str
    arn: str = ""
    path: str = DEFAULT_PATH
    name_prefix: str | None = None
    certificate_body_signature: str = ""
    certificate_chain_signature: str = ""
    private_key_signature: str = ""
    upload_date: datetime | None = None
    expiration: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "arn": self.arn,
            "path": self.path,
            "name_prefix": self.name_prefix,
            "certificate_body_signature": self.certificate_body_signature,
            "certificate_chain_signature": self.certificate_chain_signature,
            "private_key_signature": self.private_key_signature,
            "upload_date": _format_datetime(self.upload_date),
            "expiration": _format_datetime(self.expiration),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ServerCertificateState:
        return cls(
            id=data["id"],
            name=data["name"],
            arn=data.get("arn", ""),
            path=data.get("path") or DEFAULT_PATH,
            name_prefix=data.get("name_prefix"),
            certificate_body_signature=data.get("certificate_body_signature", ""),
            certificate_chain_signature=data.get("certificate_chain_signature", ""),
            private_key_signature=data.get("private_key_signature", ""),
            upload_date=_parse_datetime(data.get("upload_date")),
            expiration=_parse_datetime(data.get("expiration")),
        )
