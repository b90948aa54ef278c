"""Abstract interfaces for the cloud APIs the resource managers consume."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cert_reconciler.models import CertificateDetail, ServerCertificate, ServerCertificateMetadata


class CertificateApi(ABC):
    """Read access to issued/imported certificates."""

    @abstractmethod
    def describe_certificate(self, certificate_arn: str) -> CertificateDetail:
        """Return the current snapshot of a certificate.

        Raises:
            ResourceNotFoundError: the ARN is unknown.
        """


class ServerCertificateApi(ABC):
    """Upload, fetch and delete server certificates."""

    @abstractmethod
    def upload(
        self,
        name: str,
        certificate_body: str,
        private_key: str,
        certificate_chain: str | None = None,
        path: str | None = None,
    ) -> ServerCertificateMetadata:
        """Upload a certificate bundle under ``name``."""

    @abstractmethod
    def get(self, name: str) -> ServerCertificate:
        """Fetch a server certificate by name.

        Raises:
            ResourceNotFoundError: no certificate with that name exists.
        """

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete a server certificate by name.

        Raises:
            ResourceNotFoundError: no certificate with that name exists.
            DeleteConflictError: the certificate is still attached to another resource.
        """


class LoadBalancerApi(ABC):
    """Lookups used only for diagnostics."""

    @abstractmethod
    def describe_by_name(self, name: str) -> dict:
        """Return the load balancer description for ``name``.

        Raises:
            ResourceNotFoundError: no load balancer with that name exists.
        """
