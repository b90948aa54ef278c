"""ACM adapter: DescribeCertificate via boto3."""

from __future__ import annotations

import botocore.exceptions

from cert_reconciler.clients.base import CertificateApi
from cert_reconciler.errors import ResourceNotFoundError
from cert_reconciler.models import CertificateDetail


class AcmCertificateApi(CertificateApi):
    """CertificateApi backed by AWS Certificate Manager."""

    def __init__(self, acm_client) -> None:
        self._client = acm_client

    def describe_certificate(self, certificate_arn: str) -> CertificateDetail:
        try:
            resp = self._client.describe_certificate(CertificateArn=certificate_arn)
        except botocore.exceptions.ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                raise ResourceNotFoundError("ACM certificate", certificate_arn) from e
            raise
        return CertificateDetail.from_api(resp["Certificate"])
