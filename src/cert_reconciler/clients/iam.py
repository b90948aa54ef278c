"""IAM adapter: upload, get and delete server certificates via boto3."""

from __future__ import annotations

import logging

import botocore.exceptions

from cert_reconciler.clients.base import ServerCertificateApi
from cert_reconciler.errors import DeleteConflictError, ResourceNotFoundError
from cert_reconciler.models import ServerCertificate, ServerCertificateMetadata

logger = logging.getLogger(__name__)

_KIND = "IAM server certificate"


def _error_code(e: botocore.exceptions.ClientError) -> str:
    return e.response.get("Error", {}).get("Code", "")


class IamServerCertificateApi(ServerCertificateApi):
    """ServerCertificateApi backed by IAM."""

    def __init__(self, iam_client) -> None:
        self._client = iam_client

    def upload(
        self,
        name: str,
        certificate_body: str,
        private_key: str,
        certificate_chain: str | None = None,
        path: str | None = None,
    ) -> ServerCertificateMetadata:
        params = {
            "ServerCertificateName": name,
            "CertificateBody": certificate_body,
            "PrivateKey": private_key,
        }
        if certificate_chain:
            params["CertificateChain"] = certificate_chain
        if path:
            params["Path"] = path

        logger.debug("Uploading IAM server certificate %s (path %s)", name, path)
        resp = self._client.upload_server_certificate(**params)
        return ServerCertificateMetadata.from_api(resp["ServerCertificateMetadata"])

    def get(self, name: str) -> ServerCertificate:
        try:
            resp = self._client.get_server_certificate(ServerCertificateName=name)
        except botocore.exceptions.ClientError as e:
            if _error_code(e) == "NoSuchEntity":
                raise ResourceNotFoundError(_KIND, name) from e
            raise
        return ServerCertificate.from_api(resp["ServerCertificate"])

    def delete(self, name: str) -> None:
        try:
            self._client.delete_server_certificate(ServerCertificateName=name)
        except botocore.exceptions.ClientError as e:
            code = _error_code(e)
            if code == "NoSuchEntity":
                raise ResourceNotFoundError(_KIND, name) from e
            if code == "DeleteConflict":
                raise DeleteConflictError(name, e.response["Error"].get("Message", "")) from e
            raise
