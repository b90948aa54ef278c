"""IAM server certificate uploader.

IAM has no update call for a server certificate, so every change to the
bundle, path or name means delete and upload again. Secrets are kept in state
only as signatures, which :meth:`ServerCertificateResource.diff` compares
against newly supplied PEM text.
"""

from __future__ import annotations

import logging
import re

from cert_reconciler import pem
from cert_reconciler.clients.base import LoadBalancerApi, ServerCertificateApi
from cert_reconciler.config import Timeouts
from cert_reconciler.errors import DeleteConflictError, ResourceNotFoundError, RetryableError
from cert_reconciler.models import ServerCertificateConfig, ServerCertificateState
from cert_reconciler.naming import resolve_name
from cert_reconciler.retry import RetryPolicy, retry_until
from cert_reconciler.signature import signature, suppress_diff, trim_space

logger = logging.getLogger(__name__)

# IAM DeleteConflict message, e.g.
# "Certificate: x is currently in use by arn:aws:elasticloadbalancing:us-east-1:123:loadbalancer/my-lb. ..."
_IN_USE_BY = re.compile(r"currently in use by ([a-z0-9:-]+)/([a-z0-9-]+)\.")


def parse_in_use_by(message: str) -> tuple[str, str] | None:
    """Extract ``(resource_type, resource_name)`` of the resource blocking a delete.

    Returns None when the message does not name one.
    """
    match = _IN_USE_BY.search(message)
    if not match:
        return None
    return match.group(1), match.group(2)


class ServerCertificateResource:
    """Create/Read/Delete/Import for an IAM server certificate."""

    def __init__(
        self,
        api: ServerCertificateApi,
        load_balancers: LoadBalancerApi | None = None,
        timeouts: Timeouts | None = None,
        policy: RetryPolicy | None = None,
    ) -> None:
        self._api = api
        self._load_balancers = load_balancers
        self._timeouts = timeouts or Timeouts()
        self._policy = policy

    def create(self, config: ServerCertificateConfig) -> ServerCertificateState:
        config.validate()
        body = trim_space(config.certificate_body)
        chain = trim_space(config.certificate_chain) or None
        private_key = trim_space(config.private_key)
        pem.check_bundle(body, private_key, chain)

        name = resolve_name(config.name, config.name_prefix)
        metadata = self._api.upload(
            name=name,
            certificate_body=body,
            private_key=private_key,
            certificate_chain=chain,
            path=config.path,
        )
        logger.info(
            "Uploaded IAM server certificate %s (%s), expires %s",
            name,
            metadata.server_certificate_id,
            pem.certificate_expiry(body).isoformat(),
        )

        # The name cannot be derived from the bundle; the seed state must reach the caller even if read fails.
        state = ServerCertificateState(
            id=metadata.server_certificate_id,
            name=name,
            arn=metadata.arn,
            path=metadata.path,
            name_prefix=config.name_prefix,
            certificate_body_signature=signature(body),
            certificate_chain_signature=signature(chain),
            private_key_signature=signature(private_key),
        )
        try:
            return self.read(state) or state
        except Exception as e:
            logger.warning(
                "Could not read back IAM server certificate %s after upload, keeping uploaded state: %s", name, e
            )
            return state

    def read(self, state: ServerCertificateState) -> ServerCertificateState | None:
        try:
            cert = self._api.get(state.name)
        except ResourceNotFoundError:
            logger.warning("IAM Server Certificate (%s) not found, removing from state", state.id)
            return None

        metadata = cert.metadata
        return ServerCertificateState(
            id=metadata.server_certificate_id,
            name=metadata.name,
            arn=metadata.arn,
            path=metadata.path,
            name_prefix=state.name_prefix,
            certificate_body_signature=signature(cert.certificate_body),
            certificate_chain_signature=signature(cert.certificate_chain),
            private_key_signature=state.private_key_signature,
            upload_date=metadata.upload_date,
            expiration=metadata.expiration,
        )

    def delete(self, state: ServerCertificateState) -> None:
        """Delete the certificate, waiting out conflicts with resources still using it."""
        name = state.name
        logger.info("Deleting IAM Server Certificate: %s", state.id)

        def attempt() -> None:
            try:
                self._api.delete(name)
            except ResourceNotFoundError:
                logger.info("IAM Server Certificate %s already deleted", name)
            except DeleteConflictError as e:
                self._log_conflicting_resource(e.message)
                logger.warning("Conflict deleting server certificate: %s, retrying", e.message)
                raise RetryableError(e) from e

        retry_until(self._timeouts.server_certificate_delete, attempt, policy=self._policy)

    def import_state(self, import_id: str) -> ServerCertificateState:
        """Seed state from an import id, which is the certificate name.

        The private key cannot be read back from IAM, so its signature stays empty.
        """
        return ServerCertificateState(id=import_id, name=import_id)

    def diff(self, state: ServerCertificateState, config: ServerCertificateConfig) -> list[str]:
        """Return the attributes whose change forces a replacement, in a stable order."""
        changed = []
        if not suppress_diff(state.certificate_body_signature, config.certificate_body):
            changed.append("certificate_body")
        if not suppress_diff(state.certificate_chain_signature, config.certificate_chain):
            changed.append("certificate_chain")
        # An imported certificate has no key signature to compare against
        if state.private_key_signature and not suppress_diff(state.private_key_signature, config.private_key):
            changed.append("private_key")
        if state.path != config.path:
            changed.append("path")
        if config.name and config.name != state.name:
            changed.append("name")
        if config.name_prefix and not state.name.startswith(config.name_prefix):
            changed.append("name_prefix")
        return changed

    def _log_conflicting_resource(self, message: str) -> None:
        """Look up the load balancer named in a conflict message so operators can see it.

        Lookup failures are logged and otherwise ignored.
        """
        in_use_by = parse_in_use_by(message)
        if in_use_by is None or self._load_balancers is None:
            return
        resource_type, lb_name = in_use_by
        try:
            description = self._load_balancers.describe_by_name(lb_name)
        except ResourceNotFoundError:
            logger.warning("Load Balancer (%s) causing delete conflict not found", lb_name)
        except Exception as e:
            logger.warning("Could not describe load balancer %s causing delete conflict: %s", lb_name, e)
        else:
            logger.warning(
                "Server certificate in use by %s/%s (%s)",
                resource_type,
                lb_name,
                description.get("DNSName", "no DNS name"),
            )
