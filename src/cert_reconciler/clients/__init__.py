"""Cloud API adapters and the shared client bundle."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from botocore.config import Config

from cert_reconciler.auth import get_session as _get_session
from cert_reconciler.clients.acm import AcmCertificateApi
from cert_reconciler.clients.base import CertificateApi, LoadBalancerApi, ServerCertificateApi
from cert_reconciler.clients.elb import ElbLoadBalancerApi
from cert_reconciler.clients.iam import IamServerCertificateApi
from cert_reconciler.config import AppConfig

_USER_AGENT = "aws-cert-reconciler"

_clients: AwsClients | None = None
_clients_lock = threading.Lock()


@dataclass(frozen=True)
class AwsClients:
    """The process-wide API handle shared by every resource instance."""

    certificates: CertificateApi
    server_certificates: ServerCertificateApi
    load_balancers: LoadBalancerApi


def build_clients(config: AppConfig) -> AwsClients:
    """Create boto3 clients for ACM, IAM and classic ELB and wrap them in adapters."""
    session = _get_session(config.profile)
    botocore_config = Config(
        region_name=config.region,
        user_agent_extra=_USER_AGENT,
        retries={"mode": "standard"},
    )
    return AwsClients(
        certificates=AcmCertificateApi(session.client("acm", config=botocore_config)),
        server_certificates=IamServerCertificateApi(session.client("iam", config=botocore_config)),
        load_balancers=ElbLoadBalancerApi(session.client("elb", config=botocore_config)),
    )


def get_clients(config: AppConfig) -> AwsClients:
    """Return the cached client bundle, building it on first use."""
    global _clients
    with _clients_lock:
        if _clients is None:
            _clients = build_clients(config)
        return _clients
