"""Orchestrator entry points: plain dicts in, plain dicts out.

Each handler loads the configuration, takes the shared client bundle and runs
one lifecycle operation. ``None`` in a read result means the resource is gone.
"""

from __future__ import annotations

from cert_reconciler.clients import get_clients
from cert_reconciler.config import AppConfig, load_config
from cert_reconciler.models import (
    CertificateValidationConfig,
    CertificateValidationState,
    ServerCertificateConfig,
    ServerCertificateState,
)
from cert_reconciler.resources import CertificateValidationResource, ServerCertificateResource
from cert_reconciler.retry import RetryPolicy


def _policy(config: AppConfig) -> RetryPolicy:
    return RetryPolicy(max_interval=config.poll_max_interval)


def _validation_resource() -> CertificateValidationResource:
    config = load_config()
    clients = get_clients(config)
    return CertificateValidationResource(clients.certificates, config.timeouts(), _policy(config))


def _server_certificate_resource() -> ServerCertificateResource:
    config = load_config()
    clients = get_clients(config)
    return ServerCertificateResource(
        clients.server_certificates,
        clients.load_balancers,
        config.timeouts(),
        _policy(config),
    )


# --- aws_acm_certificate_validation ---


def create_certificate_validation(input: dict) -> dict:
    state = _validation_resource().create(CertificateValidationConfig.from_dict(input))
    return state.to_dict()


def read_certificate_validation(input: dict) -> dict | None:
    state = _validation_resource().read(CertificateValidationState.from_dict(input))
    return state.to_dict() if state else None


def delete_certificate_validation(input: dict) -> None:
    _validation_resource().delete(CertificateValidationState.from_dict(input))


# --- aws_iam_server_certificate ---


def create_server_certificate(input: dict) -> dict:
    state = _server_certificate_resource().create(ServerCertificateConfig.from_dict(input))
    return state.to_dict()


def read_server_certificate(input: dict) -> dict | None:
    state = _server_certificate_resource().read(ServerCertificateState.from_dict(input))
    return state.to_dict() if state else None


def delete_server_certificate(input: dict) -> None:
    _server_certificate_resource().delete(ServerCertificateState.from_dict(input))


def import_server_certificate(input: dict) -> dict | None:
    """Import by name; the result lacks the private key, which IAM never returns."""
    resource = _server_certificate_resource()
    state = resource.read(resource.import_state(input["id"]))
    return state.to_dict() if state else None


def diff_server_certificate(input: dict) -> list[str]:
    """Return the attributes that force replacement given ``state`` and desired ``config``."""
    state = ServerCertificateState.from_dict(input["state"])
    config = ServerCertificateConfig.from_dict(input["config"])
    return _server_certificate_resource().diff(state, config)
