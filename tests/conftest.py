"""Shared test fixtures for aws-cert-reconciler."""

import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

import cert_reconciler.auth as _auth
import cert_reconciler.clients as _clients
from cert_reconciler.retry import RetryPolicy


def pytest_runtest_setup(item):
    """Reset module-level caches between tests."""
    _auth._session = None
    _clients._clients = None


class FakeClock:
    """Monotonic clock that only moves when something sleeps or advances it."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr("time.sleep", fake.sleep)
    return fake


@pytest.fixture
def policy(clock):
    """Deterministic waits of 1, 2, 4, 4, ... seconds on the fake clock."""
    return RetryPolicy(initial_interval=1, max_interval=4, jitter=False, clock=clock)


def _make_self_signed_cert_and_key(common_name="example.com"):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.UTC)
    cert = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=90))
        .sign(key, hashes.SHA256())
    )
    cert_pem = cert.public_bytes(serialization.Encoding.PEM).decode()
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
    return cert_pem, key_pem


@pytest.fixture(scope="session")
def cert_and_key():
    return _make_self_signed_cert_and_key()


@pytest.fixture(scope="session")
def chain_pem():
    cert_pem, _key_pem = _make_self_signed_cert_and_key("Test Intermediate CA")
    return cert_pem
