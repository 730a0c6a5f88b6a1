import threading

import pytest

from common.errors import GenerationInterrupted
from provider import CryptographyProvider, KeyPair, KeyType
from provider.base_provider import BaseCryptoProvider


class BlockingProvider(BaseCryptoProvider):
    """Provider whose key generation blocks until the test releases it."""

    def __init__(self, error=None, honour_cancel=False):
        self.entered = threading.Event()
        self.release = threading.Event()
        self.error = error
        self.honour_cancel = honour_cancel
        self.calls = []

    def generate_key_pair(self, key_type, key_size, cancel_event=None):
        self.calls.append((key_type, key_size, cancel_event))
        self.entered.set()
        if self.honour_cancel:
            # Poll the cancel event instead of blocking on release
            while not self.release.is_set():
                if cancel_event is not None and cancel_event.wait(0.01):
                    raise GenerationInterrupted("stopped")
        else:
            self.release.wait(5)
        if self.error is not None:
            raise self.error
        return KeyPair(key_type, object(), object())

    def sign_certificate(self, subject, validity_days, public_key, private_key, signature_algorithm):
        raise NotImplementedError


@pytest.fixture
def blocking_provider():
    p = BlockingProvider()
    yield p
    p.release.set()


@pytest.fixture(scope="session")
def crypto_provider():
    return CryptographyProvider()


@pytest.fixture(scope="session")
def rsa_key_pair(crypto_provider):
    return crypto_provider.generate_key_pair(KeyType.RSA, 2048)


@pytest.fixture(scope="session")
def dsa_key_pair(crypto_provider):
    return crypto_provider.generate_key_pair(KeyType.DSA, 1024)


@pytest.fixture
def make_blocking_provider():
    created = []

    def factory(**kwargs):
        p = BlockingProvider(**kwargs)
        created.append(p)
        return p

    yield factory
    for p in created:
        p.release.set()
