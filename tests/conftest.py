"""
Shared pytest fixtures for the portfolio app.
"""
import pytest

from app import create_app
from utils.notifications import RelayError


class FakeRelay:
    """Relay double that records submitted messages and fails on request"""

    def __init__(self, fail_on=()):
        self.fail_on = set(fail_on)
        self.attempts = []
        self.sent = []

    def submit(self, message):
        self.attempts.append(message)
        if len(self.attempts) in self.fail_on:
            raise RelayError(f"relay refused {message.kind}")
        self.sent.append(message)


@pytest.fixture
def app():
    app = create_app('testing')
    yield app


@pytest.fixture
def fake_relay(app):
    """Replace the SMTP relay with a recording double."""
    relay = FakeRelay()
    app.extensions['relay'] = relay
    return relay


@pytest.fixture
def client(app, fake_relay):
    return app.test_client()


@pytest.fixture
def valid_form():
    return {
        'name': 'Jo',
        'email': 'jo@example.com',
        'subject': 'Hi there',
        'message': 'This is a long enough message.',
    }
