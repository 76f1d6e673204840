import pytest

from app import create_app
from utils.security import (
    CONTACT_LIMIT_MESSAGE,
    GENERAL_LIMIT_MESSAGE,
    RateLimiter,
    get_client_ip,
)
from tests.conftest import FakeRelay


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_rate_limiter_sliding_window():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)

    assert limiter.hit('1.2.3.4')
    assert limiter.hit('1.2.3.4')
    assert not limiter.hit('1.2.3.4')
    # Other clients have their own budget
    assert limiter.hit('5.6.7.8')

    clock.now += 59
    assert not limiter.hit('1.2.3.4')
    clock.now += 1
    assert limiter.hit('1.2.3.4')


def test_rate_limiter_rejected_hits_do_not_extend_window():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, window_seconds=10, clock=clock)

    assert limiter.hit('ip')
    for _ in range(5):
        clock.now += 1
        assert not limiter.hit('ip')
    clock.now += 5
    assert limiter.hit('ip')


def test_rate_limiter_reset():
    limiter = RateLimiter(max_requests=1, window_seconds=60)
    assert limiter.hit('ip')
    limiter.reset()
    assert limiter.hit('ip')


def test_client_ip_ignores_forwarded_header_without_trusted_proxy(app):
    with app.test_request_context('/', headers={'X-Forwarded-For': '9.9.9.9'},
                                  environ_base={'REMOTE_ADDR': '7.7.7.7'}):
        assert get_client_ip() == '7.7.7.7'


def test_client_ip_uses_forwarded_hop_behind_trusted_proxy(monkeypatch):
    monkeypatch.setattr('config.TestingConfig.TRUSTED_PROXY_COUNT', 1)
    app = create_app('testing')
    seen = []

    @app.route('/whoami')
    def whoami():
        seen.append(get_client_ip())
        return 'ok'

    app.test_client().get('/whoami', headers={'X-Forwarded-For': '9.9.9.9'},
                          environ_base={'REMOTE_ADDR': '10.0.0.1'})
    assert seen == ['9.9.9.9']


@pytest.fixture
def limited_app():
    app = create_app('testing')
    app.config['RATE_LIMIT_ENABLED'] = True
    app.extensions['relay'] = FakeRelay()
    return app


def test_contact_limit_after_five_submissions(limited_app, valid_form):
    client = limited_app.test_client()
    for _ in range(5):
        assert client.post('/contact', data=valid_form).status_code == 200

    resp = client.post('/contact', data=valid_form)
    assert resp.status_code == 429
    assert CONTACT_LIMIT_MESSAGE in resp.get_data(as_text=True)
    assert len(limited_app.extensions['relay'].sent) == 10


def test_contact_limit_is_per_client(limited_app, valid_form):
    client = limited_app.test_client()
    for _ in range(5):
        client.post('/contact', data=valid_form, environ_base={'REMOTE_ADDR': '1.1.1.1'})

    resp = client.post('/contact', data=valid_form, environ_base={'REMOTE_ADDR': '2.2.2.2'})
    assert resp.status_code == 200


def test_general_limit(limited_app):
    limited_app.extensions['rate_limiters']['general'].max_requests = 3
    client = limited_app.test_client()

    for _ in range(3):
        assert client.get('/').status_code == 200

    resp = client.get('/')
    assert resp.status_code == 429
    assert GENERAL_LIMIT_MESSAGE in resp.get_data(as_text=True)
    # Health checks are never throttled
    assert client.get('/health').status_code == 200


def test_security_headers(client):
    resp = client.get('/')
    assert "default-src 'self'" in resp.headers['Content-Security-Policy']
    assert resp.headers['X-Content-Type-Options'] == 'nosniff'
    assert resp.headers['X-Frame-Options'] == 'SAMEORIGIN'
    # HSTS is only sent in production
    assert 'Strict-Transport-Security' not in resp.headers


def test_security_headers_in_production(monkeypatch):
    # Production verifies the relay on startup; keep that off the network
    monkeypatch.setattr('utils.notifications.SmtpRelay.verify', lambda self, logger: True)
    app = create_app('production')
    app.extensions['relay'] = FakeRelay()
    resp = app.test_client().get('/health')
    assert resp.headers['Strict-Transport-Security'].startswith('max-age=')


def test_rotating_forwarded_header_does_not_reset_contact_limit(limited_app, valid_form):
    client = limited_app.test_client()
    codes = [
        client.post('/contact', data=valid_form,
                    headers={'X-Forwarded-For': f'10.0.0.{i}'}).status_code
        for i in range(8)
    ]

    assert codes == [200] * 5 + [429] * 3
    assert len(limited_app.extensions['relay'].sent) == 10


def test_rate_limiter_sweeps_stale_keys():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=5, window_seconds=10, clock=clock)

    for i in range(RateLimiter.MAX_KEYS):
        limiter.hit(f'client-{i}')
    assert len(limiter) == RateLimiter.MAX_KEYS

    clock.now += 10000
    assert limiter.hit('newcomer')
    assert len(limiter) == 1


def test_rate_limiter_periodic_sweep_keeps_live_keys():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=5, window_seconds=10, clock=clock)

    limiter.hit('stale')
    clock.now += 20
    limiter.hit('live')
    for _ in range(RateLimiter.SWEEP_EVERY - 2):
        limiter.hit('live')

    # The last hit triggered the sweep: only the live key survives
    assert len(limiter) == 1
    assert not limiter.hit('live')
