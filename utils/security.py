"""
Security Module - Client IP resolution, rate limiting and response headers
"""

import threading
import time
from flask import request, current_app


GENERAL_LIMIT_MESSAGE = 'Too many requests from this IP, please try again later.'
CONTACT_LIMIT_MESSAGE = 'You have sent too many messages. Please try again later.'

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline'; "
    "style-src 'self' 'unsafe-inline'; "
    "img-src 'self' data: https:; "
    "font-src 'self' data:"
)


def get_client_ip():
    """
    Get the client IP address

    X-Forwarded-For is only honoured through ProxyFix, which the app
    factory installs when TRUSTED_PROXY_COUNT is above zero.
    """
    return request.remote_addr or 'unknown'


class RateLimiter:
    """Sliding-window request counter keyed by client address"""

    # Stale keys are dropped every SWEEP_EVERY hits or once MAX_KEYS are tracked
    SWEEP_EVERY = 500
    MAX_KEYS = 1000

    def __init__(self, max_requests, window_seconds, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits = {}  # {key: [timestamp, ...]}
        self._calls = 0
        self._lock = threading.Lock()

    def _recent(self, key, now):
        return [ts for ts in self._hits.get(key, []) if now - ts < self.window_seconds]

    def _sweep(self, now):
        for key in list(self._hits):
            recent = self._recent(key, now)
            if recent:
                self._hits[key] = recent
            else:
                del self._hits[key]

    def hit(self, key):
        """Record a request for key; False if the key is over its limit"""
        now = self._clock()
        with self._lock:
            self._calls += 1
            if self._calls % self.SWEEP_EVERY == 0 or len(self._hits) >= self.MAX_KEYS:
                self._sweep(now)

            # Clean old requests outside the window
            recent = self._recent(key, now)
            if len(recent) >= self.max_requests:
                self._hits[key] = recent
                return False
            recent.append(now)
            self._hits[key] = recent
            return True

    def __len__(self):
        return len(self._hits)

    def reset(self):
        with self._lock:
            self._hits.clear()
            self._calls = 0


def init_rate_limits(app):
    """Create the per-app limiters from configuration"""
    app.extensions['rate_limiters'] = {
        'general': RateLimiter(app.config['RATE_LIMIT_GENERAL_MAX'],
                               app.config['RATE_LIMIT_GENERAL_WINDOW']),
        'contact': RateLimiter(app.config['RATE_LIMIT_CONTACT_MAX'],
                               app.config['RATE_LIMIT_CONTACT_WINDOW']),
    }


def check_rate_limit(name='general'):
    """Check if the client IP is within the named limit"""
    if not current_app.config.get('RATE_LIMIT_ENABLED', True):
        return True
    limiter = current_app.extensions['rate_limiters'][name]
    allowed = limiter.hit(get_client_ip())
    if not allowed:
        current_app.logger.warning(f"Rate limit '{name}' exceeded for {get_client_ip()}")
    return allowed


def apply_security_headers(response, production=False):
    """Add security headers to a response"""
    response.headers['Content-Security-Policy'] = CONTENT_SECURITY_POLICY
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'SAMEORIGIN'
    response.headers['Referrer-Policy'] = 'no-referrer'
    if production:
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
    return response


__all__ = [
    'get_client_ip',
    'RateLimiter',
    'init_rate_limits',
    'check_rate_limit',
    'apply_security_headers',
    'GENERAL_LIMIT_MESSAGE',
    'CONTACT_LIMIT_MESSAGE'
]
