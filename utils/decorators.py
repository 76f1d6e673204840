"""
Decorators Module - Request guards for public endpoints
"""

from functools import wraps
from flask import abort
from .security import check_rate_limit


def rate_limited(limit_name, message):
    """Decorator that rejects the request with 429 once the named limit is exhausted"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not check_rate_limit(limit_name):
                abort(429, description=message)
            return f(*args, **kwargs)
        return decorated_function
    return decorator
