"""
Utils Package - Centralized utility modules initialization
"""

from .decorators import rate_limited
from .validation import (
    FIELD_RULES,
    MAX_INPUT_LENGTH,
    validate_contact_form,
    sanitize_input,
    sanitize_submission
)
from .notifications import (
    DispatchError,
    RelayError,
    SmtpRelay,
    get_relay,
    build_owner_notification,
    build_sender_acknowledgment,
    dispatch_contact,
    send_owner_alert
)
from .security import (
    get_client_ip,
    RateLimiter,
    init_rate_limits,
    check_rate_limit,
    apply_security_headers
)

__all__ = [
    # Decorators
    'rate_limited',

    # Validation
    'FIELD_RULES',
    'MAX_INPUT_LENGTH',
    'validate_contact_form',
    'sanitize_input',
    'sanitize_submission',

    # Notifications
    'DispatchError',
    'RelayError',
    'SmtpRelay',
    'get_relay',
    'build_owner_notification',
    'build_sender_acknowledgment',
    'dispatch_contact',
    'send_owner_alert',

    # Security
    'get_client_ip',
    'RateLimiter',
    'init_rate_limits',
    'check_rate_limit',
    'apply_security_headers'
]
