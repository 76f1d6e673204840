"""
Domain types for the contact pipeline.
Nothing here is persisted: every instance lives for a single request.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

FIELD_ORDER = ('name', 'email', 'subject', 'message')


@dataclass
class ContactSubmission:
    name: str = ''
    email: str = ''
    subject: str = ''
    message: str = ''

    @classmethod
    def from_form(cls, form):
        """Build a submission from a request form (missing fields become empty strings)"""
        return cls(**{name: form.get(name, '') for name in FIELD_ORDER})

    def as_dict(self):
        return {name: getattr(self, name) for name in FIELD_ORDER}


@dataclass
class ValidationResult:
    errors: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def valid(cls):
        return cls()

    @classmethod
    def invalid(cls, errors):
        ordered = {name: errors[name] for name in FIELD_ORDER if name in errors}
        return cls(errors=ordered)

    @property
    def is_valid(self):
        return not self.errors

    @property
    def first_invalid_field(self) -> Optional[str]:
        return next(iter(self.errors), None)


@dataclass(frozen=True)
class SanitizedSubmission:
    name: str
    email: str
    subject: str
    message: str

    def as_dict(self):
        return {name: getattr(self, name) for name in FIELD_ORDER}


@dataclass(frozen=True)
class NotificationMessage:
    kind: str  # owner_notification, sender_acknowledgment
    sender: str
    recipient: str
    subject: str
    html: str
    text: str
    reply_to: Optional[str] = None


@dataclass(frozen=True)
class DispatchResult:
    """
    Outcome of sending both notifications.

    status is one of:
        delivered  - owner notification and acknowledgment accepted
        owner_only - owner notified, acknowledgment failed
        failed     - owner notification failed (acknowledgment never attempted)
    """
    status: str
    reason: Optional[str] = None

    DELIVERED = 'delivered'
    OWNER_ONLY = 'owner_only'
    FAILED = 'failed'

    @property
    def ok(self):
        return self.status == self.DELIVERED
