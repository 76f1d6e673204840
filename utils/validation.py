"""
Validation Module - Contact form field rules and input sanitization
"""

import re
from typing import Optional
from models import FIELD_ORDER, ContactSubmission, SanitizedSubmission, ValidationResult

MAX_INPUT_LENGTH = 5000

NAME_PATTERN = re.compile(r'^[a-záéíóúñü\s]+$', re.IGNORECASE)
# Intentionally loose: no whitespace, one "@", a dot somewhere after it
EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

# Field rules table: length bounds apply to the trimmed value
FIELD_RULES = {
    'name': {'min': 2, 'max': 100, 'pattern': NAME_PATTERN},
    'email': {'min': None, 'max': 254, 'pattern': EMAIL_PATTERN},
    'subject': {'min': 3, 'max': 200, 'pattern': None},
    'message': {'min': 10, 'max': 5000, 'pattern': None},
}


def _trimmed(value) -> Optional[str]:
    if not value or not isinstance(value, str):
        return None
    return value.strip()


def validate_name(value) -> Optional[str]:
    trimmed = _trimmed(value)
    if trimmed is None:
        return 'Name is required'
    rule = FIELD_RULES['name']
    if len(trimmed) < rule['min']:
        return f"Name must be at least {rule['min']} characters"
    if len(trimmed) > rule['max']:
        return 'Name is too long'
    if not rule['pattern'].match(trimmed):
        return 'Name contains invalid characters'
    return None


def validate_email(value) -> Optional[str]:
    trimmed = _trimmed(value)
    if trimmed is None:
        return 'Email is required'
    rule = FIELD_RULES['email']
    if not rule['pattern'].match(trimmed):
        return 'Invalid email address'
    if len(trimmed) > rule['max']:
        return 'Email is too long'
    return None


def validate_subject(value) -> Optional[str]:
    trimmed = _trimmed(value)
    if trimmed is None:
        return 'Subject is required'
    rule = FIELD_RULES['subject']
    if len(trimmed) < rule['min']:
        return f"Subject must be at least {rule['min']} characters"
    if len(trimmed) > rule['max']:
        return 'Subject is too long'
    return None


def validate_message(value) -> Optional[str]:
    trimmed = _trimmed(value)
    if trimmed is None:
        return 'Message is required'
    rule = FIELD_RULES['message']
    if len(trimmed) < rule['min']:
        return f"Message must be at least {rule['min']} characters"
    if len(trimmed) > rule['max']:
        return 'Message is too long'
    return None


VALIDATORS = {
    'name': validate_name,
    'email': validate_email,
    'subject': validate_subject,
    'message': validate_message,
}


def validate_contact_form(data):
    """
    Check every contact field and collect all errors in one pass

    Args:
        data (ContactSubmission | dict): Submitted values

    Returns:
        ValidationResult: Empty errors when every field is acceptable
    """
    if isinstance(data, ContactSubmission):
        data = data.as_dict()

    errors = {}
    for field_name in FIELD_ORDER:
        error = VALIDATORS[field_name](data.get(field_name))
        if error:
            errors[field_name] = error

    if errors:
        return ValidationResult.invalid(errors)
    return ValidationResult.valid()


def sanitize_input(value):
    """
    Trim, drop angle brackets and cap length.

    This only defeats naive tag injection. Ampersands, quotes and other
    markup are left untouched, so output must still be escaped on render.

    The result is at most MAX_INPUT_LENGTH characters: whitespace exposed
    by truncation is trimmed too, so sanitize_input(sanitize_input(x)) is
    always equal to sanitize_input(x).
    """
    if not isinstance(value, str):
        return ''
    # Brackets go first so the trim also catches whitespace they were hiding
    cleaned = value.replace('<', '').replace('>', '').strip()
    return cleaned[:MAX_INPUT_LENGTH].rstrip()


def sanitize_submission(submission, result=None):
    """Sanitize a submission that has already passed validation"""
    if result is None:
        result = validate_contact_form(submission)
    if not result.is_valid:
        raise ValueError('Cannot sanitize a submission that failed validation')

    values = submission.as_dict() if isinstance(submission, ContactSubmission) else submission
    return SanitizedSubmission(**{name: sanitize_input(values.get(name)) for name in FIELD_ORDER})
