"""
Contact Routes - Contact form processing

received -> validating -> rejected
                       -> sanitizing -> dispatching -> delivered | dispatch_failed
"""

from flask import request, current_app
from models import ContactSubmission
from utils.decorators import rate_limited
from utils.notifications import dispatch_contact, send_owner_alert
from utils.security import CONTACT_LIMIT_MESSAGE, get_client_ip
from utils.ui_helpers import render_page
from utils.validation import validate_contact_form, sanitize_submission
from . import contact_bp

FORM_ERROR_MESSAGE = 'Please correct the errors in the form.'
DISPATCH_ERROR_MESSAGE = (
    'There was an error sending your message. '
    'Please try again later or contact me directly by email.'
)
SUCCESS_MESSAGE = 'Message sent successfully! I will get back to you soon.'


@contact_bp.route('/contact', methods=['POST'])
@rate_limited('contact', CONTACT_LIMIT_MESSAGE)
def contact():
    """Validate, sanitize and relay a contact form submission"""
    submission = ContactSubmission.from_form(request.form)

    result = validate_contact_form(submission)
    if not result.is_valid:
        current_app.logger.info(
            f"Contact form rejected from {get_client_ip()}: fields {', '.join(result.errors)}")
        return render_page(error=FORM_ERROR_MESSAGE,
                           form_data=submission.as_dict(),
                           errors=result.errors)

    sanitized = sanitize_submission(submission, result)
    outcome = dispatch_contact(sanitized)

    if not outcome.ok:
        current_app.logger.error(f"Contact dispatch {outcome.status}: {outcome.reason}")
        return render_page(error=DISPATCH_ERROR_MESSAGE,
                           form_data=submission.as_dict())

    current_app.logger.info(f"Contact message from {sanitized.email} delivered")
    send_owner_alert(sanitized)
    return render_page(success=SUCCESS_MESSAGE)
