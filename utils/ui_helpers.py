"""
UI Helper Functions - Rendering of the single-page shell
"""

from typing import Dict, Optional
from flask import current_app, get_flashed_messages, render_template


def collect_flash_messages() -> Dict[str, str]:
    """Turn flashed success/error messages into template variables"""
    flashes = {}
    for category, message in get_flashed_messages(with_categories=True):
        if category in ('success', 'error'):
            flashes[category] = message
    return flashes


def render_page(title: Optional[str] = None, status: int = 200, **context):
    """
    Render the landing page shell

    Args:
        title: Page title; defaults to SITE_TITLE
        status: HTTP status code for the response
        **context: success, error, form_data, errors

    Returns:
        tuple: (rendered html, status)
    """
    for category, message in collect_flash_messages().items():
        context.setdefault(category, message)

    context.setdefault('form_data', {})
    context.setdefault('errors', {})
    context['first_error'] = next(iter(context['errors']), None)

    return render_template('index.html',
                           title=title or current_app.config['SITE_TITLE'],
                           **context), status
