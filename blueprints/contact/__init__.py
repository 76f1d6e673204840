"""
Contact Blueprint - Contact form processing
Handles: Validation, sanitization and email dispatch
"""

from flask import Blueprint

contact_bp = Blueprint('contact', __name__, url_prefix='')

from . import routes
