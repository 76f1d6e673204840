"""
Extensions Module - Centralized initialization of Flask extensions
Keeps the relay handle out of app.py to avoid circular imports
and lets tests swap it for a fake.
"""

from utils.notifications import SmtpRelay

# Initialize extensions without binding to app
relay = SmtpRelay()

__all__ = ['relay']
