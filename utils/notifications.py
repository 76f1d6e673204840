"""
Notifications Module - Email relay, contact dispatch and owner alerts
"""

import smtplib
import threading
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from types import MappingProxyType

import requests
from flask import current_app, render_template

from models import DispatchResult, NotificationMessage


class DispatchError(Exception):
    """Base error for anything that prevents a notification from going out"""


class RelayError(DispatchError):
    """The relay refused the message, timed out or could not be reached"""


class SmtpRelay:
    """
    Process-wide SMTP relay handle

    Connection parameters are captured once in init_app() and never change
    afterwards. Each submit() opens its own SMTP session; sends are
    serialized with a lock so concurrent requests can share one handle.
    """

    def __init__(self, app=None):
        self._settings = None
        self._lock = threading.Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._settings = MappingProxyType({
            'host': app.config.get('SMTP_HOST'),
            'port': int(app.config.get('SMTP_PORT', 587)),
            'use_tls': bool(app.config.get('SMTP_USE_TLS', True)),
            'timeout': float(app.config.get('SMTP_TIMEOUT', 10)),
            'username': app.config.get('EMAIL_USER') or '',
            'password': app.config.get('EMAIL_PASS') or '',
        })
        app.extensions['relay'] = self

        if app.config.get('SMTP_VERIFY_ON_STARTUP'):
            app.extensions['relay_verified'] = self.verify(app.logger)

    @property
    def settings(self):
        if self._settings is None:
            raise RuntimeError('SmtpRelay used before init_app()')
        return self._settings

    def _connect(self):
        cfg = self.settings
        server = smtplib.SMTP(cfg['host'], cfg['port'], timeout=cfg['timeout'])
        if cfg['use_tls']:
            server.starttls()
        if cfg['username'] and cfg['password']:
            server.login(cfg['username'], cfg['password'])
        return server

    def verify(self, logger):
        """Open and close one session to check the relay settings; never raises"""
        try:
            with self._lock:
                server = self._connect()
                server.quit()
            logger.info(f"✓ Email relay ready at {self.settings['host']}:{self.settings['port']}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"✗ Email relay configuration error: {str(e)}")
            return False

    @staticmethod
    def build_mime(message):
        msg = MIMEMultipart('alternative')
        msg['Subject'] = message.subject
        msg['From'] = message.sender
        msg['To'] = message.recipient
        if message.reply_to:
            msg['Reply-To'] = message.reply_to
        msg.attach(MIMEText(message.text, 'plain', 'utf-8'))
        msg.attach(MIMEText(message.html, 'html', 'utf-8'))
        return msg

    def submit(self, message):
        """
        Send one NotificationMessage

        Raises:
            RelayError: on any SMTP, socket or timeout failure
        """
        mime = self.build_mime(message)
        try:
            with self._lock:
                server = self._connect()
                try:
                    server.send_message(mime)
                finally:
                    server.quit()
        except (smtplib.SMTPException, OSError) as e:
            raise RelayError(f"{message.kind} to {message.recipient} failed: {str(e)}") from e

        current_app.logger.info(f"Email ({message.kind}) sent to {message.recipient}")


def get_relay():
    """Return the relay bound to the current app"""
    return current_app.extensions['relay']


def _format_sender(display_name, config):
    return formataddr((display_name, config.get('EMAIL_USER') or ''))


def build_owner_notification(sanitized, config, timestamp):
    """Message to the site owner with every submitted field"""
    sent_at = timestamp.strftime('%Y-%m-%d %H:%M:%S')
    context = dict(sanitized.as_dict(), sent_at=sent_at)

    text = (
        f"New contact message\n\n"
        f"Name: {sanitized.name}\n"
        f"Email: {sanitized.email}\n"
        f"Subject: {sanitized.subject}\n\n"
        f"Message:\n{sanitized.message}\n\n"
        f"Sent from your portfolio website on {sent_at}"
    )

    return NotificationMessage(
        kind='owner_notification',
        sender=_format_sender(config.get('CONTACT_FROM_NAME', 'Portfolio Contact'), config),
        recipient=config.get('OWNER_EMAIL'),
        reply_to=sanitized.email,
        subject=f"New portfolio message: {sanitized.subject}",
        html=render_template('emails/owner_notification.html', **context),
        text=text,
    )


def build_sender_acknowledgment(sanitized, config):
    """Auto-reply thanking the sender and echoing their message"""
    owner_name = config.get('SENDER_NAME', 'Alex Rivera')

    text = (
        f"Hi {sanitized.name},\n\n"
        f"I received your message and will get back to you as soon as possible. "
        f"I usually reply within 24-48 hours.\n\n"
        f"Your message:\n{sanitized.message}\n\n"
        f"Best regards,\n{owner_name}"
    )

    return NotificationMessage(
        kind='sender_acknowledgment',
        sender=_format_sender(owner_name, config),
        recipient=sanitized.email,
        subject=f"Thanks for your message - {owner_name}",
        html=render_template('emails/sender_acknowledgment.html',
                             name=sanitized.name,
                             message=sanitized.message,
                             owner_name=owner_name,
                             current_year=datetime.now().year),
        text=text,
    )


def dispatch_contact(sanitized, relay=None, now=None):
    """
    Send the owner notification, then the sender acknowledgment

    No retry is attempted: there is no idempotency key to dedupe a resend.

    Args:
        sanitized (SanitizedSubmission): Validated and sanitized fields
        relay: Object with submit(message); defaults to the app relay
        now (datetime, optional): Timestamp for the owner notification

    Returns:
        DispatchResult: delivered, owner_only or failed
    """
    relay = relay or get_relay()
    config = current_app.config
    timestamp = now or datetime.now()

    owner_message = build_owner_notification(sanitized, config, timestamp)
    acknowledgment = build_sender_acknowledgment(sanitized, config)

    try:
        relay.submit(owner_message)
    except Exception as e:
        current_app.logger.error(f"Owner notification failed: {str(e)}")
        return DispatchResult(DispatchResult.FAILED, reason=str(e))

    try:
        relay.submit(acknowledgment)
    except Exception as e:
        current_app.logger.error(f"Sender acknowledgment failed after owner was notified: {str(e)}")
        return DispatchResult(DispatchResult.OWNER_ONLY, reason=str(e))

    return DispatchResult(DispatchResult.DELIVERED)


def send_owner_alert(sanitized):
    """
    Best-effort Telegram alert to the site owner

    Returns:
        bool: True if Telegram accepted the message, False otherwise
    """
    bot_token = current_app.config.get('OWNER_TELEGRAM_BOT_TOKEN')
    chat_id = current_app.config.get('OWNER_TELEGRAM_CHAT_ID')

    if not (bot_token and chat_id):
        current_app.logger.debug("Owner Telegram alert not configured")
        return False

    preview = sanitized.message[:200] + ('...' if len(sanitized.message) > 200 else '')
    payload = {
        'chat_id': chat_id,
        'text': (
            f"📧 New Portfolio Message\n\n"
            f"👤 From: {sanitized.name}\n"
            f"📧 Email: {sanitized.email}\n"
            f"📌 Subject: {sanitized.subject}\n"
            f"💬 Message:\n{preview}"
        ),
    }

    try:
        url = f"https://api.telegram.org/bot{bot_token}/sendMessage"
        response = requests.post(url, json=payload, timeout=10)
        if response.status_code == 200:
            current_app.logger.info("Owner Telegram alert sent")
            return True
        current_app.logger.error(f"Telegram API error: {response.status_code}")
        return False
    except requests.RequestException as e:
        current_app.logger.error(f"Owner Telegram alert error: {str(e)}")
        return False
