"""
Portfolio Website - Main Application Entry Point
Application Factory Pattern

This module initializes the Flask application with its extensions,
configuration and middleware. Route handling is delegated to blueprints.
"""

import os
from datetime import datetime
from flask import Flask, request
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix
from config import get_config
from extensions import relay
from utils.security import (
    GENERAL_LIMIT_MESSAGE, apply_security_headers, check_rate_limit, init_rate_limits
)
from utils.ui_helpers import render_page

# Import all blueprints
from blueprints.pages import pages_bp
from blueprints.contact import contact_bp

NOT_FOUND_MESSAGE = 'The page you are looking for does not exist.'
SERVER_ERROR_MESSAGE = 'A server error occurred. Please try again later.'

# Endpoints that never count against the general rate limit
RATE_LIMIT_EXEMPT = {'static', 'health_check'}


def create_app(config_name=None):
    """
    Application Factory Pattern
    Creates and configures Flask application instance

    Args:
        config_name (str): Configuration environment name (optional)

    Returns:
        Flask: Configured Flask application instance
    """

    app = Flask(__name__)

    # Load configuration
    conf = get_config(config_name)
    app.config.from_object(conf)

    # Trust X-Forwarded-For only from the configured number of proxies
    proxy_count = app.config.get('TRUSTED_PROXY_COUNT', 0)
    if proxy_count:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxy_count)

    # Initialize extensions with app
    initialize_extensions(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register request/response hooks
    register_hooks(app)

    # Health check route
    @app.route('/health')
    def health_check():
        return {'status': 'ok', 'message': 'Portfolio application is running'}, 200

    return app


def initialize_extensions(app):
    """Initialize Flask extensions with the app instance"""
    relay.init_app(app)
    init_rate_limits(app)


def register_blueprints(app):
    """Register all application blueprints"""
    app.register_blueprint(pages_bp)
    app.register_blueprint(contact_bp)


def register_error_handlers(app):
    """Register custom error handlers"""

    @app.errorhandler(404)
    def page_not_found(e):
        return render_page(title='404 - Page not found', error=NOT_FOUND_MESSAGE, status=404)

    @app.errorhandler(429)
    def too_many_requests(e):
        return render_page(error=e.description or GENERAL_LIMIT_MESSAGE, status=429)

    @app.errorhandler(500)
    def internal_server_error(e):
        app.logger.error(f"Server Error: {str(e)}")
        return render_page(title='Server error', error=SERVER_ERROR_MESSAGE, status=500)

    @app.errorhandler(Exception)
    def unhandled_exception(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.exception(f"Unhandled error on {request.method} {request.path}")
        return render_page(title='Server error', error=SERVER_ERROR_MESSAGE, status=500)


def register_hooks(app):
    """Register request/response hooks and context processors"""

    @app.before_request
    def enforce_general_rate_limit():
        if request.endpoint in RATE_LIMIT_EXEMPT:
            return None
        if not check_rate_limit('general'):
            return render_page(error=GENERAL_LIMIT_MESSAGE, status=429)
        return None

    @app.context_processor
    def inject_global_vars():
        return {
            'site_title': app.config['SITE_TITLE'],
            'owner_name': app.config['SENDER_NAME'],
            'current_year': datetime.now().year,
        }

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        return apply_security_headers(response, production=not (app.debug or app.testing))


# Create app instance for gunicorn
app = create_app()

if __name__ == '__main__':
    env = os.environ.get('FLASK_ENV', 'development')
    app = create_app(env)
    port = app.config['PORT']

    # init_app() records the result when it already verified the relay
    if 'relay_verified' not in app.extensions:
        relay.verify(app.logger)

    app.logger.info(f"🚀 Portfolio server running at http://localhost:{port} ({env})")
    app.run(
        host='0.0.0.0',
        port=port,
        debug=(env == 'development')
    )
