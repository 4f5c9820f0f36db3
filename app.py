"""
Portfolio CMS - Main Application Entry Point
Application Factory Pattern: public portfolio site plus the admin panel

This module initializes the Flask application with its extensions, the
backend client (document database + auth service) and the blueprints.
All actual route handling is delegated to blueprints.
"""

import atexit
import os
from datetime import datetime
from flask import Flask, render_template
from flask_login import current_user
from config import get_config
from extensions import db, cache, login_manager
from backend import create_backend_client
from utils.services import PortfolioServices
from utils.security import RolePolicy

# Import all blueprints
from blueprints.auth import auth_bp
from blueprints.portfolio import portfolio_bp
from blueprints.dashboard import dashboard_bp


def create_app(config_name=None, test_config=None):
    """
    Application Factory Pattern
    Creates and configures Flask application instance

    Args:
        config_name (str): Configuration environment name (optional)
        test_config (dict): Extra settings applied last (optional)

    Returns:
        Flask: Configured Flask application instance
    """

    app = Flask(__name__)

    # Load configuration
    conf = get_config(config_name)
    app.config.from_object(conf)
    if test_config:
        app.config.update(test_config)

    # Initialize extensions with app
    initialize_extensions(app)

    # Connect the document database and auth service
    initialize_backend(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Register request/response hooks
    register_hooks(app)

    # Health check route
    @app.route('/health')
    def health_check():
        return {'status': 'ok', 'backend': app.extensions['backend'].name}, 200

    return app


def initialize_extensions(app):
    """Initialize Flask extensions with the app instance"""
    db.init_app(app)
    cache.init_app(app)
    login_manager.init_app(app)


def session_identity():
    """Id of the user signed in to the current request's session"""
    if current_user and current_user.is_authenticated:
        return current_user.get_id()
    return None


def initialize_backend(app):
    """Build the backend client, initialize it and expose the services"""
    client = create_backend_client(app.config, identity_loader=session_identity)

    with app.app_context():
        try:
            client.initialize()
            app.logger.info(f"✓ Backend initialized ({client.name})")
        except Exception as e:
            app.logger.error(f"✗ Backend initialization failed: {str(e)}")
            raise

    app.extensions['backend'] = client
    app.extensions['portfolio'] = PortfolioServices(client)
    app.extensions['admin_policy'] = RolePolicy(client)
    atexit.register(client.shutdown)


def register_blueprints(app):
    """Register all application blueprints"""
    app.register_blueprint(auth_bp)
    app.register_blueprint(portfolio_bp)
    app.register_blueprint(dashboard_bp)


def register_error_handlers(app):
    """Register custom error handlers"""

    @app.errorhandler(404)
    def page_not_found(e):
        return render_template('404.html'), 404

    @app.errorhandler(500)
    def internal_server_error(e):
        app.logger.error(f"Server Error: {str(e)}")
        return render_template('500.html'), 500

    @app.errorhandler(413)
    def file_too_large(e):
        return render_template('413.html'), 413


def register_hooks(app):
    """Register request/response hooks and context processors"""

    @app.context_processor
    def inject_global_vars():
        return {
            'current_year': datetime.now().year,
            'is_admin_session': current_user.is_authenticated,
        }

    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses"""
        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "img-src 'self' data: https://res.cloudinary.com; "
            "media-src 'self' https://res.cloudinary.com; "
            "style-src 'self' 'unsafe-inline'; "
            "frame-ancestors 'none';"
        )
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response


if __name__ == '__main__':
    # Get environment
    env = os.environ.get('FLASK_ENV', 'development')

    # Create app
    app = create_app(env)

    # Run development server
    app.run(
        host='0.0.0.0',
        port=int(os.environ.get('PORT', '5000')),
        debug=(env == 'development')
    )
