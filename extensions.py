"""
Extensions Module - Centralized initialization of Flask extensions
Decouples extensions from the main app.py to avoid circular imports
and enable better testing.
"""

from flask import session
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager, UserMixin
from flask_caching import Cache

# Initialize extensions without binding to app
db = SQLAlchemy()
cache = Cache()
login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please log in to access the admin panel.'
login_manager.login_message_category = 'info'


class SessionUser(UserMixin):
    """Signed-in identity as remembered in the Flask session"""

    def __init__(self, uid, email=None):
        self.id = uid
        self.email = email


@login_manager.user_loader
def load_user(user_id):
    return SessionUser(user_id, session.get('admin_email'))


__all__ = ['db', 'cache', 'login_manager', 'SessionUser']
