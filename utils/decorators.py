"""
Decorators Module - Admin area access decorator
"""

from functools import wraps
from flask import current_app, flash, redirect, url_for
from flask_login import current_user
from .security import AccessGuard


def admin_required(f):
    """Run the view only when the access guard authorizes the signed-in user"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        guard = AccessGuard(current_app.extensions['admin_policy'])
        identity = current_user.get_id() if current_user.is_authenticated else None
        state = guard.on_identity_changed(identity)

        if state == AccessGuard.UNAUTHORIZED:
            if identity:
                current_app.logger.warning(f"Admin access denied for {identity}: {guard.decision.reason}")
                flash('Admin access required.', 'error')
            return redirect(url_for('auth.login'))
        return f(*args, **kwargs)
    return decorated_function
