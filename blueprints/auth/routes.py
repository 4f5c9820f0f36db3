"""
Auth Routes - Admin login and logout
"""

from flask import render_template, session, redirect, url_for, request, flash, current_app
from flask_login import login_user, logout_user, current_user
from extensions import SessionUser
from backend.errors import BackendError
from utils.security import sign_in_admin, login_error_message
from . import auth_bp


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login: authenticate, then require the admin role"""
    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')
        client = current_app.extensions['backend']
        policy = current_app.extensions['admin_policy']

        current_app.logger.info(f"Attempting admin login for {email}")
        try:
            user = sign_in_admin(client, policy, email, password)
        except BackendError as e:
            current_app.logger.warning(f"Login failed for {email} ({e.code}): {str(e)}")
            flash(login_error_message(e), 'error')
            return render_template('admin/login.html', email=email), 401

        session['admin_email'] = user.email
        login_user(SessionUser(user.uid, user.email))
        current_app.logger.info(f"Admin role verified for {user.uid}")
        flash('Logged in successfully!', 'success')
        return redirect(url_for('dashboard.index'))

    if current_user.is_authenticated:
        return redirect(url_for('dashboard.index'))
    return render_template('admin/login.html')


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Logout current admin"""
    current_app.extensions['backend'].auth.sign_out()
    logout_user()
    session.pop('admin_email', None)
    flash('Logged out successfully', 'success')
    return redirect(url_for('auth.login'))
