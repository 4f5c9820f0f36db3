"""
Admin Setup Script
Creates the admin account (or reuses an existing one) and grants it the
admin role in the userRoles collection

Usage:
    python scripts/setup_admin.py admin@example.com
    (the password is prompted for, or read from ADMIN_PASSWORD)
"""

import argparse
import getpass
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from backend import create_backend_client
from backend.errors import BackendError
from utils.services import UserRoleService
from utils.security import ADMIN_ROLE


def ensure_account(client, email, password):
    """Sign up, or sign in when the email is already registered"""
    try:
        user = client.auth.sign_up(email, password)
        print(f"[OK] Account created: {user.uid}")
    except BackendError as e:
        if e.code != 'auth/email-already-in-use':
            raise
        print("[!] Account already exists, signing in to look up its id...")
    return client.auth.sign_in(email, password)


def main():
    parser = argparse.ArgumentParser(description='Create the portfolio admin account')
    parser.add_argument('email')
    parser.add_argument('--env', default=os.environ.get('FLASK_ENV', 'development'))
    args = parser.parse_args()

    password = os.environ.get('ADMIN_PASSWORD') or getpass.getpass('Admin password: ')

    app = create_app(args.env)
    with app.app_context():
        client = create_backend_client(app.config).initialize()
        try:
            print("=" * 60)
            print(f"Setting up admin on backend: {client.name}")
            print("=" * 60)

            user = ensure_account(client, args.email, password)
            roles = UserRoleService(client)
            if roles.find(user.uid, ADMIN_ROLE):
                print("[OK] Admin role already assigned")
            else:
                roles.grant(user.uid, ADMIN_ROLE)
                print("[OK] Admin role assigned")

            print("\nAdmin user ready!")
            print(f"Email: {user.email}")
            print(f"User id: {user.uid}")
            print("Login URL: /admin/login")
        except BackendError as e:
            print(f"Error ({e.code}): {e.message}")
            sys.exit(1)
        finally:
            client.shutdown()


if __name__ == '__main__':
    main()
