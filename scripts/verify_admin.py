"""
Admin Verification Script
Signs in with the given credentials and reports whether the account holds
the admin role, using the same policy as the admin login

Usage:
    python scripts/verify_admin.py admin@example.com
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
from utils.security import RolePolicy, login_error_message


def main():
    parser = argparse.ArgumentParser(description='Check that an account can use the admin panel')
    parser.add_argument('email')
    parser.add_argument('--env', default=os.environ.get('FLASK_ENV', 'development'))
    args = parser.parse_args()

    password = os.environ.get('ADMIN_PASSWORD') or getpass.getpass('Password: ')

    app = create_app(args.env)
    with app.app_context():
        client = create_backend_client(app.config).initialize()
        try:
            user = client.auth.sign_in(args.email, password)
            print(f"[OK] Signed in: {user.uid}")

            decision = RolePolicy(client).check(user.uid)
            if decision.allowed:
                print(f"[OK] {decision.reason}: this account can access the admin panel")
            else:
                print(f"[X] Not authorized: {decision.reason}")
                print("Run scripts/setup_admin.py to grant the admin role.")
                sys.exit(1)
        except BackendError as e:
            print(f"[X] {login_error_message(e)}")
            sys.exit(1)
        finally:
            client.auth.sign_out()
            client.shutdown()


if __name__ == '__main__':
    main()
