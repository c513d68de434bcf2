#!/usr/bin/env python3
"""
Database management script for deployment.
Run this during the build/deployment pipeline to apply migrations and
create the bootstrap admin account.
"""
import os
import sys

# Add current directory to path so we can import portal
sys.path.append(os.getcwd())

from portal.app import create_app
from flask_migrate import upgrade

def deploy():
    """Run deployment tasks."""
    print("Starting database migration...")
    # Schema comes only from migrations here
    app = create_app(
        os.getenv("FLASK_ENV", "production"),
        config_overrides={'AUTO_CREATE_TABLES': False}
    )
    with app.app_context():
        # Run Alembic upgrade to apply migrations
        try:
            upgrade()
            print("✓ Database migrations applied.")
        except Exception as e:
            print(f"Error applying migrations: {e}")
            sys.exit(1)

        email = app.config.get('ADMIN_EMAIL')
        password = app.config.get('ADMIN_PASSWORD')
        if email and password:
            admin = app.directory.ensure_admin(email, password, name=app.config.get('ADMIN_NAME'))
            print(f"✓ Admin account ready: {admin.email}")
        else:
            print("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin bootstrap.")

if __name__ == '__main__':
    deploy()
