#!/usr/bin/env python3
"""
Entry point for the Festival Registration Portal.

Usage:
    python run.py                    # Run the portal

Environment Variables:
    FLASK_ENV: development or production (default: development)
    PORT: Port to run on (default: 5000)
    DATABASE_URL: SQLAlchemy database URL
"""
import os
import logging


def run_portal():
    """Run the registration portal."""
    from portal.app import create_app

    app = create_app()
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('FLASK_ENV', 'development') == 'development'

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )
    logging.getLogger(__name__).info(f"Starting Registration Portal on port {port}...")
    app.run(host='0.0.0.0', port=port, debug=debug)


if __name__ == '__main__':
    run_portal()
