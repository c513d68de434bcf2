import os
from flask import Flask, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from flask_migrate import Migrate

from .config import config
from .models import db
from .auth import login_manager
from .directory import AccountDirectory
from .catalog import EventCatalog
from .capacity import CapacityReader
from .admission import AdmissionController
from shared.state_machine import ApprovalStateMachine

migrate = Migrate()


def create_app(config_name: str = None, config_overrides: dict = None) -> Flask:
    """Application factory for the registration portal."""
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    if config_overrides:
        app.config.update(config_overrides)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Initialize services
    directory = AccountDirectory()
    catalog = EventCatalog()
    capacity = CapacityReader()
    admission = AdmissionController(directory, catalog, capacity)

    # Create tables
    if app.config.get('AUTO_CREATE_TABLES', True):
        with app.app_context():
            db.create_all()

    # Store services on app for access in routes
    app.directory = directory
    app.catalog = catalog
    app.capacity = capacity
    app.admission = admission

    register_api_routes(app)

    from .routes import registrations, admin
    app.register_blueprint(registrations.bp)
    app.register_blueprint(admin.bp)

    return app


def register_api_routes(app: Flask):
    """Register account and health routes."""

    # ==================== Accounts ====================

    @app.route('/api/v1/signup', methods=['POST'])
    def api_signup():
        """Sign up as a contingent leader (pending approval)."""
        data = request.json or {}

        name = data.get('name')
        email = data.get('email')
        password = data.get('password')

        if not name or not email or not password:
            return jsonify({'error': 'Name, email and password are required'}), 400

        for field in ('name', 'email', 'password', 'phone', 'role'):
            if data.get(field) is not None and not isinstance(data.get(field), str):
                return jsonify({'error': f'{field} must be text'}), 400

        registrant, message = app.directory.signup(
            name=name,
            email=email,
            password=password,
            phone=data.get('phone'),
            role=data.get('role', 'LEADER')
        )
        if not registrant:
            return jsonify({'error': message}), 400

        return jsonify({
            'message': message,
            'registrant': registrant.to_dict(reveal_phone=True)
        }), 201

    @app.route('/api/v1/login', methods=['POST'])
    def api_login():
        data = request.json or {}

        email = data.get('email', '')
        password = data.get('password', '')
        if not isinstance(email, str) or not isinstance(password, str):
            return jsonify({'error': 'Email and password must be text'}), 400

        registrant = app.directory.authenticate(email, password)
        if not registrant:
            return jsonify({'error': 'Invalid email or password'}), 401

        login_user(registrant)
        return jsonify({
            'message': 'Logged in',
            'registrant': registrant.to_dict(reveal_phone=True),
            'home': 'admin' if registrant.is_admin else 'dashboard'
        })

    @app.route('/api/v1/logout', methods=['POST'])
    @login_required
    def api_logout():
        logout_user()
        return jsonify({'message': 'Logged out'})

    @app.route('/api/v1/me', methods=['GET'])
    @login_required
    def api_me():
        """Own profile with approval status and next step."""
        sm = ApprovalStateMachine.from_state_string(current_user.status)
        return jsonify({
            'registrant': current_user.to_dict(reveal_phone=True),
            'next_step': sm.next_step,
            'can_register': sm.can_perform('register') and current_user.college_id is not None
        })

    # ==================== Health Check ====================

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        try:
            db.session.execute(db.text('SELECT 1'))
            db_ok = True
        except Exception:
            db.session.rollback()
            db_ok = False

        status = 'healthy' if db_ok else 'unhealthy'
        code = 200 if db_ok else 503

        return jsonify({
            'status': status,
            'database': 'connected' if db_ok else 'disconnected'
        }), code
