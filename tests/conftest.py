"""
Pytest configuration and fixtures for registration portal tests.
"""
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Set testing environment before importing app
os.environ['FLASK_ENV'] = 'testing'
os.environ['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'

from portal.app import create_app
from portal.models import db, College, Registrant, Event, ROLE_LEADER, ROLE_ADMIN
from shared.state_machine import ApprovalState

PASSWORD = 'haunted-circus-2026'


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create database session for testing."""
    with app.app_context():
        # Clear all tables before each test
        db.session.remove()

        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        db.session.rollback()


def _add_college(college_id, name):
    college = College(college_id=college_id, name=name)
    db.session.add(college)
    db.session.commit()
    return college


def _add_registrant(name, email, status, college_id, role, contingent_code):
    college = College.query.filter_by(college_id=college_id).first() if college_id else None
    registrant = Registrant(
        registrant_id=f"r_{email.split('@')[0]}",
        name=name,
        email=email,
        role=role,
        status=status,
        college_id=college.id if college else None,
        contingent_code=contingent_code,
    )
    registrant.set_password(PASSWORD)
    db.session.add(registrant)
    db.session.commit()
    return registrant


def _add_event(event_id, name, min_team_size, max_team_size, college_limit, is_active):
    event = Event(
        event_id=event_id,
        name=name,
        min_team_size=min_team_size,
        max_team_size=max_team_size,
        college_limit=college_limit,
        is_active=is_active,
    )
    db.session.add(event)
    db.session.commit()
    return event


@pytest.fixture
def make_college(app, db_session):
    """Factory for colleges; returns the public college id."""
    def _make(college_id='col-x', name='College X'):
        with app.app_context():
            return _add_college(college_id, name).college_id
    return _make


@pytest.fixture
def make_registrant(app, db_session):
    """Factory for registrants; returns the public registrant id."""
    def _make(
        name='Leader',
        email=None,
        status=ApprovalState.APPROVED.value,
        college_id='col-x',
        role=ROLE_LEADER,
        contingent_code=None
    ):
        email = email or f"{name.lower().replace(' ', '.')}@festival.test"
        with app.app_context():
            return _add_registrant(name, email, status, college_id, role, contingent_code).registrant_id
    return _make


@pytest.fixture
def make_event(app, db_session):
    """Factory for events; returns the public event id."""
    def _make(
        event_id='evt-e',
        name='Event E',
        min_team_size=2,
        max_team_size=5,
        college_limit=2,
        is_active=True
    ):
        with app.app_context():
            return _add_event(event_id, name, min_team_size, max_team_size, college_limit, is_active).event_id
    return _make


@pytest.fixture
def college_x(make_college):
    return make_college('col-x', 'College X')


@pytest.fixture
def event_e(make_event):
    """Event E: team size 2-5, two slots per college."""
    return make_event('evt-e', 'Event E', min_team_size=2, max_team_size=5, college_limit=2)


@pytest.fixture
def approved_leader(make_registrant, college_x):
    return make_registrant('Asha', email='asha@festival.test')


@pytest.fixture
def login(client):
    """Log the test client in as the given registrant."""
    def _login(email, password=PASSWORD):
        response = client.post('/api/v1/login', json={'email': email, 'password': password})
        assert response.status_code == 200
        return response
    return _login


@pytest.fixture
def admin_client(app, client, db_session, login):
    """Test client logged in as an admin."""
    with app.app_context():
        _add_registrant('Organizer', 'oc@festival.test', ApprovalState.APPROVED.value, None, ROLE_ADMIN, None)
    login('oc@festival.test')
    return client
