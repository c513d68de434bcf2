from datetime import datetime
from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from cryptography.fernet import Fernet
from werkzeug.security import generate_password_hash, check_password_hash
import os
import base64
import hashlib

from shared.state_machine import ApprovalState

db = SQLAlchemy()

ROLE_LEADER = 'LEADER'
ROLE_ASSISTANT_LEADER = 'ASSISTANT_LEADER'
ROLE_ADMIN = 'ADMIN'
ROLES = (ROLE_LEADER, ROLE_ASSISTANT_LEADER, ROLE_ADMIN)


def get_encryption_key():
    """Get encryption key derived from SECRET_KEY."""
    secret = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-prod')
    key = hashlib.sha256(secret.encode()).digest()
    return base64.urlsafe_b64encode(key)


def encrypt_value(value: str) -> str:
    """Encrypt a personal detail for storage."""
    f = Fernet(get_encryption_key())
    return f.encrypt(value.encode()).decode()


def decrypt_value(encrypted: str) -> str:
    """Decrypt a stored personal detail."""
    f = Fernet(get_encryption_key())
    return f.decrypt(encrypted.encode()).decode()


class College(db.Model):
    __tablename__ = 'colleges'

    id = db.Column(db.Integer, primary_key=True)
    college_id = db.Column(db.String(50), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'college_id': self.college_id,
            'name': self.name,
        }


class Registrant(UserMixin, db.Model):
    __tablename__ = 'registrants'

    id = db.Column(db.Integer, primary_key=True)
    registrant_id = db.Column(db.String(100), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone_encrypted = db.Column(db.String(500), nullable=True)
    role = db.Column(db.String(20), nullable=False, default=ROLE_LEADER)
    status = db.Column(db.String(20), nullable=False, default=ApprovalState.PENDING.value, index=True)
    college_id = db.Column(db.Integer, db.ForeignKey('colleges.id'), nullable=True)
    contingent_code = db.Column(db.String(50), unique=True, nullable=True)
    password_hash = db.Column(db.String(256), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    college = db.relationship('College')

    def get_id(self):
        """Flask-Login session key is the public registrant id."""
        return self.registrant_id

    @property
    def phone(self):
        if not self.phone_encrypted:
            return None
        return decrypt_value(self.phone_encrypted)

    @phone.setter
    def phone(self, value):
        self.phone_encrypted = encrypt_value(value) if value else None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_approved(self) -> bool:
        return self.status == ApprovalState.APPROVED.value

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self, reveal_phone: bool = False):
        return {
            'registrant_id': self.registrant_id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone if reveal_phone else None,
            'role': self.role,
            'status': self.status,
            'college_id': self.college.college_id if self.college else None,
            'college_name': self.college.name if self.college else None,
            'contingent_code': self.contingent_code,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Event(db.Model):
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.String(50), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    min_team_size = db.Column(db.Integer, nullable=False, default=1)
    max_team_size = db.Column(db.Integer, nullable=False, default=1)
    college_limit = db.Column(db.Integer, nullable=True)  # null or <= 0 means unlimited
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('min_team_size >= 1', name='ck_event_min_team_size'),
        db.CheckConstraint('max_team_size >= min_team_size', name='ck_event_team_size_bounds'),
    )

    @property
    def has_college_limit(self) -> bool:
        return self.college_limit is not None and self.college_limit > 0

    def to_dict(self):
        return {
            'event_id': self.event_id,
            'name': self.name,
            'description': self.description,
            'min_team_size': self.min_team_size,
            'max_team_size': self.max_team_size,
            'college_limit': self.college_limit if self.has_college_limit else None,
            'is_active': self.is_active,
        }


class Registration(db.Model):
    __tablename__ = 'registrations'

    id = db.Column(db.Integer, primary_key=True)
    registration_id = db.Column(db.String(50), unique=True, nullable=False, index=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id'), nullable=False)
    registrant_id = db.Column(db.Integer, db.ForeignKey('registrants.id'), nullable=False)
    college_id = db.Column(db.Integer, db.ForeignKey('colleges.id'), nullable=False)  # copied at admission
    team_size = db.Column(db.Integer, nullable=False)
    team_members = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    event = db.relationship('Event')
    registrant = db.relationship('Registrant', backref='registrations')
    college = db.relationship('College')

    __table_args__ = (
        db.UniqueConstraint('event_id', 'registrant_id', name='unique_registration_per_event'),
        db.Index('ix_registrations_event_college', 'event_id', 'college_id'),
    )

    def to_dict(self):
        return {
            'registration_id': self.registration_id,
            'event_id': self.event.event_id if self.event else None,
            'registrant_id': self.registrant.registrant_id if self.registrant else None,
            'college_id': self.college.college_id if self.college else None,
            'team_size': self.team_size,
            'team_members': self.team_members,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
