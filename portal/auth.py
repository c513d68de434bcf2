"""Session identity and role checks."""
import functools
import logging
from typing import Callable

from flask import jsonify
from flask_login import LoginManager, current_user

from .models import Registrant

logger = logging.getLogger(__name__)

login_manager = LoginManager()


@login_manager.user_loader
def load_registrant(registrant_id: str):
    return Registrant.query.filter_by(registrant_id=registrant_id).first()


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'error': 'Login required'}), 401


def require_role(*allowed: str) -> Callable:
    """Decorator: only allow logged-in registrants whose role is in *allowed*."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return unauthorized()
            if current_user.role not in allowed:
                logger.warning(
                    f"Registrant {current_user.registrant_id} with role "
                    f"{current_user.role} denied access to {func.__name__}"
                )
                return jsonify({'error': 'You are not authorized to access this page'}), 403
            return func(*args, **kwargs)

        return wrapper

    return decorator
