import logging
from typing import Optional, Tuple, List
from flask import current_app
from sqlalchemy.exc import IntegrityError

from .models import db, Registrant, College, ROLES, ROLE_LEADER, ROLE_ADMIN
from .code_generator import generate_contingent_code, generate_short_id
from shared.state_machine import ApprovalStateMachine, ApprovalState, TransitionError

logger = logging.getLogger(__name__)


class AccountDirectory:
    """
    Manages registrant accounts:
    - Signup (always PENDING)
    - Credential checks for the login session
    - Approve/reject with contingent code and college assignment
    - College records
    """

    def signup(
        self,
        name: str,
        email: str,
        password: str,
        phone: str = None,
        role: str = ROLE_LEADER
    ) -> Tuple[Optional[Registrant], str]:
        """Create a new registrant in PENDING state."""
        if role not in ROLES or role == ROLE_ADMIN:
            return None, f"Cannot sign up with role {role}"

        email = email.strip().lower()
        if self.get_by_email(email):
            return None, "An account with this email already exists"

        registrant = Registrant(
            registrant_id=generate_short_id('r_'),
            name=name.strip(),
            email=email,
            role=role,
            status=ApprovalState.PENDING.value,
        )
        registrant.phone = phone
        registrant.set_password(password)

        db.session.add(registrant)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return None, "An account with this email already exists"

        logger.info(f"Registrant {registrant.registrant_id} signed up as {role}")
        return registrant, "Signup successful, awaiting approval"

    def get_registrant(self, registrant_id: str) -> Optional[Registrant]:
        """Get registrant by public ID."""
        return Registrant.query.filter_by(registrant_id=registrant_id).first()

    def get_by_email(self, email: str) -> Optional[Registrant]:
        return Registrant.query.filter_by(email=email.strip().lower()).first()

    def authenticate(self, email: str, password: str) -> Optional[Registrant]:
        """Return the registrant when the password matches."""
        registrant = self.get_by_email(email)
        if registrant and registrant.check_password(password):
            return registrant
        return None

    def list_registrants(
        self,
        status: str = None,
        limit: int = 200,
        offset: int = 0
    ) -> List[Registrant]:
        """List non-admin registrants, grouped by status then name."""
        query = Registrant.query.filter(Registrant.role != ROLE_ADMIN)

        if status:
            query = query.filter_by(status=status)

        query = query.order_by(Registrant.status.asc(), Registrant.name.asc())
        return query.offset(offset).limit(limit).all()

    def approve(
        self,
        registrant_id: str,
        college_id: str = None,
        contingent_code: str = None
    ) -> Tuple[bool, str]:
        """Approve a registrant, assigning a contingent code and optionally a college."""
        registrant = self.get_registrant(registrant_id)

        if not registrant:
            return False, "Registrant not found"

        if registrant.is_admin:
            return False, "Admin accounts are not part of a contingent"

        sm = ApprovalStateMachine.from_state_string(registrant.status)

        if not sm.can_perform('approve'):
            return False, f"Cannot approve registrant in {registrant.status} state"

        college = None
        if college_id:
            college = self.get_college(college_id)
            if not college:
                return False, f"College {college_id} not found"

        try:
            old_state = sm.state.value
            new_state = sm.transition('approve')
        except TransitionError as e:
            return False, str(e)

        if college:
            registrant.college_id = college.id
        if contingent_code:
            registrant.contingent_code = contingent_code
        elif not registrant.contingent_code:
            registrant.contingent_code = self._unique_contingent_code()

        registrant.status = new_state.value
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            if contingent_code:
                return False, f"Contingent code {contingent_code} is already assigned"
            return False, "Could not assign a unique contingent code, please retry"

        logger.info(
            f"Registrant {registrant_id} moved {old_state} -> {new_state.value} "
            f"(contingent {registrant.contingent_code})"
        )
        return True, f"Registrant approved with contingent code {registrant.contingent_code}"

    def reject(self, registrant_id: str) -> Tuple[bool, str]:
        """Reject a registrant. Existing registrations are left in place."""
        registrant = self.get_registrant(registrant_id)

        if not registrant:
            return False, "Registrant not found"

        sm = ApprovalStateMachine.from_state_string(registrant.status)

        if not sm.can_perform('reject'):
            return False, f"Cannot reject registrant in {registrant.status} state"

        try:
            old_state = sm.state.value
            new_state = sm.transition('reject')
        except TransitionError as e:
            return False, str(e)

        registrant.status = new_state.value
        db.session.commit()

        logger.info(f"Registrant {registrant_id} moved {old_state} -> {new_state.value}")
        return True, "Registrant rejected"

    def _unique_contingent_code(self) -> str:
        prefix = current_app.config.get('CONTINGENT_CODE_PREFIX', 'CC')
        for _ in range(20):
            code = generate_contingent_code(prefix)
            if not Registrant.query.filter_by(contingent_code=code).first():
                return code
        raise RuntimeError("Could not generate a unique contingent code")

    # ==================== Colleges ====================

    def create_college(self, name: str, college_id: str = None) -> Tuple[Optional[College], str]:
        college_id = college_id or generate_short_id('c_')
        if self.get_college(college_id):
            return None, f"College {college_id} already exists"

        college = College(college_id=college_id, name=name.strip())
        db.session.add(college)
        db.session.commit()
        return college, "College created"

    def get_college(self, college_id: str) -> Optional[College]:
        return College.query.filter_by(college_id=college_id).first()

    def list_colleges(self) -> List[College]:
        return College.query.order_by(College.name.asc()).all()

    # ==================== Bootstrap ====================

    def ensure_admin(self, email: str, password: str, name: str = 'Organizing Committee') -> Registrant:
        """Create the bootstrap admin account if it does not exist."""
        admin = self.get_by_email(email)
        if admin:
            return admin

        admin = Registrant(
            registrant_id=generate_short_id('a_'),
            name=name,
            email=email.strip().lower(),
            role=ROLE_ADMIN,
            status=ApprovalState.APPROVED.value,
        )
        admin.set_password(password)
        db.session.add(admin)
        db.session.commit()

        logger.info(f"Bootstrap admin {admin.registrant_id} created")
        return admin
