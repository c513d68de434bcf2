"""
Admission control for event registration.

The controller is the only writer of registration rows. A request is
checked in a fixed order (approval, college, event, team size, duplicate,
college capacity); the first failing check decides the outcome. When every
check passes the duplicate and capacity checks are repeated and the row is
written by a single conditional INSERT, inside a transaction that holds the
event row lock. Concurrent requests for the last slot of an (event, college)
pair therefore admit exactly one registrant.

Outcomes are returned as AdmissionResult values; only programming errors
propagate as exceptions.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, insert, exists, func, and_, literal, text
from sqlalchemy import Integer, String, Text, DateTime
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from flask import current_app

from .models import db, Registrant, Event, College, Registration
from .directory import AccountDirectory
from .catalog import EventCatalog
from .capacity import CapacityReader
from .code_generator import generate_short_id
from shared.outcomes import (
    AdmissionResult,
    AdmissionErrorCode,
    not_approved,
    team_size_out_of_range,
    storage_unavailable,
)

logger = logging.getLogger(__name__)


class AdmissionController:

    def __init__(
        self,
        directory: AccountDirectory = None,
        catalog: EventCatalog = None,
        capacity: CapacityReader = None
    ):
        self.directory = directory or AccountDirectory()
        self.catalog = catalog or EventCatalog()
        self.capacity = capacity or CapacityReader()

    def request_registration(
        self,
        registrant_id: str,
        event_id: str,
        team_size,
        team_members: Optional[str] = None
    ) -> AdmissionResult:
        """Admit or refuse one registration request."""
        try:
            result = self._evaluate(registrant_id, event_id, team_size, team_members)
        except SQLAlchemyError:
            db.session.rollback()
            logger.error(
                f"Storage failure while registering {registrant_id} for {event_id}",
                exc_info=True
            )
            return storage_unavailable()

        if result.admitted:
            logger.info(
                f"Registration {result.registration.registration_id} admitted: "
                f"registrant {registrant_id}, event {event_id}, team size {team_size}"
            )
        else:
            logger.info(
                f"Registration refused for registrant {registrant_id}, "
                f"event {event_id}: {result.error.code.value}"
            )
        return result

    def list_registrations_for_registrant(self, registrant_id: str) -> List[Registration]:
        registrant = self.directory.get_registrant(registrant_id)
        if not registrant:
            return []
        return Registration.query.filter_by(
            registrant_id=registrant.id
        ).order_by(Registration.created_at.asc()).all()

    def _evaluate(self, registrant_id, event_id, team_size, team_members) -> AdmissionResult:
        registrant = self.directory.get_registrant(registrant_id)
        if not registrant or not registrant.is_approved:
            return not_approved()

        if registrant.college_id is None:
            return AdmissionResult.reject(AdmissionErrorCode.MISSING_COLLEGE)

        event = self.catalog.get_event(event_id)
        if not event or not event.is_active:
            return AdmissionResult.reject(AdmissionErrorCode.EVENT_UNAVAILABLE)

        if not self._team_size_in_range(event, team_size):
            return team_size_out_of_range(event.min_team_size, event.max_team_size)

        if self._has_registration(event.id, registrant.id):
            return AdmissionResult.reject(AdmissionErrorCode.ALREADY_REGISTERED)

        if event.has_college_limit:
            used = self.capacity.count_for(event, registrant.college_id)
            if used >= event.college_limit:
                return AdmissionResult.reject(AdmissionErrorCode.COLLEGE_LIMIT_REACHED)

        if team_members is not None:
            team_members = team_members.strip() or None

        return self._admit(registrant, event, team_size, team_members)

    @staticmethod
    def _team_size_in_range(event: Event, team_size) -> bool:
        if not isinstance(team_size, int) or isinstance(team_size, bool):
            return False
        return event.min_team_size <= team_size <= event.max_team_size

    @staticmethod
    def _has_registration(event_pk: int, registrant_pk: int) -> bool:
        return db.session.query(Registration.id).filter_by(
            event_id=event_pk,
            registrant_id=registrant_pk
        ).first() is not None

    def _admit(
        self,
        registrant: Registrant,
        event: Event,
        team_size: int,
        team_members: Optional[str]
    ) -> AdmissionResult:
        """Write the registration row, re-checking duplicate and capacity atomically."""
        event_pk = event.id
        registrant_pk = registrant.id
        college_pk = registrant.college_id
        registration_id = generate_short_id('reg_')
        created_at = datetime.utcnow()

        try:
            # Public ids for the fallback result once the row is committed
            public_ids = (event.event_id, registrant.registrant_id, registrant.college.college_id)

            self._apply_lock_timeout()

            # Serializes admissions per event on PostgreSQL. SQLite takes its
            # write lock when the INSERT below starts, before it reads.
            locked = db.session.execute(
                select(Event.college_limit, Event.is_active)
                .where(Event.id == event_pk)
                .with_for_update()
            ).first()
            if locked is None or not locked.is_active:
                db.session.rollback()
                return AdmissionResult.reject(AdmissionErrorCode.EVENT_UNAVAILABLE)

            college_limit = locked.college_limit
            guard = ~exists().where(
                Registration.event_id == event_pk,
                Registration.registrant_id == registrant_pk
            )
            if college_limit is not None and college_limit > 0:
                used = (
                    select(func.count(Registration.id))
                    .where(
                        Registration.event_id == event_pk,
                        Registration.college_id == college_pk
                    )
                    .scalar_subquery()
                )
                guard = and_(guard, used < college_limit)

            row = select(
                literal(registration_id, String),
                literal(event_pk, Integer),
                literal(registrant_pk, Integer),
                literal(college_pk, Integer),
                literal(team_size, Integer),
                literal(team_members, Text),
                literal(created_at, DateTime),
            ).where(guard)

            result = db.session.execute(
                insert(Registration.__table__).from_select(
                    [
                        'registration_id',
                        'event_id',
                        'registrant_id',
                        'college_id',
                        'team_size',
                        'team_members',
                        'created_at',
                    ],
                    row
                )
            )

            if result.rowcount != 1:
                refused = self._refusal_after_guard(event_pk, registrant_pk)
                db.session.rollback()
                return refused

            db.session.commit()

        except IntegrityError:
            # A concurrent duplicate won the unique constraint.
            db.session.rollback()
            if self._has_registration(event_pk, registrant_pk):
                return AdmissionResult.reject(AdmissionErrorCode.ALREADY_REGISTERED)
            raise

        try:
            registration = Registration.query.filter_by(registration_id=registration_id).one()
        except SQLAlchemyError:
            # The row is committed; a failed re-read must not report a retryable failure.
            db.session.rollback()
            logger.warning(
                f"Registration {registration_id} committed but could not be reloaded",
                exc_info=True
            )
            registration = self._committed_registration(
                registration_id, public_ids, event_pk, registrant_pk, college_pk,
                team_size, team_members, created_at
            )
        return AdmissionResult.admit(registration)

    @staticmethod
    def _committed_registration(
        registration_id, public_ids, event_pk, registrant_pk, college_pk,
        team_size, team_members, created_at
    ) -> Registration:
        """Detached Registration built from the values written by the INSERT."""
        event_id, registrant_id, college_id = public_ids
        return Registration(
            registration_id=registration_id,
            event_id=event_pk,
            registrant_id=registrant_pk,
            college_id=college_pk,
            team_size=team_size,
            team_members=team_members,
            created_at=created_at,
            event=Event(id=event_pk, event_id=event_id),
            registrant=Registrant(id=registrant_pk, registrant_id=registrant_id),
            college=College(id=college_pk, college_id=college_id),
        )

    def _refusal_after_guard(self, event_pk: int, registrant_pk: int) -> AdmissionResult:
        # Same transaction as the guarded INSERT; duplicate takes precedence.
        if self._has_registration(event_pk, registrant_pk):
            return AdmissionResult.reject(AdmissionErrorCode.ALREADY_REGISTERED)
        return AdmissionResult.reject(AdmissionErrorCode.COLLEGE_LIMIT_REACHED)

    @staticmethod
    def _apply_lock_timeout():
        if db.engine.dialect.name != 'postgresql':
            return
        timeout_ms = int(current_app.config.get('ADMISSION_LOCK_TIMEOUT_MS', 5000))
        db.session.execute(text(f"SET LOCAL lock_timeout = '{timeout_ms}ms'"))
