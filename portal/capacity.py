"""
Per-college capacity accounting.

Counts are always derived from the registrations table. Answers given here
are advisory; the authoritative check runs inside the admission transaction.
"""
from dataclasses import dataclass
from typing import Optional, Dict

from sqlalchemy import func

from .models import db, Event, Registration


@dataclass
class CapacityUsage:
    used: int
    limit: Optional[int]

    @property
    def unlimited(self) -> bool:
        return self.limit is None or self.limit <= 0

    @property
    def remaining(self) -> Optional[int]:
        if self.unlimited:
            return None
        return max(self.limit - self.used, 0)

    @property
    def is_full(self) -> bool:
        return not self.unlimited and self.used >= self.limit

    def to_dict(self):
        return {
            'used': self.used,
            'limit': None if self.unlimited else self.limit,
            'remaining': self.remaining,
            'unlimited': self.unlimited,
            'is_full': self.is_full,
        }


class CapacityReader:

    def count_for(self, event: Event, college_pk: Optional[int]) -> int:
        """Number of registrations holding a slot for (event, college)."""
        if event is None or college_pk is None:
            return 0

        count = db.session.query(func.count(Registration.id)).filter(
            Registration.event_id == event.id,
            Registration.college_id == college_pk
        ).scalar()
        return count or 0

    def usage_for(self, event: Event, college_pk: Optional[int]) -> CapacityUsage:
        return CapacityUsage(
            used=self.count_for(event, college_pk),
            limit=event.college_limit if event is not None else None
        )

    def usage_by_event(self, college_pk: Optional[int]) -> Dict[int, int]:
        """Slots used by one college, keyed by internal event id."""
        if college_pk is None:
            return {}

        rows = db.session.query(
            Registration.event_id,
            func.count(Registration.id)
        ).filter(
            Registration.college_id == college_pk
        ).group_by(Registration.event_id).all()

        return {event_pk: count for event_pk, count in rows}
