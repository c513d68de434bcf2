from typing import Optional, Tuple, List

from .models import db, Event
from .code_generator import generate_short_id


class EventCatalog:
    """Read-mostly access to festival events."""

    def get_event(self, event_id: str) -> Optional[Event]:
        """Get event by its public ID."""
        return Event.query.filter_by(event_id=event_id).first()

    def list_active_events(self) -> List[Event]:
        return Event.query.filter_by(is_active=True).order_by(Event.name.asc()).all()

    def create_event(
        self,
        name: str,
        min_team_size: int = 1,
        max_team_size: int = 1,
        college_limit: int = None,
        description: str = None,
        is_active: bool = True,
        event_id: str = None
    ) -> Tuple[Optional[Event], str]:
        """Create an event after checking its team-size bounds."""
        for value in (min_team_size, max_team_size):
            if not isinstance(value, int) or isinstance(value, bool):
                return None, "Team sizes must be integers"

        if min_team_size < 1:
            return None, "Minimum team size must be at least 1"

        if min_team_size > max_team_size:
            return None, "Minimum team size cannot exceed maximum team size"

        if college_limit is not None and (not isinstance(college_limit, int) or isinstance(college_limit, bool)):
            return None, "College limit must be an integer"

        if not isinstance(is_active, bool):
            return None, "is_active must be true or false"

        event_id = event_id or generate_short_id('e_')
        if self.get_event(event_id):
            return None, f"Event {event_id} already exists"

        event = Event(
            event_id=event_id,
            name=name,
            description=description,
            min_team_size=min_team_size,
            max_team_size=max_team_size,
            college_limit=college_limit,
            is_active=is_active
        )

        db.session.add(event)
        db.session.commit()

        return event, "Event created"

    def set_active(self, event_id: str, is_active: bool) -> Tuple[bool, str]:
        event = self.get_event(event_id)

        if not event:
            return False, "Event not found"

        event.is_active = is_active
        db.session.commit()

        return True, "Event activated" if is_active else "Event deactivated"
