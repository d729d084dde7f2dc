"""
Role-based visibility rules for the portal.

Two roles exist.  ``admin`` sees and manages everything.  ``produtor``
is a user linked to a producer (a client organisation booking DJs
through the agency) and only sees records tied to that producer's own
events: the events themselves, their contracts, the DJs booked for
them and media attached to those DJs or events.

The filters accept pydantic models, plain dicts or any object exposing
the relevant fields as attributes, so they can be applied both to
service results and to raw API payloads.  Every filter returns a
subset of its input in the original order.
"""

from typing import Any, Dict, Iterable, List, Optional, Set

ADMIN = "admin"
PRODUCER = "produtor"

ROLES = (ADMIN, PRODUCER)

PERMISSION_NAMES = (
    "can_view_all_djs",
    "can_view_all_events",
    "can_view_all_contracts",
    "can_manage_users",
    "can_create_djs",
    "can_edit_djs",
    "can_view_financials",
    "can_manage_producers",
)

# Portal views a producer may not open.
PRODUCER_RESTRICTED_VIEWS = frozenset(
    {"calendar", "contracts", "financial", "producers", "producer-dashboard"}
)


def _field(record: Any, name: str) -> Any:
    if record is None:
        return None
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _producer_scope(user: Any) -> Optional[Any]:
    """Return the producer id a ``produtor`` is restricted to, if any."""
    if _field(user, "role") == PRODUCER:
        return _field(user, "producer_id") or None
    return None


class AccessControlManager:
    """Static rule set deciding what a user may see."""

    @staticmethod
    def is_admin(user: Any) -> bool:
        return _field(user, "role") == ADMIN

    @staticmethod
    def get_user_permissions(user: Any) -> Dict[str, bool]:
        """Return the permission flags for ``user``.

        Admins get every flag set, producers get every flag cleared and
        any other role gets an empty mapping.
        """
        role = _field(user, "role")
        if role == ADMIN:
            return {name: True for name in PERMISSION_NAMES}
        if role == PRODUCER:
            return {name: False for name in PERMISSION_NAMES}
        return {}

    @staticmethod
    def can_access_view(user: Any, view: str) -> bool:
        role = _field(user, "role")
        if role == ADMIN:
            return True
        if role == PRODUCER:
            return view not in PRODUCER_RESTRICTED_VIEWS
        return False

    @staticmethod
    def _producer_events(events: Iterable[Any], producer_id: Any) -> List[Any]:
        return [event for event in events if _field(event, "producer_id") == producer_id]

    @classmethod
    def _accessible_dj_ids(cls, events: Iterable[Any], producer_id: Any) -> Set[Any]:
        return {
            _field(event, "dj_id")
            for event in cls._producer_events(events, producer_id)
            if _field(event, "dj_id")
        }

    @classmethod
    def can_access_dj(cls, user: Any, dj_id: Any, events: Iterable[Any]) -> bool:
        """Producers may only open DJs they have already booked."""
        if cls.is_admin(user):
            return True
        producer_id = _producer_scope(user)
        if producer_id:
            return any(
                _field(event, "dj_id") == dj_id and _field(event, "producer_id") == producer_id
                for event in events
            )
        return False

    @classmethod
    def filter_djs(cls, djs: Iterable[Any], events: Iterable[Any], user: Any) -> List[Any]:
        if cls.is_admin(user):
            return list(djs)
        producer_id = _producer_scope(user)
        if producer_id:
            accessible = cls._accessible_dj_ids(events, producer_id)
            return [dj for dj in djs if _field(dj, "id") in accessible]
        return []

    @classmethod
    def filter_events(cls, events: Iterable[Any], user: Any) -> List[Any]:
        if cls.is_admin(user):
            return list(events)
        producer_id = _producer_scope(user)
        if producer_id:
            return cls._producer_events(events, producer_id)
        return []

    @classmethod
    def filter_contracts(cls, contracts: Iterable[Any], user: Any) -> List[Any]:
        if cls.is_admin(user):
            return list(contracts)
        producer_id = _producer_scope(user)
        if producer_id:
            return [c for c in contracts if _field(c, "producer_id") == producer_id]
        return []

    @classmethod
    def filter_media(
        cls,
        media: Iterable[Any],
        djs: Iterable[Any],
        events: Iterable[Any],
        user: Any,
    ) -> List[Any]:
        """Filter media down to items attached to the producer's DJs or events.

        ``djs`` is accepted for symmetry with the other filters; visibility
        is derived from the producer's events alone.
        """
        if cls.is_admin(user):
            return list(media)
        producer_id = _producer_scope(user)
        if producer_id:
            events = list(events)
            dj_ids = cls._accessible_dj_ids(events, producer_id)
            event_ids = {_field(e, "id") for e in cls._producer_events(events, producer_id)}
            return [
                item
                for item in media
                if (_field(item, "dj_id") and _field(item, "dj_id") in dj_ids)
                or (_field(item, "event_id") and _field(item, "event_id") in event_ids)
            ]
        return []
