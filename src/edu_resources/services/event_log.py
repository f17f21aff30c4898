from __future__ import annotations

import ipaddress
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from edu_resources.core.time import utcnow
from edu_resources.models.events import ActionType, ResourceEvent

logger = logging.getLogger(__name__)

# Leading bits kept per address family.
_IPV4_PREFIX = 24
_IPV6_PREFIX = 48


def anonymize_ip(raw_ip: Any) -> str:
    """Zero the host part of an address before it is stored.

    IPv4 keeps the first three octets, IPv6 keeps the leading 48 bits.
    Anything that does not parse as an address becomes "".
    """

    s = str(raw_ip or "").strip()
    if not s:
        return ""
    try:
        addr = ipaddress.ip_address(s)
    except ValueError:
        return ""
    keep = _IPV4_PREFIX if addr.version == 4 else _IPV6_PREFIX
    drop = addr.max_prefixlen - keep
    return str(type(addr)((int(addr) >> drop) << drop))


def _normalize_actor(actor_id: Any) -> Optional[str]:
    # 0 / "" / None 视为匿名
    if actor_id is None:
        return None
    s = str(actor_id).strip()
    if not s or s == "0":
        return None
    return s


class EventLog:
    def __init__(self, session: Session):
        self.session = session

    def record(
        self,
        resource_id: int,
        action_type: Any,
        actor_id: Any = None,
        raw_ip: Any = None,
    ) -> Optional[int]:
        """Append a view/download event. Returns the new id, or None.

        Callers treat this as fire-and-forget: unknown action types and
        backend failures are logged and reported as None, never raised.
        """

        action = ActionType.parse(action_type)
        if action is None:
            logger.warning("rejected event with action_type=%r resource_id=%s", action_type, resource_id)
            return None

        ev = ResourceEvent(
            resource_id=int(resource_id),
            user_id=_normalize_actor(actor_id),
            action_type=action.value,
            action_date=utcnow(),
            user_ip=anonymize_ip(raw_ip),
        )
        try:
            self.session.add(ev)
            self.session.commit()
            self.session.refresh(ev)
        except SQLAlchemyError:
            self.session.rollback()
            logger.warning("failed to record %s event resource_id=%s", action.value, resource_id, exc_info=True)
            return None
        return ev.id
