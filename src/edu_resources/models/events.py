from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from sqlmodel import Field, SQLModel

from edu_resources.core.time import utcnow


class ActionType(str, Enum):
    VIEW = "view"
    DOWNLOAD = "download"

    @classmethod
    def parse(cls, value: Any) -> Optional["ActionType"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return None


class ResourceEvent(SQLModel, table=True):
    """Append-only view/download log."""

    id: Optional[int] = Field(default=None, primary_key=True)
    # Content item id. No FK: events outlive deleted content.
    resource_id: int = Field(index=True)
    user_id: Optional[str] = Field(default=None, index=True)

    # view/download
    action_type: str = Field(max_length=20, index=True)
    action_date: datetime = Field(default_factory=utcnow, index=True)

    # Anonymized address, "" when the raw value was not an IP.
    user_ip: str = Field(default="", max_length=45)
