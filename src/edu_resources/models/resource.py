from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from edu_resources.core.time import utcnow

URL_MAX_LENGTH = 2083


class ResourceType(str, Enum):
    ARTICLE = "article"
    VIDEO = "video"
    PODCAST = "podcast"
    PDF = "pdf"
    COURSE = "course"
    BOOK = "book"
    INFOGRAPHIC = "infographic"
    TOOL = "tool"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> Optional["ResourceType"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return None


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def parse(cls, value: Any) -> Optional["Difficulty"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return None


class ResourceMeta(SQLModel, table=True):
    """Resource metadata attached 1:1 to a content item."""

    id: Optional[int] = Field(default=None, primary_key=True)
    # 1:1 with ContentItem.id; cascade on content delete is done by the caller.
    content_id: int = Field(index=True, unique=True)

    url: str = Field(default="", max_length=URL_MAX_LENGTH)
    # ResourceType value, or "" when unset
    resource_type: str = Field(default="", max_length=50, index=True)
    difficulty: str = Field(default=Difficulty.BEGINNER.value, max_length=20, index=True)
    duration_minutes: int = Field(default=0, ge=0)
    download_count: int = Field(default=0, ge=0)
    is_featured: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)


class ResourcePatch(SQLModel):
    """Partial update of a ResourceMeta row.

    Only fields that were explicitly supplied are written. Values are normalized
    at parse time: an unknown type clears the type, an unknown difficulty falls
    back to beginner, negative or garbage durations become 0.
    """

    url: Optional[str] = None
    resource_type: Optional[ResourceType] = None
    difficulty: Optional[Difficulty] = None
    duration_minutes: Optional[int] = None
    is_featured: Optional[bool] = None

    @field_validator("url", mode="before")
    @classmethod
    def _trim_url(cls, v: Any) -> str:
        return str(v or "").strip()[:URL_MAX_LENGTH]

    @field_validator("resource_type", mode="before")
    @classmethod
    def _parse_type(cls, v: Any) -> Optional[ResourceType]:
        return ResourceType.parse(v)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _parse_difficulty(cls, v: Any) -> Difficulty:
        return Difficulty.parse(v) or Difficulty.BEGINNER

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _parse_duration(cls, v: Any) -> int:
        try:
            return max(0, int(v))
        except (TypeError, ValueError):
            return 0

    @field_validator("is_featured", mode="before")
    @classmethod
    def _parse_featured(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in {"1", "true", "yes", "on"}
        return bool(v)

    def to_columns(self) -> dict[str, Any]:
        """Map the supplied fields onto ResourceMeta column values."""

        values = self.model_dump(exclude_unset=True)
        out: dict[str, Any] = {}
        for key, value in values.items():
            if key == "resource_type":
                out[key] = value.value if value is not None else ""
            elif key == "difficulty":
                out[key] = (value or Difficulty.BEGINNER).value
            elif key == "url":
                out[key] = value or ""
            elif key == "duration_minutes":
                out[key] = value or 0
            elif key == "is_featured":
                out[key] = bool(value)
        return out


class ResourceCreate(SQLModel):
    title: str
    slug: Optional[str] = None
    excerpt: str = ""
    body: str = ""
    thumbnail_url: Optional[str] = None
    # publish/draft
    status: str = "publish"
    category_names: list[str] = []
    tag_names: list[str] = []
    meta: ResourcePatch = Field(default_factory=ResourcePatch)


class ResourcePublic(SQLModel):
    id: int
    title: str
    excerpt: str
    permalink: str
    thumbnail: Optional[str] = None
    date: datetime
    modified: datetime
    resource_url: Optional[str] = None
    resource_type: Optional[str] = None
    difficulty_level: Optional[str] = None
    duration_minutes: Optional[int] = None
    download_count: int = 0
    is_featured: bool = False
    categories: list[dict] = []
    tags: list[dict] = []
