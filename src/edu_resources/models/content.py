from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from edu_resources.core.time import utcnow

STATUS_PUBLISH = "publish"
STATUS_DRAFT = "draft"

TAXONOMY_CATEGORY = "category"
TAXONOMY_TAG = "tag"


class ContentItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    slug: str = Field(index=True, unique=True)
    excerpt: str = ""
    body: str = ""
    thumbnail_url: Optional[str] = None

    # publish/draft
    status: str = Field(default=STATUS_PUBLISH, index=True)

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)


class Term(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("taxonomy", "slug", name="uq_term_taxonomy_slug"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    # category/tag
    taxonomy: str = Field(index=True)
    name: str
    slug: str = Field(index=True)


class ContentTermLink(SQLModel, table=True):
    # M:N 关联表
    content_id: int = Field(primary_key=True, foreign_key="contentitem.id")
    term_id: int = Field(primary_key=True, foreign_key="term.id")
