from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from edu_resources.core.time import utcnow
from edu_resources.models.resource import Difficulty, ResourceMeta, ResourcePatch, ResourceType

logger = logging.getLogger(__name__)

# Largest LIMIT/OFFSET a signed 64-bit bind parameter can carry.
MAX_ROW_INDEX = 2**63 - 1


class SortField(str, Enum):
    CREATED_AT = "created_at"
    DOWNLOAD_COUNT = "download_count"
    DURATION_MINUTES = "duration_minutes"
    ID = "id"

    @classmethod
    def parse(cls, value: Any) -> "SortField":
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.CREATED_AT


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> "SortDirection":
        s = str(value or "").strip().lower()
        if s in {"asc", "ascending"}:
            return cls.ASC
        return cls.DESC


@dataclass(frozen=True)
class ResourceFilter:
    resource_type: Optional[ResourceType] = None
    difficulty: Optional[Difficulty] = None
    is_featured: Optional[bool] = None
    # Raw values are accepted here; the store resolves them against its allow-list.
    sort_field: Any = SortField.CREATED_AT
    sort_direction: Any = SortDirection.DESC
    page: int = 1
    page_size: int = 12

    @property
    def limit(self) -> int:
        return min(MAX_ROW_INDEX, max(1, int(self.page_size)))

    @property
    def offset(self) -> int:
        # pages past the end read as empty, never as a bind overflow
        return min(MAX_ROW_INDEX, (max(1, int(self.page)) - 1) * self.limit)


_SORT_COLUMNS = {
    SortField.CREATED_AT: ResourceMeta.created_at,
    SortField.DOWNLOAD_COUNT: ResourceMeta.download_count,
    SortField.DURATION_MINUTES: ResourceMeta.duration_minutes,
    SortField.ID: ResourceMeta.id,
}


class ResourceStore:
    """Data access for the resource metadata table.

    Writes never raise: they return False and roll back when the backend
    rejects them. Concurrency is left to the database: the counter is a single
    UPDATE and a racing insert trips the unique content_id index.
    """

    def __init__(self, session: Session):
        self.session = session

    def get(self, content_id: int) -> Optional[ResourceMeta]:
        return self.session.exec(select(ResourceMeta).where(ResourceMeta.content_id == content_id)).first()

    def upsert(self, content_id: int, patch: ResourcePatch) -> bool:
        """Update the supplied fields of the row for `content_id`, or insert it.

        Read-then-write: when two first-time upserts for the same content id
        race, the loser hits the unique content_id index and gets False; its
        fields are not applied and the caller may retry.
        """

        values = patch.to_columns()
        try:
            row = self.get(content_id)
            if row is None:
                row = ResourceMeta(content_id=content_id, **values)
            else:
                for key, value in values.items():
                    setattr(row, key, value)
                row.updated_at = utcnow()
            self.session.add(row)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("resource meta upsert failed content_id=%s", content_id)
            return False
        return True

    def delete(self, content_id: int) -> bool:
        try:
            row = self.get(content_id)
            if row is None:
                return False
            self.session.delete(row)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("resource meta delete failed content_id=%s", content_id)
            return False
        return True

    def increment_download_count(self, content_id: int) -> bool:
        stmt = (
            update(ResourceMeta)
            .where(ResourceMeta.content_id == content_id)
            .values(download_count=ResourceMeta.download_count + 1, updated_at=utcnow())
        )
        try:
            result = self.session.exec(stmt)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("download counter update failed content_id=%s", content_id)
            return False
        return bool(result.rowcount)

    def list(self, flt: ResourceFilter, *, within=None) -> list[ResourceMeta]:
        """Return one page of rows matching `flt`.

        `within` is an optional selectable of content ids that narrows the
        result (e.g. published items in a category); the store does not
        interpret it.
        """

        column = _SORT_COLUMNS[SortField.parse(getattr(flt.sort_field, "value", flt.sort_field))]
        direction = SortDirection.parse(getattr(flt.sort_direction, "value", flt.sort_direction))
        if direction is SortDirection.ASC:
            order = (column.asc(), ResourceMeta.id.asc())
        else:
            order = (column.desc(), ResourceMeta.id.desc())

        stmt = self._apply_filter(select(ResourceMeta), flt, within)
        stmt = stmt.order_by(*order).offset(flt.offset).limit(flt.limit)
        return list(self.session.exec(stmt))

    def count(self, flt: ResourceFilter, *, within=None) -> int:
        stmt = self._apply_filter(select(func.count()).select_from(ResourceMeta), flt, within)
        return int(self.session.exec(stmt).one())

    @staticmethod
    def _apply_filter(stmt, flt: ResourceFilter, within):
        resource_type = ResourceType.parse(flt.resource_type)
        if resource_type is not None:
            stmt = stmt.where(ResourceMeta.resource_type == resource_type.value)
        difficulty = Difficulty.parse(flt.difficulty)
        if difficulty is not None:
            stmt = stmt.where(ResourceMeta.difficulty == difficulty.value)
        if flt.is_featured is not None:
            stmt = stmt.where(ResourceMeta.is_featured == bool(flt.is_featured))
        if within is not None:
            stmt = stmt.where(ResourceMeta.content_id.in_(within))
        return stmt
