from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from sqlmodel import Session

from edu_resources.models.content import TAXONOMY_CATEGORY, TAXONOMY_TAG, ContentItem
from edu_resources.models.option import PluginOptions
from edu_resources.models.resource import Difficulty, ResourceMeta, ResourceType
from edu_resources.services import content_store
from edu_resources.services.options import clamp_page_size
from edu_resources.services.resource_store import ResourceFilter, ResourceStore, SortDirection, SortField
from edu_resources.services.taxonomy import resolve_term_filter

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _as_int(value: Any, default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    s = str(value or "").strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return None


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(max(0, int(total)) / max(1, int(page_size)))


@dataclass(frozen=True)
class ResourceQuery:
    filter: ResourceFilter
    category: Optional[str] = None
    tag: Optional[str] = None


@dataclass
class ResourcePage:
    items: list[tuple[ContentItem, ResourceMeta]] = field(default_factory=list)
    total: int = 0
    total_pages: int = 0
    page: int = 1
    page_size: int = 12


def normalize_query(params: Mapping[str, Any], options: PluginOptions) -> ResourceQuery:
    """Turn untrusted request parameters into a ResourceQuery.

    Nothing here fails: unknown enum values mean "no filter", unparsable
    numbers fall back to defaults and page size is clamped to [1, 100].
    """

    page_size = clamp_page_size(_as_int(params.get("per_page"), options.resources_per_page))
    page = max(1, _as_int(params.get("page"), 1))

    flt = ResourceFilter(
        resource_type=ResourceType.parse(params.get("resource_type")),
        difficulty=Difficulty.parse(params.get("difficulty_level")),
        is_featured=_as_bool(params.get("featured")),
        sort_field=SortField.parse(params.get("orderby")),
        sort_direction=SortDirection.parse(params.get("order")),
        page=page,
        page_size=page_size,
    )
    return ResourceQuery(
        filter=flt,
        category=(str(params.get("category") or "").strip() or None),
        tag=(str(params.get("tag") or "").strip() or None),
    )


def browse(session: Session, query: ResourceQuery) -> ResourcePage:
    """Run a normalized query: published content only, taxonomy filters applied."""

    term_filters = [
        resolve_term_filter(session, TAXONOMY_CATEGORY, query.category),
        resolve_term_filter(session, TAXONOMY_TAG, query.tag),
    ]
    scope = content_store.published_ids(term_filters)

    store = ResourceStore(session)
    total = store.count(query.filter, within=scope)
    rows = store.list(query.filter, within=scope)

    content = content_store.get_content_items(session, (r.content_id for r in rows))
    items = [(content[r.content_id], r) for r in rows if r.content_id in content]

    return ResourcePage(
        items=items,
        total=total,
        total_pages=total_pages(total, query.filter.page_size),
        page=query.filter.page,
        page_size=query.filter.page_size,
    )
