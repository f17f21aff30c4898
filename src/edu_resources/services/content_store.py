from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlmodel import Session, select

from edu_resources.core.config import get_settings
from edu_resources.models.content import (
    STATUS_DRAFT,
    STATUS_PUBLISH,
    TAXONOMY_CATEGORY,
    TAXONOMY_TAG,
    ContentItem,
    ContentTermLink,
)
from edu_resources.services.resource_store import ResourceStore
from edu_resources.services.taxonomy import TermFilter, get_or_create_term, slugify

logger = logging.getLogger(__name__)


def permalink(item: ContentItem) -> str:
    return f"{get_settings().site_url}/education-resources/{item.slug}"


def _unique_slug(session: Session, base: str) -> str:
    base = base or "resource"
    slug = base
    n = 2
    while session.exec(select(ContentItem.id).where(ContentItem.slug == slug)).first() is not None:
        slug = f"{base}-{n}"
        n += 1
    return slug


def create_content_item(
    session: Session,
    *,
    title: str,
    slug: Optional[str] = None,
    excerpt: str = "",
    body: str = "",
    thumbnail_url: Optional[str] = None,
    status: str = STATUS_PUBLISH,
    category_names: Iterable[str] = (),
    tag_names: Iterable[str] = (),
) -> ContentItem:
    if status not in (STATUS_PUBLISH, STATUS_DRAFT):
        status = STATUS_DRAFT

    item = ContentItem(
        title=title,
        slug=_unique_slug(session, slugify(slug or title)),
        excerpt=excerpt,
        body=body,
        thumbnail_url=thumbnail_url,
        status=status,
    )
    session.add(item)
    session.commit()
    session.refresh(item)

    # 绑定分类与标签
    for taxonomy, names in ((TAXONOMY_CATEGORY, category_names), (TAXONOMY_TAG, tag_names)):
        for name in names or ():
            if not slugify(name):
                continue
            term = get_or_create_term(session, taxonomy, name)
            if session.get(ContentTermLink, (item.id, term.id)) is None:
                session.add(ContentTermLink(content_id=item.id, term_id=term.id))
    session.commit()
    session.refresh(item)
    return item


def get_content_item(session: Session, content_id: int, *, published_only: bool = True) -> Optional[ContentItem]:
    item = session.get(ContentItem, content_id)
    if item is None:
        return None
    if published_only and item.status != STATUS_PUBLISH:
        return None
    return item


def published_ids(term_filters: Iterable[Optional[TermFilter]] = ()):
    """Selectable of published content ids, narrowed by every given term filter."""

    stmt = select(ContentItem.id).where(ContentItem.status == STATUS_PUBLISH)
    for tf in term_filters:
        if tf is not None:
            stmt = stmt.where(ContentItem.id.in_(tf.content_ids()))
    return stmt


def get_content_items(session: Session, ids: Iterable[int]) -> dict[int, ContentItem]:
    ids = list(ids)
    if not ids:
        return {}
    rows = session.exec(select(ContentItem).where(ContentItem.id.in_(ids))).all()
    return {row.id: row for row in rows}


def delete_content_item(session: Session, content_id: int) -> bool:
    """Delete a content item and run the cleanup hook for its resource meta.

    Events are kept; analytics tolerate the dangling reference.
    """

    item = session.get(ContentItem, content_id)
    if item is None:
        return False

    ResourceStore(session).delete(content_id)

    links = session.exec(select(ContentTermLink).where(ContentTermLink.content_id == content_id)).all()
    for link in links:
        session.delete(link)
    session.commit()

    session.delete(item)
    session.commit()
    logger.info("deleted content item id=%s", content_id)
    return True
