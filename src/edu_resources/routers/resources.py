from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlmodel import Session

from edu_resources.db import get_session
from edu_resources.models.content import ContentItem
from edu_resources.models.events import ActionType
from edu_resources.models.option import PluginOptions
from edu_resources.models.resource import ResourceMeta, ResourcePublic
from edu_resources.routers.deps import get_optional_user, require_rest_enabled
from edu_resources.services import content_store
from edu_resources.services.event_log import EventLog
from edu_resources.services.query_facade import browse, normalize_query
from edu_resources.services.resource_store import ResourceStore
from edu_resources.services.taxonomy import terms_for_content

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resources", tags=["resources"])


def serialize_resource(session: Session, item: ContentItem, meta: Optional[ResourceMeta]) -> ResourcePublic:
    terms = terms_for_content(session, item.id)
    return ResourcePublic(
        id=item.id,
        title=item.title,
        excerpt=item.excerpt,
        permalink=content_store.permalink(item),
        thumbnail=item.thumbnail_url,
        date=item.created_at,
        modified=item.updated_at,
        resource_url=(meta.url or None) if meta else None,
        resource_type=(meta.resource_type or None) if meta else None,
        difficulty_level=meta.difficulty if meta else None,
        duration_minutes=(meta.duration_minutes or None) if meta else None,
        download_count=meta.download_count if meta else 0,
        is_featured=bool(meta.is_featured) if meta else False,
        categories=[{"id": t.id, "name": t.name, "slug": t.slug} for t in terms["category"]],
        tags=[{"id": t.id, "name": t.name, "slug": t.slug} for t in terms["tag"]],
    )


def _client_ip(request: Request) -> Optional[str]:
    client = request.client
    return client.host if client else None


@router.get("", response_model=list[ResourcePublic])
def list_resources(
    response: Response,
    page: str | None = None,
    per_page: str | None = None,
    resource_type: str | None = None,
    difficulty_level: str | None = None,
    featured: str | None = None,
    category: str | None = None,
    tag: str | None = None,
    orderby: str | None = None,
    order: str | None = None,
    session: Session = Depends(get_session),
    options: PluginOptions = Depends(require_rest_enabled),
):
    # Parameters stay as raw strings; the façade normalizes them instead of rejecting with 422.
    query = normalize_query(
        {
            "page": page,
            "per_page": per_page,
            "resource_type": resource_type,
            "difficulty_level": difficulty_level,
            "featured": featured,
            "category": category,
            "tag": tag,
            "orderby": orderby,
            "order": order,
        },
        options,
    )
    result = browse(session, query)

    response.headers["X-Total-Count"] = str(result.total)
    response.headers["X-Total-Pages"] = str(result.total_pages)
    return [serialize_resource(session, item, meta) for item, meta in result.items]


@router.get("/{content_id}", response_model=ResourcePublic)
def get_resource(
    content_id: int,
    request: Request,
    session: Session = Depends(get_session),
    _options: PluginOptions = Depends(require_rest_enabled),
    user=Depends(get_optional_user),
):
    item = content_store.get_content_item(session, content_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")

    meta = ResourceStore(session).get(content_id)
    out = serialize_resource(session, item, meta)

    EventLog(session).record(content_id, ActionType.VIEW, user.id if user else None, _client_ip(request))
    return out


@router.post("/{content_id}/download")
def record_download(
    content_id: int,
    request: Request,
    session: Session = Depends(get_session),
    options: PluginOptions = Depends(require_rest_enabled),
    user=Depends(get_optional_user),
):
    if not options.enable_download_count:
        return {"recorded": False}

    item = content_store.get_content_item(session, content_id, published_only=False)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")

    recorded = ResourceStore(session).increment_download_count(content_id)
    if recorded:
        EventLog(session).record(content_id, ActionType.DOWNLOAD, user.id if user else None, _client_ip(request))
    else:
        logger.info("download not counted, no resource meta for content_id=%s", content_id)
    return {"recorded": recorded}
