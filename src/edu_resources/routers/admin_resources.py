from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from edu_resources.db import get_session
from edu_resources.models.option import PluginOptions
from edu_resources.models.resource import ResourceCreate, ResourcePatch, ResourcePublic
from edu_resources.routers.deps import get_current_admin_user, get_options
from edu_resources.routers.resources import serialize_resource
from edu_resources.services import content_store
from edu_resources.services.resource_store import ResourceStore

router = APIRouter(prefix="/admin/resources", tags=["admin"])


@router.post("", response_model=ResourcePublic)
def create_resource(
    payload: ResourceCreate,
    session: Session = Depends(get_session),
    options: PluginOptions = Depends(get_options),
    _admin=Depends(get_current_admin_user),
):
    item = content_store.create_content_item(
        session,
        title=payload.title,
        slug=payload.slug,
        excerpt=payload.excerpt,
        body=payload.body,
        thumbnail_url=payload.thumbnail_url,
        status=payload.status,
        category_names=payload.category_names,
        tag_names=payload.tag_names,
    )

    patch = payload.meta
    if "difficulty" not in patch.model_fields_set:
        patch = ResourcePatch(**patch.model_dump(exclude_unset=True), difficulty=options.default_difficulty)

    store = ResourceStore(session)
    if not store.upsert(item.id, patch):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not save resource details")
    return serialize_resource(session, item, store.get(item.id))


@router.put("/{content_id}/meta", response_model=ResourcePublic)
def update_resource_meta(
    content_id: int,
    payload: ResourcePatch,
    session: Session = Depends(get_session),
    _admin=Depends(get_current_admin_user),
):
    item = content_store.get_content_item(session, content_id, published_only=False)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")

    store = ResourceStore(session)
    if not store.upsert(content_id, payload):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not save resource details")
    return serialize_resource(session, item, store.get(content_id))


@router.delete("/{content_id}")
def delete_resource(
    content_id: int,
    session: Session = Depends(get_session),
    _admin=Depends(get_current_admin_user),
):
    if not content_store.delete_content_item(session, content_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")
    return {"deleted": True}
