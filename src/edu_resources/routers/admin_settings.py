from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlmodel import Session

from edu_resources.db import get_session
from edu_resources.models.option import PluginOptions, PluginOptionsUpdate
from edu_resources.routers.deps import get_current_admin_user
from edu_resources.services.options import load_options, save_options

router = APIRouter(prefix="/admin/settings", tags=["admin"])


@router.get("", response_model=PluginOptions)
def read_settings(
    session: Session = Depends(get_session),
    _admin=Depends(get_current_admin_user),
):
    return load_options(session)


@router.put("", response_model=PluginOptions)
def update_settings(
    payload: PluginOptionsUpdate,
    session: Session = Depends(get_session),
    _admin=Depends(get_current_admin_user),
):
    return save_options(session, payload)
