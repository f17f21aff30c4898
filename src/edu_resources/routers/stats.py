from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from edu_resources.db import get_session
from edu_resources.routers.deps import get_current_admin_user
from edu_resources.services.aggregator import Aggregator

router = APIRouter(prefix="/stats", tags=["admin"])


@router.get("")
def get_stats(
    *,
    session: Session = Depends(get_session),
    _admin=Depends(get_current_admin_user),
    top: int = Query(5, ge=1, le=50),
    months: int = Query(6, ge=1, le=36),
):
    return Aggregator(session).dashboard(top_limit=top, months=months)
