from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.engine import make_url
from sqlmodel import Session

from edu_resources.core.config import get_settings
from edu_resources.db import get_session
from edu_resources.services.options import load_options

router = APIRouter(prefix="/system", tags=["system"])


VERSION = "1.0.0"


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/info")
def info(session: Session = Depends(get_session)):
    s = get_settings()
    options = load_options(session)
    # 只暴露后端类型与开关，不返回连接串/密钥
    return {
        "version": VERSION,
        "app_name": s.app_name,
        "env": s.env,
        "database_backend": make_url(s.database_url).get_backend_name(),
        "site_url": s.site_url,
        "rest_api_enabled": options.enable_rest_api,
        "download_tracking_enabled": options.enable_download_count,
    }
