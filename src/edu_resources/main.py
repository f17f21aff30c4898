from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

from edu_resources.core.config import get_settings
from edu_resources.db import get_engine, init_db
from edu_resources.routers import (
    admin_resources,
    admin_settings,
    auth,
    resources,
    stats,
    system,
)
from edu_resources.services.bootstrap import bootstrap

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        init_db()
        # 初始化管理员（由 env ADMIN_* 控制）与默认选项
        with Session(get_engine()) as session:
            bootstrap(session)
        logger.info("%s started env=%s", settings.app_name, settings.env)
        yield

    app = FastAPI(
        title=settings.app_name,
        lifespan=lifespan,
    )

    # 开发环境：允许本机前端（筛选/分页小部件）跨域访问 API
    if settings.env == "dev":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                "http://127.0.0.1:5500",
                "http://localhost:5500",
                "http://127.0.0.1:8000",
                "http://localhost:8000",
            ],
            allow_credentials=False,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Total-Count", "X-Total-Pages"],
        )

    app.include_router(auth.router)
    app.include_router(system.router)

    # Public REST surface (gated by the enable_rest_api option per request)
    app.include_router(resources.router)

    # 管理端 API
    app.include_router(stats.router)
    app.include_router(admin_settings.router)
    app.include_router(admin_resources.router)

    return app


app = create_app()
