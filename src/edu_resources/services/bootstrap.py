from __future__ import annotations

import logging

from sqlmodel import Session, select

from edu_resources.core.config import get_settings
from edu_resources.core.security import hash_password
from edu_resources.models.user import User
from edu_resources.services.options import ensure_default_options

logger = logging.getLogger(__name__)


def ensure_admin_user(session: Session) -> None:
    """初始化系统管理员。

    通过环境变量提供：ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_USERNAME
    若未配置则跳过。
    """

    s = get_settings()
    email = (s.admin_email or "").strip().lower()
    password = s.admin_password or ""
    username = s.admin_username or "admin"

    if not email or not password:
        return

    exists = session.exec(select(User).where(User.email == email)).first()
    if exists:
        # 若已存在，确保其管理员标记为 True
        if not exists.is_admin or not exists.is_active:
            exists.is_admin = True
            exists.is_active = True
            session.add(exists)
            session.commit()
        return

    session.add(
        User(
            email=email,
            username=username,
            hashed_password=hash_password(password),
            is_admin=True,
        )
    )
    session.commit()
    logger.info("created bootstrap admin %s", email)


def bootstrap(session: Session) -> None:
    ensure_admin_user(session)
    ensure_default_options(session)
