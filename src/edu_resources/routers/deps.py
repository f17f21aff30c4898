from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from edu_resources.core.security import decode_access_token
from edu_resources.db import get_session
from edu_resources.models.option import PluginOptions
from edu_resources.models.user import User
from edu_resources.services.options import load_options

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _active_user(session: Session, token: str) -> Optional[User]:
    user_id = decode_access_token(token)
    if not user_id:
        return None
    user = session.get(User, user_id)
    if not user or not user.is_active:
        return None
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> User:
    user = _active_user(session, token)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")
    return user


def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    session: Session = Depends(get_session),
) -> Optional[User]:
    # Public routes: an invalid token is treated as anonymous.
    if not token:
        return None
    return _active_user(session, token)


def get_current_admin_user(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator privileges required")
    return user


def get_options(session: Session = Depends(get_session)) -> PluginOptions:
    return load_options(session)


def require_rest_enabled(options: PluginOptions = Depends(get_options)) -> PluginOptions:
    # Disabled REST API behaves as if the routes were never registered.
    if not options.enable_rest_api:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return options
