from __future__ import annotations

import json
import logging

from sqlmodel import Session, select

from edu_resources.core.config import get_settings
from edu_resources.core.time import utcnow
from edu_resources.models.option import PluginOption, PluginOptions, PluginOptionsUpdate
from edu_resources.models.resource import Difficulty

logger = logging.getLogger(__name__)

PAGE_SIZE_MIN = 1
PAGE_SIZE_MAX = 100


def clamp_page_size(value: int) -> int:
    return max(PAGE_SIZE_MIN, min(PAGE_SIZE_MAX, int(value)))


def default_options() -> PluginOptions:
    s = get_settings()
    return PluginOptions(
        resources_per_page=clamp_page_size(s.resources_per_page),
        enable_rest_api=bool(s.enable_rest_api),
        default_difficulty=Difficulty.parse(s.default_difficulty) or Difficulty.BEGINNER,
        enable_download_count=bool(s.enable_download_count),
    )


def load_options(session: Session) -> PluginOptions:
    """Read the persisted options. Called per request, never cached."""

    values = default_options().model_dump()
    for row in session.exec(select(PluginOption)).all():
        if row.name not in values:
            continue
        try:
            values[row.name] = json.loads(row.value)
        except ValueError:
            logger.warning("ignoring malformed option %s=%r", row.name, row.value)

    return PluginOptions(
        resources_per_page=clamp_page_size(values["resources_per_page"]),
        enable_rest_api=bool(values["enable_rest_api"]),
        default_difficulty=Difficulty.parse(values["default_difficulty"]) or Difficulty.BEGINNER,
        enable_download_count=bool(values["enable_download_count"]),
    )


def _write(session: Session, name: str, value) -> None:
    row = session.get(PluginOption, name)
    encoded = json.dumps(value)
    if row is None:
        row = PluginOption(name=name, value=encoded)
    else:
        row.value = encoded
        row.updated_at = utcnow()
    session.add(row)


def save_options(session: Session, payload: PluginOptionsUpdate) -> PluginOptions:
    """Persist the supplied options, normalizing out-of-range values."""

    if payload.resources_per_page is not None:
        _write(session, "resources_per_page", clamp_page_size(payload.resources_per_page))
    if payload.enable_rest_api is not None:
        _write(session, "enable_rest_api", bool(payload.enable_rest_api))
    if payload.default_difficulty is not None:
        difficulty = Difficulty.parse(payload.default_difficulty) or Difficulty.BEGINNER
        _write(session, "default_difficulty", difficulty.value)
    if payload.enable_download_count is not None:
        _write(session, "enable_download_count", bool(payload.enable_download_count))
    session.commit()
    return load_options(session)


def ensure_default_options(session: Session) -> None:
    """Seed missing option rows from the environment defaults."""

    defaults = default_options()
    existing = set(session.exec(select(PluginOption.name)).all())
    missing = [name for name in PluginOptions.model_fields if name not in existing]
    if not missing:
        return
    dumped = defaults.model_dump(mode="json")
    for name in missing:
        _write(session, name, dumped[name])
    session.commit()
    logger.info("seeded default options: %s", ", ".join(missing))
