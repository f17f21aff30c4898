from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from edu_resources.core.time import utcnow
from edu_resources.models.resource import Difficulty


class PluginOption(SQLModel, table=True):
    # 键值对存储，value 为 JSON 编码
    name: str = Field(primary_key=True, max_length=64)
    value: str
    updated_at: datetime = Field(default_factory=utcnow)


class PluginOptions(SQLModel):
    resources_per_page: int = Field(default=12, ge=1, le=100)
    enable_rest_api: bool = True
    default_difficulty: Difficulty = Difficulty.BEGINNER
    enable_download_count: bool = True


class PluginOptionsUpdate(SQLModel):
    resources_per_page: Optional[int] = None
    enable_rest_api: Optional[bool] = None
    default_difficulty: Optional[str] = None
    enable_download_count: Optional[bool] = None
