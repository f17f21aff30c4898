from __future__ import annotations

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Allow keeping secrets in .env.local (not committed) while .env can stay non-sensitive.
    # NOTE: tests set PYTEST_RUNNING=1 to avoid reading local .env/.env.local.
    model_config = SettingsConfigDict(
        env_file=None if os.environ.get("PYTEST_RUNNING") else (".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = "dev"
    app_name: str = "Education Resources Manager API"
    database_url: str = "sqlite:///./app.db"

    # Used to build resource permalinks.
    site_url: str = "http://localhost:8000"

    jwt_secret: str = "change-me-in-prod"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 120

    admin_email: str = ""
    admin_password: str = ""
    admin_username: str = "admin"

    # Seed values for the persisted options table (only used when a row is missing).
    resources_per_page: int = 12
    enable_rest_api: bool = True
    default_difficulty: str = "beginner"
    enable_download_count: bool = True


def _validate_settings(s: Settings) -> None:
    # Security: avoid shipping with the default secret outside dev.
    if (not s.jwt_secret) or (s.jwt_secret.strip() == "change-me-in-prod"):
        if str(s.env).lower() != "dev":
            raise RuntimeError("JWT_SECRET is not set or still uses the default value")

    if not 1 <= int(s.resources_per_page) <= 100:
        raise RuntimeError("RESOURCES_PER_PAGE must be between 1 and 100")


def get_settings() -> Settings:
    # 不缓存：测试/不同环境切换 env 时在调用前设置环境变量即可。
    # python-dotenv only injects non-empty values so placeholders like `SITE_URL=`
    # in .env do not shadow defaults. Skipped under pytest.
    if not os.environ.get("PYTEST_RUNNING"):
        from dotenv import dotenv_values

        def _inject_non_empty(path: str, *, allow_override_empty: bool) -> None:
            vals = dotenv_values(path)
            for k, v in (vals or {}).items():
                if k is None or v is None:
                    continue
                vv = str(v)
                if not vv.strip():
                    continue
                cur = os.environ.get(k)
                if cur is None:
                    os.environ[k] = vv
                elif allow_override_empty and str(cur).strip() == "":
                    os.environ[k] = vv

        # .env: only fill missing keys
        _inject_non_empty(".env", allow_override_empty=False)
        # .env.local: fill missing keys and replace empty placeholders
        _inject_non_empty(".env.local", allow_override_empty=True)

    settings = Settings()

    # Postgres driver selection: normalize plain postgres URLs to psycopg3.
    db_url = str(settings.database_url or "").strip()
    if db_url and ("+" not in db_url.split("://", 1)[0]):
        if db_url.startswith("postgresql://"):
            settings.database_url = "postgresql+psycopg://" + db_url[len("postgresql://") :]
        elif db_url.startswith("postgres://"):
            settings.database_url = "postgresql+psycopg://" + db_url[len("postgres://") :]

    settings.site_url = settings.site_url.rstrip("/")

    _validate_settings(settings)
    return settings
