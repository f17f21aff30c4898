from __future__ import annotations

import os
import sys
from pathlib import Path

# Serverless runtimes import this module from the project root;
# the package lives under ./src.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# 部署环境默认 prod（必须配置 JWT_SECRET）
os.environ.setdefault("ENV", os.environ.get("VERCEL_ENV") or "prod")

from edu_resources.main import create_app  # noqa: E402

app = create_app()
