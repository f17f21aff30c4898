import os
import sys
from pathlib import Path

import pytest
from sqlmodel import Session, create_engine

# 让 tests 能直接 import src 下的包
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

# 测试用单独数据库文件，避免污染 app.db
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

# 标记 pytest 运行中（用于配置加载逻辑避免 .env 覆盖）
os.environ["PYTEST_RUNNING"] = "1"


@pytest.fixture
def session(tmp_path):
    from edu_resources.db import init_db

    engine = create_engine(f"sqlite:///{(tmp_path / 'unit.db').as_posix()}")
    init_db(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()
