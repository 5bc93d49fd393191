#!/usr/bin/env python3
"""
Wait for the database, upgrade to the latest migration, seed default accounts and
settings, then exec uvicorn.
"""
import os
import sys

import wait_for_db  # noqa: F401

from alembic.config import Config
from alembic import command
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings

alembic_cfg = Config(os.path.join(os.path.dirname(os.path.abspath(__file__)), "alembic.ini"))
alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
print("[start] applying migrations")
command.upgrade(alembic_cfg, "head")

# fresh engine: the app engine may have been created before the tables existed
seed_engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)
seed_db = sessionmaker(autocommit=False, autoflush=False, bind=seed_engine)()
from app.seed import run as run_seed
run_seed(seed_db)
seed_engine.dispose()

port = os.getenv("PORT", "8000")
print(f"[start] starting uvicorn on :{port}")
os.execv(
    sys.executable,
    [sys.executable, "-m", "uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", port],
)
