from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from stocks_api.config import Settings


def build_engine(settings: Settings) -> Engine:
    connect_args: Dict[str, Any] = {}
    if settings.backend == "sqlite":
        # One pool is shared by every worker thread.
        connect_args["check_same_thread"] = False
    elif settings.is_production:
        # Encrypted, certificate not verified.
        connect_args["sslmode"] = "require"

    return create_engine(
        settings.sqlalchemy_url,
        future=True,
        pool_pre_ping=settings.backend == "postgresql",
        connect_args=connect_args,
    )
