from __future__ import annotations

from dataclasses import dataclass
from dotenv import load_dotenv
import os


load_dotenv()

DEFAULT_PORT = 3001
DEFAULT_HOST = "0.0.0.0"
DEFAULT_DATABASE_PATH = "./database.sqlite"
DEFAULT_MAX_BODY_BYTES = 100 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    database_url: str
    database_path: str
    app_env: str
    log_level: str
    max_body_bytes: int

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def backend(self) -> str:
        return "postgresql" if self.database_url else "sqlite"

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.database_path}"


def normalize_database_url(url: str) -> str:
    # Hosted providers still hand out the legacy scheme SQLAlchemy rejects.
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def get_settings() -> Settings:
    database_url = normalize_database_url(os.getenv("DATABASE_URL", "").strip())
    database_path = os.getenv("DATABASE_PATH") or DEFAULT_DATABASE_PATH

    port = int(os.getenv("PORT") or DEFAULT_PORT)
    host = os.getenv("HOST") or DEFAULT_HOST

    app_env = os.getenv("APP_ENV", "development")
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    max_body_bytes = int(os.getenv("MAX_BODY_BYTES") or DEFAULT_MAX_BODY_BYTES)

    return Settings(
        host=host,
        port=port,
        database_url=database_url,
        database_path=database_path,
        app_env=app_env,
        log_level=log_level,
        max_body_bytes=max_body_bytes,
    )
