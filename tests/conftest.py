"""Shared fixtures for the test suite."""

import pytest
from fastapi.testclient import TestClient

from stocks_api.config import DEFAULT_MAX_BODY_BYTES, Settings
from stocks_api.db.store import create_store
from stocks_api.main import create_app


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh SQLite file in tmp_path."""
    return Settings(
        host="127.0.0.1",
        port=3001,
        database_url="",
        database_path=str(tmp_path / "test.sqlite"),
        app_env="test",
        log_level="INFO",
        max_body_bytes=DEFAULT_MAX_BODY_BYTES,
    )


@pytest.fixture
def store(settings):
    s = create_store(settings)
    s.ensure_schema()
    yield s
    s.close()


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def sample_record():
    """Factory fixture: call with overrides to get a payload record."""
    def _make(**overrides):
        record = {
            "ticker": "PETR4",
            "date": 1700000000000,
            "preco_abertura": 36.5,
            "preco_fechamento": 37.1,
            "preco_maximo": 37.4,
            "preco_minimo": 36.2,
            "preco_medio": 36.9,
            "quantidade_negociada": 51234000,
            "quantidade_negocios": 40211,
            "volume_negociado": 1890000000.0,
            "fator_ajuste": 1.0,
            "preco_fechamento_ajustado": 37.1,
            "fator_ajuste_desdobramentos": 1.0,
            "preco_fechamento_ajustado_desdobramentos": 37.1,
        }
        record.update(overrides)
        return record
    return _make
