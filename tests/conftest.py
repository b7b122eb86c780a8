from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the intake package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from intake.core import config as core_config  # noqa: E402
from intake.db import models  # noqa: E402
from intake.db import session as db_session  # noqa: E402

VALID_PAYLOAD = {
    "parentName": "Jane Doe",
    "parentEmail": "jane@example.com",
    "parentPhone": "07123 456789",
    "relationship": "Mother",
    "studentName": "Sam Doe",
    "studentEmail": "sam@example.com",
    "studentDob": "2012-05-04",
    "subjects": ["Maths"],
    "specificNeeds": "",
    "discoverySource": "Friend",
    "isCharity": False,
}


@pytest.fixture()
def valid_payload() -> dict:
    return {**VALID_PAYLOAD, "subjects": list(VALID_PAYLOAD["subjects"])}


@pytest.fixture()
def json_env(tmp_path, monkeypatch):
    """Point DATA_DIR at a temp folder with the JSON backend and reset cached settings."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_BACKEND", "json")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("STRICT_STORAGE", raising=False)
    monkeypatch.delenv("COURSE_BULK_CREATE", raising=False)
    core_config.get_settings.cache_clear()
    yield core_config.get_settings()
    core_config.get_settings.cache_clear()


@pytest.fixture()
def sql_env(tmp_path, monkeypatch):
    """Point the SQL backend at a temporary SQLite file and reset settings/engine caches."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_BACKEND", "sql")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield core_config.get_settings()

    try:
        models.Base.metadata.drop_all(bind=engine)
    except Exception:
        pass
    try:
        engine.dispose()
    except Exception:
        pass
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
    core_config.get_settings.cache_clear()


@pytest.fixture(params=["json", "sql"])
def any_env(request):
    """Run a test once per storage backend."""
    return request.getfixturevalue(f"{request.param}_env")


@pytest.fixture()
def client(json_env):
    from fastapi.testclient import TestClient

    from intake.app import create_app

    with TestClient(create_app(json_env)) as test_client:
        yield test_client


@pytest.fixture()
def admin_headers(client) -> dict:
    res = client.post("/admin/login", json={"email": "admin@acelab.com", "password": "admin123"})
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}
