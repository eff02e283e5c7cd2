import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

T0 = 1_700_000_000


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "recall_test.db"
    # Point the app to this temp DB; cheap hashing keeps signup fast
    os.environ["RECALL_DB_PATH"] = str(path)
    os.environ["RECALL_BCRYPT_ROUNDS"] = "4"
    from recall.db import init_db
    init_db(str(path))
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    from recall.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("RECALL_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    tables = ["events", "resources", "projects", "areas", "sessions", "users", "operation_log"]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield


def _signup(email: str, name: str, password: str = "secret-pw"):
    from recall.services.identity_svc import signup
    res = signup(email, name, password)
    return {"id": res["user"]["id"], "token": res["token"], "email": email, "password": password}


@pytest.fixture()
def alice(tmp_db_path):
    return _signup("alice@example.com", "Alice")


@pytest.fixture()
def bob(tmp_db_path):
    return _signup("bob@example.com", "Bob")


@pytest.fixture()
def alice_tree(alice):
    """One area > project for alice, ids only."""
    from recall.services.area_svc import create_area
    from recall.services.project_svc import create_project
    area = create_area(alice["id"], {"name": "Work"})
    project = create_project(alice["id"], {"area_id": area["id"], "title": "Launch", "status": "Inbox"})
    return {"area_id": area["id"], "project_id": project["id"]}
