import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

SHA1 = "60e3da2efd886074e28e44d48cc642f84c25b140"
TREE_URLS = '[{"label":"tree_0","url":"http://example.org/view/tree/3727f35cc7125567492cab69850f6473"}]'


@pytest.fixture()
def store():
    from treeurls.storage import MemoryStore
    return MemoryStore()


@pytest.fixture()
def client(store):
    from treeurls.api import create_app
    from fastapi.testclient import TestClient
    return TestClient(create_app(store))


@pytest.fixture()
def sqlite_store(tmp_path):
    from treeurls.storage import SQLiteStore
    s = SQLiteStore(str(tmp_path / "tree_urls_test.db"))
    s.ensure_schema()
    return s


@pytest.fixture(autouse=True)
def _no_db_env(monkeypatch):
    # keep a developer's TREE_URLS_DB_URI out of config resolution tests
    monkeypatch.delenv("TREE_URLS_DB_URI", raising=False)
    monkeypatch.delenv("TREE_URLS_GIT_REF", raising=False)
