from __future__ import annotations

import json

from conftest import SHA1, TREE_URLS
from treeurls.api import create_app
from treeurls.storage import MemoryStore


def test_greeting(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "Hello from tree-urls."


def test_greeting_ignores_storage_state(client, store):
    store.insert_tree_urls(SHA1, TREE_URLS)
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "Hello from tree-urls."


def test_get(client, store):
    store.insert_tree_urls(SHA1, TREE_URLS)
    r = client.get(f"/{SHA1}")
    assert r.status_code == 200
    assert r.text == TREE_URLS
    assert r.headers["content-type"].startswith("application/json")
    assert r.json() == json.loads(TREE_URLS)


def test_get_uppercase_sha1(client, store):
    upper = SHA1.upper()
    store.insert_tree_urls(upper, TREE_URLS)
    r = client.get(f"/{upper}")
    assert r.status_code == 200
    assert r.text == TREE_URLS


def test_get_unknown_sha1(client):
    r = client.get(f"/{SHA1}")
    assert r.status_code == 404
    assert r.text.endswith("\n")


def test_get_invalid_sha1(client):
    r = client.get("/60e3da2efd886074e28e44d48cc64")
    assert r.status_code == 400
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text.endswith("\n")
    assert r.text.count("\n") == 1


def test_put_insert(client, store):
    r = client.put(f"/{SHA1}", content=TREE_URLS)
    assert r.status_code == 200
    assert r.json() == {"tree_urls": TREE_URLS}
    assert store.records[SHA1] == TREE_URLS


def test_put_update(client, store):
    store.insert_tree_urls(SHA1, "[]")
    r = client.put(f"/{SHA1}", content=TREE_URLS)
    assert r.status_code == 200
    assert r.json()["tree_urls"] == TREE_URLS
    assert client.get(f"/{SHA1}").text == TREE_URLS


def test_post_insert(client):
    r = client.post(f"/{SHA1}", content=TREE_URLS)
    assert r.status_code == 200
    assert r.json() == {"tree_urls": TREE_URLS}
    g = client.get(f"/{SHA1}")
    assert g.status_code == 200
    assert g.text == TREE_URLS


def test_post_update(client, store):
    store.insert_tree_urls(SHA1, TREE_URLS)
    r = client.post(f"/{SHA1}", content="second", headers={"Content-Type": "text/plain"})
    assert r.status_code == 200
    assert r.json() == {"tree_urls": "second"}
    assert store.get_tree_urls(SHA1) == ["second"]


def test_put_rejects_non_utf8_body(client, store):
    r = client.put(f"/{SHA1}", content=b"\xff\xfe[]")
    assert r.status_code == 400
    assert r.text == "request body is not valid UTF-8\n"
    assert store.records == {}
    assert client.get(f"/{SHA1}").status_code == 404


def test_put_keeps_utf8_payload_verbatim(client):
    payload = '[{"label":"\u00e1rvore","url":"http://example.org/\u6811"}]'
    assert client.post(f"/{SHA1}", content=payload.encode("utf-8")).json() == {"tree_urls": payload}
    assert client.get(f"/{SHA1}").content == payload.encode("utf-8")


def test_put_invalid_sha1(client, store):
    r = client.put("/not-a-sha1", content=TREE_URLS)
    assert r.status_code == 400
    assert store.records == {}


def test_delete(client, store):
    store.insert_tree_urls(SHA1, TREE_URLS)
    r = client.delete(f"/{SHA1}")
    assert r.status_code == 200
    assert r.content == b""
    assert client.get(f"/{SHA1}").status_code == 404


def test_delete_unstored(client):
    r = client.delete(f"/{SHA1}")
    assert r.status_code == 200
    assert r.content == b""


def test_delete_invalid_sha1(client):
    r = client.delete("/xyz")
    assert r.status_code == 400


def test_unmatched_route(client):
    r = client.get(f"/{SHA1}/extra")
    assert r.status_code == 404
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text.endswith("\n")


def test_trailing_slash_is_unmatched(client, store):
    store.insert_tree_urls(SHA1, TREE_URLS)
    r = client.get(f"/{SHA1}/", follow_redirects=False)
    assert r.status_code == 404
    assert r.headers["content-type"].startswith("text/plain")
    assert r.text.endswith("\n")


def test_unsupported_method(client):
    r = client.patch(f"/{SHA1}", content="x")
    assert r.status_code == 404
    assert r.headers["content-type"].startswith("text/plain")


class BrokenStore(MemoryStore):
    def has_sha1(self, sha1):
        raise RuntimeError("connection refused by 10.0.0.1")

    def delete_tree_urls(self, sha1):
        raise RuntimeError("connection refused by 10.0.0.1")


def test_storage_failure_is_500_without_details():
    from fastapi.testclient import TestClient

    c = TestClient(create_app(BrokenStore()))
    for r in (
        c.get(f"/{SHA1}"),
        c.put(f"/{SHA1}", content=TREE_URLS),
        c.delete(f"/{SHA1}"),
    ):
        assert r.status_code == 500
        assert "10.0.0.1" not in r.text
        assert r.text.endswith("\n")


def test_store_closed_on_shutdown():
    from fastapi.testclient import TestClient

    closed = []

    class ClosingStore(MemoryStore):
        def close(self):
            closed.append(True)

    with TestClient(create_app(ClosingStore())) as c:
        assert c.get("/").status_code == 200
    assert closed == [True]


def test_get_existing_sha1_without_rows_serves_empty_array():
    from fastapi.testclient import TestClient

    class RowlessStore(MemoryStore):
        def has_sha1(self, sha1):
            return True

        def get_tree_urls(self, sha1):
            return []

    r = TestClient(create_app(RowlessStore())).get(f"/{SHA1}")
    assert r.status_code == 200
    assert r.text == "[]"
    assert r.json() == []
