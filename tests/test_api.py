"""Tests for API functionality."""

import pytest
from fastapi.testclient import TestClient

from wikiedit.api.app import create_app, generate_token
from wikiedit.config import WikieditConfig
from wikiedit.runtime import build_runtime


@pytest.fixture
def runtime():
    """Create a runtime with default config."""
    return build_runtime(config=WikieditConfig())


@pytest.fixture
def client(runtime):
    return TestClient(create_app(runtime, token=None))


def test_health_endpoint(client):
    """Test /health endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"]


def test_auth_required(runtime):
    """Test that endpoints require authentication when token is set."""
    token = generate_token()
    app = create_app(runtime, token=token)
    client = TestClient(app)

    # Without token should get 401
    response = client.get("/health")
    assert response.status_code == 401

    response = client.get("/health", headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401

    # With token should work
    response = client.get("/health", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200


def test_convert_html(client):
    response = client.post("/convert/html", json={"wikitext": "'''Bold Text'''"})
    assert response.status_code == 200
    assert response.json() == {"html": "<p><strong>Bold Text</strong></p>"}


def test_convert_wikitext(client):
    response = client.post("/convert/wikitext", json={"html": "<ul><li>a</li><li>b</li></ul>"})
    assert response.status_code == 200
    assert response.json() == {"wikitext": "* a\n* b"}


def test_locate_template(client):
    response = client.post("/locate/template", json={"text": "x {{Foo|{{Bar}}}}", "name": "foo"})
    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "template"
    assert data["range"] == {"start": 2, "end": 17}
    assert data["lines"] == {"start": 1, "end": 1}


def test_locate_template_not_found(client):
    response = client.post("/locate/template", json={"text": "plain", "name": "Foo"})
    assert response.status_code == 404


def test_locate_template_requires_name(client):
    response = client.post("/locate/template", json={"text": "plain", "name": ""})
    assert response.status_code == 422


def test_locate_section(client):
    text = "== A ==\na\n=== A.1 ===\nb\n== B ==\nc\n"
    response = client.post("/locate/section", json={"text": text, "title": "A"})
    assert response.status_code == 200
    data = response.json()
    assert data["range"] == {"start": 0, "end": text.index("== B ==")}
    assert data["lines"] == {"start": 1, "end": 5}


def test_locate_section_regex(client):
    text = "== A ==\na\n== B ==\nc\n"
    response = client.post("/locate/section", json={"text": text, "title": "^== b ==", "regex": True})
    assert response.status_code == 200
    assert response.json()["range"]["start"] == text.index("== B ==")


def test_locate_section_bad_regex(client):
    response = client.post("/locate/section", json={"text": "x", "title": "(", "regex": True})
    assert response.status_code == 400


def test_locate_section_not_found(client):
    response = client.post("/locate/section", json={"text": "== A ==\n", "title": "Z"})
    assert response.status_code == 404


def test_references_parse(client):
    response = client.post("/references/parse", json={"text": "See {{Refcheck|user=Bob}}"})
    assert response.status_code == 200
    items = response.json()["items"]
    assert [i["type"] for i in items] == ["text", "Refcheck"]
    assert items[0]["content"] == "See"
    assert items[1]["params"] == {"user": "Bob"}
    assert all(i["id"] for i in items)


def test_references_serialize(client):
    items = [
        {"type": "text", "content": "See"},
        {"type": "Refurl", "params": {"url": "https://x.org", "title": ""}},
    ]
    response = client.post("/references/serialize", json={"items": items})
    assert response.status_code == 200
    assert response.json() == {"text": "See {{Refurl|url=https://x.org}}"}


def test_references_serialize_unknown_type(client):
    response = client.post("/references/serialize", json={"items": [{"type": "Cite"}]})
    assert response.status_code == 422
