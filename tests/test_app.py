"""Tests for the Flask proxy and audit endpoints."""

from unittest.mock import MagicMock, patch

import pytest

from app import app


def _response(payload, status=200):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 400
    resp.headers = {"Content-Type": "application/json"}
    resp.json.return_value = payload
    return resp


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with patch("config.settings.GOOGLE_KNOWLEDGE_GRAPH_API_KEY", "test-key"), \
         patch("config.settings.PROXY_TOKEN", ""):
        with app.test_client() as c:
            yield c


@pytest.fixture
def session():
    with patch("search.knowledge_graph.SESSION") as s:
        yield s


class TestProxy:
    def test_preflight(self, client):
        resp = client.options("/api/search")
        assert resp.status_code == 200
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "POST" in resp.headers["Access-Control-Allow-Methods"]
        assert "authorization" in resp.headers["Access-Control-Allow-Headers"]
        assert "content-type" in resp.headers["Access-Control-Allow-Headers"]

    @pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": 7}, ["Acme"]])
    def test_invalid_query(self, client, session, body):
        resp = client.post("/api/search", json=body)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Brand name is required"}
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        session.get.assert_not_called()

    def test_missing_key(self, client, session):
        with patch("config.settings.GOOGLE_KNOWLEDGE_GRAPH_API_KEY", ""):
            resp = client.post("/api/search", json={"query": "Acme"})
        assert resp.status_code == 500
        assert "GOOGLE_KNOWLEDGE_GRAPH_API_KEY" in resp.get_json()["error"]
        session.get.assert_not_called()

    def test_upstream_error(self, client, session):
        session.get.return_value = _response({}, status=503)
        resp = client.post("/api/search", json={"query": "Acme"})
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Knowledge Graph API error: 503"}

    def test_invisible(self, client, session):
        session.get.return_value = _response({"itemListElement": []})
        resp = client.post("/api/search", json={"query": "Acme"})
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ai-invisible"}

    def test_verified(self, client, session):
        session.get.return_value = _response({"itemListElement": [
            {"result": {"@type": "Thing", "name": "acme"}, "resultScore": 800},
            {"result": {"@type": ["Organization"], "name": "Acme Inc", "@id": "kg:/m/0a"}, "resultScore": 200},
        ]})
        resp = client.post("/api/search", json={"query": "Acme"})
        data = resp.get_json()
        assert data["status"] == "machine-verified"
        assert data["result"] == {"name": "Acme Inc", "entityId": "kg:/m/0a", "types": ["Organization"], "resultScore": 200}

    def test_unexpected_failure(self, client, session):
        session.get.side_effect = RuntimeError("kaboom")
        resp = client.post("/api/search", json={"query": "Acme"})
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "An unexpected error occurred"}


class TestBearerToken:
    def test_rejects_missing_token(self, client, session):
        with patch("config.settings.PROXY_TOKEN", "anon"):
            resp = client.post("/api/search", json={"query": "Acme"})
        assert resp.status_code == 401
        session.get.assert_not_called()

    def test_accepts_token(self, client, session):
        session.get.return_value = _response({"itemListElement": []})
        with patch("config.settings.PROXY_TOKEN", "anon"):
            resp = client.post("/api/search", json={"query": "Acme"}, headers={"Authorization": "Bearer anon"})
        assert resp.status_code == 200

    def test_preflight_needs_no_token(self, client):
        with patch("config.settings.PROXY_TOKEN", "anon"):
            assert client.options("/api/audit").status_code == 200


class TestAudit:
    def test_scored_view(self, client, session):
        session.get.return_value = _response({"itemListElement": [
            {"result": {"@type": ["LocalBusiness"], "name": "Acme"}, "resultScore": 300},
        ]})
        data = client.post("/api/audit", json={"query": "Acme"}).get_json()
        assert data["status"] == "machine-verified"
        assert data["displayScore"] == 30
        assert data["band"] == "low"

    def test_parse_error_is_friendly(self, client, session):
        resp = _response(None)
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        session.get.return_value = resp
        r = client.post("/api/audit", json={"query": "Acme"})
        assert r.status_code == 500
        assert r.get_json()["errorMessage"].endswith("Try a more specific name.")

    def test_invalid_query_view(self, client, session):
        r = client.post("/api/audit", json={"query": "  "})
        assert r.status_code == 400
        assert r.get_json()["status"] == "error"
        session.get.assert_not_called()


class TestIndex:
    def test_page_renders_client_config(self, client):
        with patch("config.settings.PROXY_BASE_URL", "https://proxy.example/"):
            resp = client.get("/")
        assert resp.status_code == 200
        assert b"https://proxy.example" in resp.data
        assert b"test-key" not in resp.data
