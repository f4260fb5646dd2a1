from fastapi.testclient import TestClient

API = "/_/api/v1"


def create_link(client: TestClient, key: str, destination: str, domain: str = "go", default=None):
    payload = {"domain": domain, "key": key, "destination": destination}
    if default is not None:
        payload["default_destination"] = default
    return client.post(f"{API}/links", json=payload)


class TestRedirects:
    """Test the public redirect endpoint"""

    def test_redirect_exact(self, client: TestClient):
        """Test literal key redirection"""
        create_link(client, "meet", "https://meet.example.com/room")

        response = client.get("/meet", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://meet.example.com/room"

    def test_redirect_template(self, client: TestClient):
        create_link(client, "docs/{section}", "https://wiki.example.com/{section}", default="https://wiki.example.com/")

        response = client.get("/docs/api/", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://wiki.example.com/api"

        response = client.get("/docs", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://wiki.example.com/"

    def test_redirect_nonexistent(self, client: TestClient):
        """Test a slug nobody registered"""
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404

        detail = response.json()["detail"]
        assert detail["domain"] == "go"
        assert detail["slug"] == "nonexistent"
        assert detail["create_url"] == f"{API}/links/go/nonexistent"

    def test_root_redirects_to_index(self, client: TestClient):
        response = client.get("/", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/_/"

    def test_admin_prefix_is_not_resolved(self, client: TestClient):
        response = client.get("/_/unknown", follow_redirects=False)
        assert response.status_code == 404

        misses = client.get(f"{API}/stats/misses").json()
        assert misses == []

    def test_host_selects_domain(self, client: TestClient):
        client.post(f"{API}/domains", json={"name": "docs"})
        create_link(client, "home", "https://go.example.com")
        create_link(client, "home", "https://docs.example.com", domain="docs")

        response = client.get("/home", headers={"host": "docs:8787"}, follow_redirects=False)
        assert response.headers["location"] == "https://docs.example.com"

        response = client.get("/home", headers={"host": "Docs.corp.example.com"}, follow_redirects=False)
        assert response.headers["location"] == "https://docs.example.com"

        response = client.get("/home", headers={"host": "go"}, follow_redirects=False)
        assert response.headers["location"] == "https://go.example.com"

    def test_unknown_host_uses_default_domain(self, client: TestClient):
        create_link(client, "home", "https://go.example.com")

        response = client.get("/home", headers={"host": "elsewhere.test"}, follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://go.example.com"

    def test_docs_is_a_normal_slug(self, client: TestClient):
        create_link(client, "docs", "https://docs.example.com")

        response = client.get("/docs", follow_redirects=False)
        assert response.status_code == 302


class TestAdminLinks:
    """Test the link management API"""

    def test_create_and_update_link(self, client: TestClient):
        response = create_link(client, "meet", "https://meet.example.com/a")
        assert response.status_code == 201
        data = response.json()
        assert data["key"] == "meet"
        assert data["domain"] == "go"
        assert data["is_template"] is False
        assert data["root"] is None

        response = create_link(client, "meet", "https://meet.example.com/b")
        assert response.status_code == 200
        assert response.json()["id"] == data["id"]
        assert response.json()["destination"] == "https://meet.example.com/b"

    def test_template_link_fields(self, client: TestClient):
        data = create_link(client, "/docs/{section}/", "https://wiki/{section}").json()
        assert data["key"] == "docs/{section}"
        assert data["is_template"] is True
        assert data["root"] == "docs"

    def test_get_link(self, client: TestClient):
        create_link(client, "team/{name}", "https://people/{name}")

        response = client.get(f"{API}/links/go/team/{{name}}")
        assert response.status_code == 200
        assert response.json()["destination"] == "https://people/{name}"

        response = client.get(f"{API}/links/go/missing")
        assert response.status_code == 404

    def test_list_links(self, client: TestClient):
        client.post(f"{API}/domains", json={"name": "docs"})
        create_link(client, "b", "https://b.example.com")
        create_link(client, "a", "https://a.example.com")
        create_link(client, "c", "https://c.example.com", domain="docs")

        everything = client.get(f"{API}/links").json()
        assert [(link["domain"], link["key"]) for link in everything] == [("docs", "c"), ("go", "a"), ("go", "b")]

        only_go = client.get(f"{API}/links", params={"domain": "go"}).json()
        assert [link["key"] for link in only_go] == ["a", "b"]

    def test_invalid_destination(self, client: TestClient):
        """Test creating a link with a non-http URL"""
        response = create_link(client, "files", "ftp://files.example.com")
        assert response.status_code == 422
        assert "http" in response.json()["detail"]

    def test_invalid_key(self, client: TestClient):
        response = create_link(client, "two words", "https://example.com")
        assert response.status_code == 422

        response = create_link(client, "_/sneaky", "https://example.com")
        assert response.status_code == 422

    def test_unknown_domain(self, client: TestClient):
        response = create_link(client, "meet", "https://example.com", domain="nowhere")
        assert response.status_code == 422

    def test_delete_link(self, client: TestClient):
        """Test deleting a link (hard delete)"""
        create_link(client, "meet", "https://meet.example.com")

        response = client.delete(f"{API}/links/go/meet")
        assert response.status_code == 204

        response = client.get("/meet", follow_redirects=False)
        assert response.status_code == 404

        response = client.delete(f"{API}/links/go/meet")
        assert response.status_code == 404


class TestAdminDomains:
    """Test domain registration API"""

    def test_register_and_list(self, client: TestClient):
        response = client.post(f"{API}/domains", json={"name": "Wiki"})
        assert response.status_code == 201
        assert response.json()["name"] == "wiki"

        create_link(client, "a", "https://a.example.com", domain="wiki")
        domains = {d["name"]: d["link_count"] for d in client.get(f"{API}/domains").json()}
        assert domains == {"go": 0, "wiki": 1}

    def test_rejected_domain(self, client: TestClient):
        response = client.post(f"{API}/domains", json={"name": "bad.name"})
        assert response.status_code == 422

    def test_domain_kept_after_last_link_deleted(self, client: TestClient):
        client.post(f"{API}/domains", json={"name": "wiki"})
        create_link(client, "a", "https://a.example.com", domain="wiki")
        client.delete(f"{API}/links/wiki/a")

        domains = {d["name"]: d["link_count"] for d in client.get(f"{API}/domains").json()}
        assert domains["wiki"] == 0


class TestAdminStatsAndEvents:
    """Test stats, miss ignoring and the audit trail API"""

    def test_misses_and_ignore(self, client: TestClient):
        client.get("/typo", follow_redirects=False)
        client.get("/typo", follow_redirects=False)

        misses = client.get(f"{API}/stats/misses").json()
        assert misses == [{"domain": "go", "slug": "typo", "count": 2}]

        response = client.post(f"{API}/misses/ignore", json={"domain": "go", "slug": "typo"})
        assert response.status_code == 204
        assert client.get(f"{API}/stats/misses").json() == []

    def test_link_stats(self, client: TestClient):
        create_link(client, "meet", "https://meet.example.com")
        client.get("/meet", follow_redirects=False)

        stats = client.get(f"{API}/stats/links").json()
        assert stats == [{"domain": "go", "key": "meet", "total": 1, "exact": 1, "template": 0, "default": 0}]

    def test_events(self, client: TestClient):
        create_link(client, "meet", "https://meet.example.com")
        create_link(client, "meet", "https://meet.example.com/2")
        client.delete(f"{API}/links/go/meet")

        events = client.get(f"{API}/events").json()
        assert [e["event_type"] for e in events] == ["delete", "update", "create"]

        response = client.delete(f"{API}/events/{events[0]['id']}")
        assert response.status_code == 204
        assert len(client.get(f"{API}/events").json()) == 2

        response = client.delete(f"{API}/events/999999")
        assert response.status_code == 404

        response = client.delete(f"{API}/events")
        assert response.status_code == 204
        assert client.get(f"{API}/events").json() == []

    def test_index_and_health(self, client: TestClient):
        assert client.get("/_/").json()["api"] == API
        assert client.get("/_/health").json()["status"] == "healthy"
