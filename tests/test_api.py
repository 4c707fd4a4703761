"""
HTTP contract tests for the short-link API and slug resolution.
"""

import pytest

from app.core.setting import settings
from app.services.url_service import BASE62_CHARS


def owner_read(client, slug, secret, alias="secret"):
    return client.get(f"/api/url/{slug}", params={alias: secret})


class TestCreate:

    def test_create_returns_full_record(self, client):
        response = client.post("/api/url", json={"url": "https://example.com/page"})

        assert response.status_code == 200
        data = response.json()
        slug = data["slug"]
        assert len(slug) == 6
        assert all(ch in BASE62_CHARS for ch in slug)
        assert data["url"] == "https://example.com/page"
        assert data["clicks"] == 0
        assert len(data["secret"]) >= 20
        assert data["shortUrl"] == f"http://testserver/{slug}"
        assert data["manageUrl"] == f"http://testserver/?slug={slug}&secret={data['secret']}"

    def test_create_trims_url(self, client):
        response = client.post("/api/url", json={"url": "  https://example.com  "})
        assert response.status_code == 200
        assert response.json()["url"] == "https://example.com"

    @pytest.mark.parametrize("body", [{}, {"url": ""}, {"url": "   "}, {"url": None}])
    def test_create_missing_url(self, client, body):
        response = client.post("/api/url", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing URL"

    def test_create_without_body(self, client):
        response = client.post("/api/url")
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing URL"

    @pytest.mark.parametrize("url", ["not-a-url", "ftp://example.com", "javascript:alert(1)"])
    def test_create_invalid_url(self, client, url):
        response = client.post("/api/url", json={"url": url})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid URL"

    def test_create_malformed_json(self, client):
        response = client.post(
            "/api/url",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_create_uses_configured_base_url(self, client, monkeypatch):
        monkeypatch.setattr(settings, "BASE_URL", "https://sho.rt/")
        data = client.post("/api/url", json={"url": "https://example.com"}).json()
        assert data["shortUrl"] == f"https://sho.rt/{data['slug']}"
        assert data["manageUrl"].startswith(f"https://sho.rt/?slug={data['slug']}&secret=")

    def test_create_reports_500_when_slugs_exhausted(self, client, created, monkeypatch):
        from app.services import url_service

        monkeypatch.setattr(url_service, "generate_slug", lambda: created["slug"])
        response = client.post("/api/url", json={"url": "https://example.com/other"})

        assert response.status_code == 500
        # The existing record was not overwritten
        read = owner_read(client, created["slug"], created["secret"])
        assert read.json()["url"] == "https://example.com/page"


class TestOwnerRead:

    @pytest.mark.parametrize("alias", ["secret", "token", "ownerToken", "adminToken"])
    def test_read_with_secret_alias(self, client, created, alias):
        response = owner_read(client, created["slug"], created["secret"], alias)

        assert response.status_code == 200
        data = response.json()
        assert data["url"] == "https://example.com/page"
        assert data["clicks"] == 0
        assert data["secret"] == created["secret"]
        assert data["createdAt"]
        assert data["shortUrl"] == created["shortUrl"]

    def test_first_non_empty_alias_wins(self, client, created):
        response = client.get(
            f"/api/url/{created['slug']}",
            params={"secret": "", "token": created["secret"]},
        )
        assert response.status_code == 200

    def test_read_wrong_secret_is_forbidden(self, client, created):
        response = owner_read(client, created["slug"], "wrong-secret")
        assert response.status_code == 403
        assert "url" not in response.json()

    def test_read_padded_secret_is_forbidden(self, client, created):
        response = owner_read(client, created["slug"], f"  {created['secret']} ")
        assert response.status_code == 403

    def test_update_padded_secret_is_forbidden(self, client, created):
        response = client.patch(
            f"/api/url/{created['slug']}",
            json={"url": "https://example.org/new", "secret": f" {created['secret']}"},
        )
        assert response.status_code == 403

    def test_read_missing_secret_is_unauthorized(self, client, created):
        response = client.get(f"/api/url/{created['slug']}")
        assert response.status_code == 401

    def test_read_unknown_slug_is_not_found(self, client):
        response = owner_read(client, "nope12", "whatever")
        assert response.status_code == 404

    @pytest.mark.parametrize("path", ["/api/url", "/api/url/", "/api/url/%20"])
    def test_read_missing_slug(self, client, path):
        response = client.get(path, params={"secret": "x"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing slug"


class TestUpdate:

    def test_update_changes_destination(self, client, created):
        response = client.patch(
            f"/api/url/{created['slug']}",
            json={"url": "https://example.org/new", "secret": created["secret"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["url"] == "https://example.org/new"
        assert data["slug"] == created["slug"]
        assert data["secret"] == created["secret"]

        stored = owner_read(client, created["slug"], created["secret"]).json()
        assert stored["createdAt"] == data["createdAt"]

        redirect = client.get(f"/{created['slug']}")
        assert redirect.status_code == 302
        assert redirect.headers["location"] == "https://example.org/new"

    def test_update_preserves_created_at(self, client, created):
        original = owner_read(client, created["slug"], created["secret"]).json()["createdAt"]
        client.patch(
            f"/api/url/{created['slug']}",
            json={"url": "https://example.org/new", "ownerToken": created["secret"]},
        )
        assert owner_read(client, created["slug"], created["secret"]).json()["createdAt"] == original

    def test_update_with_alias_in_body(self, client, created):
        response = client.patch(
            f"/api/url/{created['slug']}",
            json={"url": "https://example.org/alias", "adminToken": created["secret"]},
        )
        assert response.status_code == 200
        assert response.json()["url"] == "https://example.org/alias"

    def test_update_wrong_secret(self, client, created):
        response = client.patch(
            f"/api/url/{created['slug']}",
            json={"url": "https://evil.example.com", "secret": "wrong"},
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden or not found"
        data = owner_read(client, created["slug"], created["secret"]).json()
        assert data["url"] == "https://example.com/page"

    def test_update_unknown_slug_looks_like_wrong_secret(self, client):
        response = client.patch(
            "/api/url/nope12",
            json={"url": "https://example.com", "secret": "anything"},
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Forbidden or not found"

    def test_update_missing_secret(self, client, created):
        response = client.patch(
            f"/api/url/{created['slug']}",
            json={"url": "https://example.org/new"},
        )
        assert response.status_code == 401

    def test_update_secret_in_query_is_not_accepted(self, client, created):
        response = client.patch(
            f"/api/url/{created['slug']}",
            params={"secret": created["secret"]},
            json={"url": "https://example.org/new"},
        )
        assert response.status_code == 401

    @pytest.mark.parametrize("url", [None, "", "ftp://example.com"])
    def test_update_invalid_url(self, client, created, url):
        response = client.patch(
            f"/api/url/{created['slug']}",
            json={"url": url, "secret": created["secret"]},
        )
        assert response.status_code == 400

    def test_update_missing_slug(self, client):
        response = client.patch("/api/url/", json={"url": "https://example.com", "secret": "x"})
        assert response.status_code == 400


class TestResolution:

    def test_redirect_and_click_count(self, client, created):
        response = client.get(f"/{created['slug']}")

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/page"

        data = owner_read(client, created["slug"], created["secret"]).json()
        assert data["clicks"] == 1

    def test_clicks_match_number_of_resolutions(self, client, created):
        for _ in range(5):
            assert client.get(f"/{created['slug']}").status_code == 302

        data = owner_read(client, created["slug"], created["secret"]).json()
        assert data["clicks"] == 5

    def test_owner_reads_do_not_count_clicks(self, client, created):
        owner_read(client, created["slug"], created["secret"])
        owner_read(client, created["slug"], created["secret"])
        assert owner_read(client, created["slug"], created["secret"]).json()["clicks"] == 0

    def test_last_path_segment_is_the_slug(self, client, created):
        response = client.get(f"/go/{created['slug']}")
        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/page"

    def test_click_failure_does_not_affect_redirect(self, client, created, monkeypatch):
        from app.services.visit_count_service import VisitCountService

        async def broken(self, slug):
            raise RuntimeError("database went away")

        monkeypatch.setattr(VisitCountService, "increment_clicks", broken)
        response = client.get(f"/{created['slug']}")

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/page"


class TestStaticFallThrough:

    def test_root_serves_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "QR Blink" in response.text

    def test_asset_is_served(self, client):
        response = client.get("/assets/app.js")
        assert response.status_code == 200
        assert "console.log" in response.text

    def test_unknown_slug_falls_through_to_404(self, client):
        assert client.get("/abcdef").status_code == 404

    def test_unknown_file_is_404(self, client):
        assert client.get("/missing.css").status_code == 404

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
