"""Tests for API endpoints."""

import logging
import re

import pytest


@pytest.mark.asyncio
class TestLinkEndpoints:
    """Test the owner-scoped link API."""
    
    async def test_create_link(self, client, auth_headers, sample_urls):
        """Test POST /api/links."""
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0]},
            headers=auth_headers("u1"),
        )
        
        assert response.status_code == 201
        data = response.json()
        assert data["ok"] is True
        link = data["value"]
        assert re.fullmatch(r"[a-zA-Z0-9]{7}", link["code"])
        assert link["owner_id"] == "u1"
        assert link["target_url"] == sample_urls[0]
        assert link["short_url"] == f"http://testserver/{link['code']}"
    
    async def test_create_with_custom_code(self, client, auth_headers, sample_urls):
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0], "code": "myrepo"},
            headers=auth_headers("u1"),
        )
        
        assert response.status_code == 201
        assert response.json()["value"]["code"] == "myrepo"
    
    async def test_blank_code_is_generated(self, client, auth_headers, sample_urls):
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0], "code": "   "},
            headers=auth_headers("u1"),
        )
        
        assert response.status_code == 201
        assert len(response.json()["value"]["code"]) == 7
    
    async def test_short_url_uses_forwarded_host(self, client, auth_headers, sample_urls):
        headers = {**auth_headers("u1"), "X-Forwarded-Proto": "https", "X-Forwarded-Host": "sho.rt"}
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0], "code": "fwd"},
            headers=headers,
        )
        
        assert response.json()["value"]["short_url"] == "https://sho.rt/fwd"
    
    async def test_create_requires_identity(self, client, store, sample_urls):
        response = await client.post("/api/links", json={"url": sample_urls[0]})
        
        assert response.status_code == 401
        assert response.json() == {
            "ok": False,
            "error": "Unauthenticated",
            "message": "Authentication required",
        }
        assert response.headers["www-authenticate"] == "Bearer"
        assert await store.count() == 0
    
    async def test_create_with_bad_token(self, client, sample_urls):
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0]},
            headers={"Authorization": "Bearer forged"},
        )
        
        assert response.status_code == 401
    
    async def test_create_invalid_url(self, client, auth_headers):
        response = await client.post(
            "/api/links",
            json={"url": "not-a-url"},
            headers=auth_headers("u1"),
        )
        
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidInput"
    
    async def test_create_short_code_too_short(self, client, auth_headers):
        response = await client.post(
            "/api/links",
            json={"url": "https://example.com", "code": "ab"},
            headers=auth_headers("u1"),
        )
        
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidInput"
    
    async def test_create_reserved_code(self, client, auth_headers):
        response = await client.post(
            "/api/links",
            json={"url": "https://example.com", "code": "health"},
            headers=auth_headers("u1"),
        )
        
        assert response.status_code == 400
    
    async def test_create_duplicate_code(self, client, auth_headers, sample_urls):
        await client.post(
            "/api/links",
            json={"url": sample_urls[0], "code": "taken"},
            headers=auth_headers("u2"),
        )
        
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[1], "code": "taken"},
            headers=auth_headers("u1"),
        )
        
        assert response.status_code == 409
        assert response.json()["error"] == "CodeConflict"
    
    async def test_list_links(self, client, auth_headers, sample_urls):
        for url in sample_urls:
            await client.post("/api/links", json={"url": url}, headers=auth_headers("u1"))
        await client.post("/api/links", json={"url": "https://other.com"}, headers=auth_headers("u2"))
        
        response = await client.get("/api/links", headers=auth_headers("u1"))
        
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert [item["target_url"] for item in data["items"]] == list(reversed(sample_urls))
    
    async def test_list_requires_identity(self, client):
        response = await client.get("/api/links")
        
        assert response.status_code == 401
    
    @pytest.mark.parametrize("authorization", ["Basic dXNlcjpwdw==", "Bearer", "Token abc"])
    async def test_non_bearer_authorization_is_unauthenticated(self, client, store, sample_urls, authorization):
        response = await client.post(
            "/api/links",
            json={"url": sample_urls[0]},
            headers={"Authorization": authorization},
        )
        
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthenticated"
        assert await store.count() == 0
    
    async def test_delete_without_identity_keeps_link(self, client, auth_headers, sample_urls):
        created = (await client.post(
            "/api/links", json={"url": sample_urls[0]}, headers=auth_headers("u1")
        )).json()["value"]
        
        response = await client.delete(f"/api/links/{created['id']}")
        
        assert response.status_code == 401
        assert (await client.get(f"/api/resolve/{created['code']}")).status_code == 200
    
    async def test_update_link(self, client, auth_headers, sample_urls):
        created = (await client.post(
            "/api/links", json={"url": sample_urls[0]}, headers=auth_headers("u1")
        )).json()["value"]
        
        response = await client.put(
            f"/api/links/{created['id']}",
            json={"url": sample_urls[1], "code": "renamed"},
            headers=auth_headers("u1"),
        )
        
        assert response.status_code == 200
        link = response.json()["value"]
        assert link["code"] == "renamed"
        assert link["target_url"] == sample_urls[1]
    
    async def test_update_foreign_link(self, client, auth_headers, sample_urls):
        created = (await client.post(
            "/api/links", json={"url": sample_urls[0]}, headers=auth_headers("u1")
        )).json()["value"]
        
        response = await client.put(
            f"/api/links/{created['id']}",
            json={"url": sample_urls[1]},
            headers=auth_headers("u2"),
        )
        
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"
    
    async def test_update_missing_link(self, client, auth_headers):
        response = await client.put(
            "/api/links/999",
            json={"url": "https://example.com"},
            headers=auth_headers("u1"),
        )
        
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"
    
    async def test_delete_link(self, client, auth_headers, sample_urls):
        created = (await client.post(
            "/api/links", json={"url": sample_urls[0]}, headers=auth_headers("u1")
        )).json()["value"]
        
        response = await client.delete(f"/api/links/{created['id']}", headers=auth_headers("u1"))
        
        assert response.status_code == 200
        assert response.json()["value"]["id"] == created["id"]
        assert (await client.get(f"/api/resolve/{created['code']}")).status_code == 404
    
    async def test_delete_foreign_link_keeps_it(self, client, auth_headers, sample_urls):
        created = (await client.post(
            "/api/links", json={"url": sample_urls[0]}, headers=auth_headers("u1")
        )).json()["value"]
        
        response = await client.delete(f"/api/links/{created['id']}", headers=auth_headers("u2"))
        
        assert response.status_code == 403
        assert (await client.get(f"/api/resolve/{created['code']}")).status_code == 200


@pytest.mark.asyncio
class TestPublicEndpoints:
    """Test endpoints that need no identity."""
    
    async def test_resolve(self, client, auth_headers, sample_urls):
        await client.post(
            "/api/links", json={"url": sample_urls[0], "code": "public"}, headers=auth_headers("u1")
        )
        
        response = await client.get("/api/resolve/public")
        
        assert response.status_code == 200
        assert response.json() == {"code": "public", "target_url": sample_urls[0]}
    
    async def test_resolve_missing(self, client):
        response = await client.get("/api/resolve/missing")
        
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"
    
    async def test_redirect(self, client, auth_headers, sample_urls):
        await client.post(
            "/api/links", json={"url": sample_urls[0], "code": "go-here"}, headers=auth_headers("u1")
        )
        
        response = await client.get("/go-here")
        
        assert response.status_code == 302
        assert response.headers["location"] == sample_urls[0]
    
    async def test_redirect_missing(self, client):
        response = await client.get("/missing")
        
        assert response.status_code == 404
    
    async def test_health_check(self, client):
        response = await client.get("/api/health")
        
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
    
    async def test_simple_health_check(self, client):
        response = await client.get("/health")
        
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
    
    async def test_access_log_uses_forwarded_client(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="linkdash.web"):
            await client.get("/health", headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})
        
        lines = [r.getMessage() for r in caplog.records if r.name == "linkdash.web"]
        assert len(lines) == 1
        assert lines[0].startswith("203.0.113.9 GET /health 200 ")
