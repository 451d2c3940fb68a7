"""API tests for /r/{short_name} and /api/link_visits."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from shorty.core.exceptions import DatabaseError
from shorty.db.models import LinkVisit
from shorty.services import redirect_service as redirect_service_module
from shorty.services.visit_service import VisitService


class TestRedirect:
    """Following a short link."""

    @pytest.mark.asyncio
    async def test_redirect_records_visit(self, client, seed_link, session_maker):
        link_id = await seed_link("https://example.com/landing", "exmpl")

        response = await client.get(
            "/r/exmpl",
            headers={
                "User-Agent": "Mozilla/5.0 (test)",
                "Referer": "https://news.example.org/post",
                "X-Forwarded-For": "172.18.0.1, 10.0.0.2",
            },
        )

        assert response.status_code == 302
        assert response.headers["Location"] == "https://example.com/landing"

        response = await client.get("/api/link_visits")
        assert response.status_code == 200
        visits = response.json()
        assert len(visits) == 1
        assert visits[0]["link_id"] == link_id
        assert visits[0]["ip"] == "172.18.0.1"
        assert visits[0]["user_agent"] == "Mozilla/5.0 (test)"
        assert visits[0]["status"] == 302
        assert visits[0]["created_at"]
        assert response.headers["Content-Range"] == "link_visits 0-0/1"

        async with session_maker() as session:
            visit = (await session.exec(select(LinkVisit))).one()
        assert visit.referer == "https://news.example.org/post"

    @pytest.mark.asyncio
    async def test_client_address_used_without_forwarded_header(self, client, seed_link):
        await seed_link("https://example.com", "direct")

        response = await client.get("/r/direct")
        assert response.status_code == 302

        visits = (await client.get("/api/link_visits")).json()
        # ASGITransport reports 127.0.0.1 as the client
        assert visits[0]["ip"] == "127.0.0.1"

    @pytest.mark.asyncio
    async def test_every_redirect_is_a_new_visit(self, client, seed_link):
        await seed_link("https://example.com", "again")

        for _ in range(3):
            response = await client.get("/r/again")
            assert response.status_code == 302

        response = await client.get("/api/link_visits")
        assert len(response.json()) == 3
        assert response.headers["Content-Range"] == "link_visits 0-2/3"

    @pytest.mark.asyncio
    async def test_updated_link_redirects_to_new_target(self, client, seed_link):
        link_id = await seed_link("https://old.example.com", "moving")

        await client.put(
            f"/api/links/{link_id}",
            json={"original_url": "https://new.example.com", "short_name": "moved"},
        )

        assert (await client.get("/r/moving")).status_code == 404
        response = await client.get("/r/moved")
        assert response.status_code == 302
        assert response.headers["Location"] == "https://new.example.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/r/unknown", "/r/%20%20"])
    async def test_unknown_or_blank_code_returns_404(self, client, path):
        response = await client.get(path)

        assert response.status_code == 404
        assert response.json() == {"error": "not found"}

        response = await client.get("/api/link_visits")
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_visit_failure_still_redirects(self, client, seed_link, monkeypatch):
        await seed_link("https://example.com/landing", "flaky")
        reported = []

        async def failing_record(self, link_id, visitor, status):
            raise DatabaseError(
                "record visit",
                original_error=OperationalError("INSERT INTO link_visits", {}, Exception("locked")),
            )

        monkeypatch.setattr(VisitService, "record_visit", failing_record)
        monkeypatch.setattr(redirect_service_module, "report_exception", reported.append)

        response = await client.get("/r/flaky")

        assert response.status_code == 302
        assert response.headers["Location"] == "https://example.com/landing"
        assert len(reported) == 1
        assert isinstance(reported[0], OperationalError)


class TestLinkVisits:
    """Listing and cascading of visits."""

    @pytest.mark.asyncio
    async def test_empty_visit_list(self, client):
        response = await client.get("/api/link_visits", params={"range": "[0,10]"})
        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["Content-Range"] == "link_visits */0"

    @pytest.mark.asyncio
    async def test_range_header_windows_visits(self, client, seed_link, seed_visits):
        link_id = await seed_link("https://example.com", "busy")
        await seed_visits(link_id, 12)

        response = await client.get("/api/link_visits", headers={"Range": "[0,10]"})

        assert response.status_code == 200
        visits = response.json()
        assert len(visits) == 10
        assert [visit["id"] for visit in visits] == sorted(visit["id"] for visit in visits)
        assert response.headers["Content-Range"] == "link_visits 0-9/12"

        response = await client.get("/api/link_visits", params={"range": "[10,20]"})
        assert len(response.json()) == 2
        assert response.headers["Content-Range"] == "link_visits 10-11/12"

    @pytest.mark.asyncio
    async def test_invalid_range_returns_400(self, client):
        response = await client.get("/api/link_visits", headers={"Range": "bytes=0-10"})
        assert response.status_code == 400
        assert response.json() == {"error": "invalid range"}

    @pytest.mark.asyncio
    async def test_deleting_link_removes_its_visits(self, client, seed_link, seed_visits):
        doomed = await seed_link("https://doomed.example.com", "doomed")
        kept = await seed_link("https://kept.example.com", "kept")
        await seed_visits(doomed, 3)
        await seed_visits(kept, 2)

        response = await client.delete(f"/api/links/{doomed}")
        assert response.status_code == 204

        response = await client.get("/api/link_visits")
        visits = response.json()
        assert len(visits) == 2
        assert {visit["link_id"] for visit in visits} == {kept}
        assert response.headers["Content-Range"] == "link_visits 0-1/2"
