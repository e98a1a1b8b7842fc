"""HTTP tests for /api/content: visibility, slugs, revisions, tags and aggregates."""

import unittest
from datetime import UTC, datetime, timedelta

from support import auth_headers, create_user, make_client, reset_database

from portal_api.core.config import get_settings
from portal_api.core.security import create_access_token


class ContentApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        reset_database()
        self.client = make_client()
        self.editor = create_user("editor@senado.bo", role="EDITOR")
        self.admin = create_user("admin@senado.bo", role="ADMIN")
        self.staff = auth_headers(self.editor)

    def create(self, **fields: object) -> dict:
        payload: dict[str, object] = {"title": "Sesión ordinaria", "body": "Texto de la sesión"}
        payload.update(fields)
        response = self.client.post("/api/content", json=payload, headers=self.staff)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]


class TestCreateContent(ContentApiTestCase):
    def test_slug_derived_from_title(self) -> None:
        data = self.create(title="Día de la Democracia", type="news")
        self.assertEqual(data["slug"], "dia-de-la-democracia")
        self.assertEqual(data["url"], "/contenido/noticias/dia-de-la-democracia")
        self.assertEqual(data["revision"], 1)
        self.assertEqual(data["author"]["email"], "editor@senado.bo")

    def test_duplicate_slug_is_409(self) -> None:
        self.create(slug="agenda")
        response = self.client.post(
            "/api/content",
            json={"title": "Otra", "body": "x", "slug": "agenda"},
            headers=self.staff,
        )
        self.assertEqual(response.status_code, 409)

    def test_invalid_slug_is_400(self) -> None:
        response = self.client.post(
            "/api/content",
            json={"title": "Otra", "body": "x", "slug": "Not a slug!"},
            headers=self.staff,
        )
        self.assertEqual(response.status_code, 400)

    def test_tags_normalized(self) -> None:
        data = self.create(tags=[" Leyes ", "leyes", "Senado"])
        self.assertEqual(data["tags"], ["leyes", "senado"])

    def test_published_sets_published_at(self) -> None:
        data = self.create(status="published")
        self.assertIsNotNone(data["published_at"])

    def test_anonymous_cannot_create(self) -> None:
        response = self.client.post("/api/content", json={"title": "x", "body": "y"})
        self.assertEqual(response.status_code, 401)


class TestVisibility(ContentApiTestCase):
    def test_empty_collection_has_zero_pages(self) -> None:
        response = self.client.get("/api/content")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["contents"], [])
        self.assertEqual(data["total"], 0)
        self.assertEqual(data["pages"], 0)

    def test_unusable_token_reads_as_anonymous(self) -> None:
        self.create(title="Borrador")
        self.create(title="Publicado", status="published")
        expired = create_access_token(
            self.editor.id, get_settings(), expires_delta=timedelta(seconds=-1)
        )
        suspended = create_user("suspendido@senado.bo", role="EDITOR", status="SUSPENDED")
        for headers in (
            {"Authorization": "Bearer garbage"},
            {"Authorization": f"Bearer {expired}"},
            auth_headers(suspended),
        ):
            response = self.client.get("/api/content?include_drafts=true", headers=headers)
            self.assertEqual(response.status_code, 200, response.text)
            slugs = [c["slug"] for c in response.json()["data"]["contents"]]
            self.assertEqual(slugs, ["publicado"])
            response = self.client.get("/api/content/slug/publicado", headers=headers)
            self.assertEqual(response.status_code, 200)

    def test_drafts_hidden_from_public(self) -> None:
        draft = self.create(title="Borrador")
        published = self.create(title="Publicado", status="published")

        response = self.client.get("/api/content")
        slugs = [c["slug"] for c in response.json()["data"]["contents"]]
        self.assertEqual(slugs, ["publicado"])

        self.assertEqual(self.client.get(f"/api/content/{draft['id']}").status_code, 404)
        self.assertEqual(self.client.get(f"/api/content/{published['id']}").status_code, 200)
        self.assertEqual(self.client.get("/api/content/slug/borrador").status_code, 404)

    def test_include_drafts_only_for_staff(self) -> None:
        self.create(title="Borrador")
        response = self.client.get("/api/content?include_drafts=true")
        self.assertEqual(response.json()["data"]["total"], 0)
        response = self.client.get("/api/content?include_drafts=true", headers=self.staff)
        self.assertEqual(response.json()["data"]["total"], 1)

    def test_scheduled_and_expired(self) -> None:
        now = datetime.now(UTC)
        self.create(
            title="Programado futuro",
            status="scheduled",
            scheduled_for=(now + timedelta(days=1)).isoformat(),
        )
        self.create(
            title="Programado vencido",
            status="scheduled",
            scheduled_for=(now - timedelta(days=1)).isoformat(),
        )
        self.create(
            title="Expirado",
            status="published",
            expires_at=(now - timedelta(hours=1)).isoformat(),
        )
        response = self.client.get("/api/content")
        slugs = [c["slug"] for c in response.json()["data"]["contents"]]
        self.assertEqual(slugs, ["programado-vencido"])

    def test_slug_read_counts_views(self) -> None:
        self.create(title="Publicado", status="published")
        self.client.get("/api/content/slug/publicado")
        response = self.client.get("/api/content/slug/publicado")
        self.assertEqual(response.json()["data"]["views"], 2)


class TestListFilters(ContentApiTestCase):
    def test_filters_and_ordering(self) -> None:
        now = datetime.now(UTC)
        self.create(
            title="Antigua",
            status="published",
            type="news",
            published_at=(now - timedelta(days=3)).isoformat(),
            tags=["leyes"],
        )
        self.create(
            title="Reciente",
            status="published",
            type="article",
            published_at=(now - timedelta(days=1)).isoformat(),
            tags=["eventos"],
        )
        response = self.client.get("/api/content")
        slugs = [c["slug"] for c in response.json()["data"]["contents"]]
        self.assertEqual(slugs, ["reciente", "antigua"])

        response = self.client.get("/api/content?type=news")
        self.assertEqual(response.json()["data"]["total"], 1)
        response = self.client.get("/api/content?tags=eventos,otros")
        slugs = [c["slug"] for c in response.json()["data"]["contents"]]
        self.assertEqual(slugs, ["reciente"])
        response = self.client.get("/api/content?search=ANTIG")
        self.assertEqual(response.json()["data"]["total"], 1)

    def test_invalid_type_is_400(self) -> None:
        response = self.client.get("/api/content?type=podcast")
        self.assertEqual(response.status_code, 400)

    def test_options(self) -> None:
        types = self.client.get("/api/content/types").json()["data"]
        self.assertEqual([t["value"] for t in types], ["page", "news", "article", "announcement"])
        categories = self.client.get("/api/content/categories").json()["data"]
        self.assertEqual(len(categories), 8)


class TestUpdateContent(ContentApiTestCase):
    def test_update_records_history(self) -> None:
        data = self.create(title="Ley", body="Primera versión")
        response = self.client.put(
            f"/api/content/{data['id']}",
            json={"body": "Segunda versión", "comment": "Corrección", "tags": ["ley"]},
            headers=self.staff,
        )
        self.assertEqual(response.status_code, 200)
        updated = response.json()["data"]
        self.assertEqual(updated["revision"], 2)
        self.assertEqual(updated["body"], "Segunda versión")
        self.assertEqual(updated["tags"], ["ley"])
        self.assertEqual(len(updated["version_history"]), 1)
        entry = updated["version_history"][0]
        self.assertEqual(entry["body"], "Primera versión")
        self.assertEqual(entry["revision"], 1)
        self.assertEqual(entry["comment"], "Corrección")

    def test_retained_tags_keep_working(self) -> None:
        data = self.create(tags=["a", "b"])
        response = self.client.put(
            f"/api/content/{data['id']}", json={"tags": ["b", "c"]}, headers=self.staff
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["tags"], ["b", "c"])

    def test_status_patch(self) -> None:
        data = self.create()
        response = self.client.patch(
            f"/api/content/{data['id']}/status", json={"status": "published"}, headers=self.staff
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], "published")
        self.assertIsNotNone(response.json()["data"]["published_at"])
        self.assertEqual(self.client.get(f"/api/content/{data['id']}").status_code, 200)

    def test_update_missing_is_404(self) -> None:
        response = self.client.put("/api/content/999", json={"body": "x"}, headers=self.staff)
        self.assertEqual(response.status_code, 404)


class TestDeleteAndAggregates(ContentApiTestCase):
    def test_only_admin_deletes(self) -> None:
        data = self.create()
        response = self.client.delete(f"/api/content/{data['id']}", headers=self.staff)
        self.assertEqual(response.status_code, 403)
        response = self.client.delete(
            f"/api/content/{data['id']}", headers=auth_headers(self.admin)
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["success"])

    def test_stats(self) -> None:
        self.create(title="Uno", type="news", status="published")
        self.create(title="Dos", type="news")
        self.create(title="Tres", type="page", category="historia")
        response = self.client.get("/api/content/stats", headers=self.staff)
        self.assertEqual(response.status_code, 200)
        stats = {s["type"]: s for s in response.json()["data"]}
        self.assertEqual(stats["news"]["total"], 2)
        self.assertEqual(
            {c["status"]: c["count"] for c in stats["news"]["by_status"]},
            {"draft": 1, "published": 1},
        )
        self.assertEqual(stats["page"]["by_category"], [{"category": "historia", "count": 1}])

    def test_search_and_related(self) -> None:
        first = self.create(title="Ley de aguas", status="published", tags=["agua"])
        self.create(
            title="Riego", status="published", type="article", category="eventos", tags=["agua"]
        )
        self.create(title="Borrador de aguas", tags=["agua"])

        response = self.client.get("/api/content/search?q=aguas")
        slugs = [c["slug"] for c in response.json()["data"]]
        self.assertEqual(slugs, ["ley-de-aguas"])

        response = self.client.get(f"/api/content/{first['id']}/related")
        slugs = [c["slug"] for c in response.json()["data"]]
        self.assertEqual(slugs, ["riego"])

        response = self.client.get("/api/content/999/related")
        self.assertEqual(response.json()["data"], [])

    def test_search_requires_term(self) -> None:
        self.assertEqual(self.client.get("/api/content/search").status_code, 400)
