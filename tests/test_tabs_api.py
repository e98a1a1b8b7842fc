"""HTTP tests for /api/tabs: public navigation and the CMS category/link routes."""

import unittest

from support import auth_headers, create_user, make_client, reset_database

ICON = '<svg viewBox="0 0 24 24"><path d="M0 0h24v24H0z"/></svg>'


class TabsApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        reset_database()
        self.client = make_client()
        self.editor = create_user("editor@senado.bo", role="EDITOR")
        self.admin = create_user("admin@senado.bo", role="ADMIN")
        self.staff = auth_headers(self.editor)

    def create_category(self, category_id: str, **fields: object) -> dict:
        payload: dict[str, object] = {"category_id": category_id, "name": category_id.title()}
        payload.update(fields)
        response = self.client.post("/api/tabs/cms/categories", json=payload, headers=self.staff)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]

    def create_link(self, category_id: str, link_id: str, **fields: object) -> dict:
        payload: dict[str, object] = {
            "category_id": category_id,
            "link_id": link_id,
            "title": link_id.title(),
            "description": f"Link {link_id}",
            "icon": ICON,
            "path": f"/{link_id}",
        }
        payload.update(fields)
        response = self.client.post("/api/tabs/cms/links", json=payload, headers=self.staff)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]


class TestPublicTabs(TabsApiTestCase):
    def test_empty_overview_has_message(self) -> None:
        response = self.client.get("/api/tabs")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["tabs"], [])
        self.assertTrue(data["message"])

    def test_overview_groups_active_links(self) -> None:
        self.create_category("servicios", order=2, description="Servicios al ciudadano")
        self.create_category("institucion", order=1, color="#123456")
        self.create_link("servicios", "tramites", order=20)
        self.create_link("servicios", "consultas", order=10)
        hidden = self.create_link("servicios", "oculto")
        self.client.delete(f"/api/tabs/cms/links/{hidden['link_id']}", headers=self.staff)

        data = self.client.get("/api/tabs").json()["data"]
        self.assertEqual([t["id"] for t in data["tabs"]], ["institucion", "servicios"])
        self.assertEqual(data["tabs"][0]["color"], "#123456")
        self.assertEqual(data["areas"]["servicios"]["description"], "Servicios al ciudadano")
        self.assertEqual(
            [link["id"] for link in data["links"]["servicios"]], ["consultas", "tramites"]
        )
        self.assertEqual(data["links"]["institucion"], [])

    def test_tab_detail(self) -> None:
        self.create_category("servicios")
        self.create_link("servicios", "tramites")
        response = self.client.get("/api/tabs/servicios")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["category"]["id"], "servicios")
        self.assertEqual(data["links"][0]["category_name"], "Servicios")
        self.assertEqual(self.client.get("/api/tabs/unknown").status_code, 404)


class TestCategories(TabsApiTestCase):
    def test_duplicate_and_invalid_ids(self) -> None:
        self.create_category("servicios")
        response = self.client.post(
            "/api/tabs/cms/categories",
            json={"category_id": "servicios", "name": "Otra"},
            headers=self.staff,
        )
        self.assertEqual(response.status_code, 409)
        response = self.client.post(
            "/api/tabs/cms/categories",
            json={"category_id": "Bad ID!", "name": "Otra"},
            headers=self.staff,
        )
        self.assertEqual(response.status_code, 400)
        response = self.client.post(
            "/api/tabs/cms/categories",
            json={"category_id": "colores", "name": "Otra", "color": "red"},
            headers=self.staff,
        )
        self.assertEqual(response.status_code, 400)

    def test_default_color_and_links_count(self) -> None:
        self.create_category("servicios")
        self.create_link("servicios", "tramites")
        data = self.client.get("/api/tabs/cms/categories/servicios", headers=self.staff).json()
        self.assertEqual(data["data"]["color"], "#e03735")
        self.assertEqual(data["data"]["links_count"], 1)

    def test_update_category(self) -> None:
        self.create_category("servicios")
        response = self.client.put(
            "/api/tabs/cms/categories/servicios",
            json={"name": "Servicios", "category_id": "ignored"},
            headers=self.staff,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["name"], "Servicios")
        self.assertEqual(response.json()["data"]["category_id"], "servicios")

    def test_delete_with_links_deactivates(self) -> None:
        self.create_category("servicios")
        self.create_category("vacia")
        self.create_link("servicios", "tramites")
        admin = auth_headers(self.admin)

        response = self.client.delete("/api/tabs/cms/categories/servicios", headers=admin)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Category deactivated")
        response = self.client.delete("/api/tabs/cms/categories/vacia", headers=admin)
        self.assertEqual(response.json()["message"], "Category deleted")

        listed = self.client.get("/api/tabs/cms/categories", headers=self.staff).json()["data"]
        self.assertEqual(listed, [])
        listed = self.client.get(
            "/api/tabs/cms/categories?include_inactive=true", headers=self.staff
        ).json()["data"]
        self.assertEqual([c["category_id"] for c in listed], ["servicios"])

    def test_editor_cannot_delete_category(self) -> None:
        self.create_category("servicios")
        response = self.client.delete("/api/tabs/cms/categories/servicios", headers=self.staff)
        self.assertEqual(response.status_code, 403)

    def test_cms_requires_staff(self) -> None:
        citizen = create_user("ana@x.com")
        response = self.client.get("/api/tabs/cms/categories", headers=auth_headers(citizen))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.client.get("/api/tabs/cms/links").status_code, 401)


class TestLinks(TabsApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.create_category("servicios", description="Área de servicios")

    def test_link_copies_area_from_category(self) -> None:
        link = self.create_link("servicios", "tramites")
        self.assertEqual(link["area_title"], "Servicios")
        self.assertEqual(link["area_description"], "Área de servicios")

    def test_link_needs_active_category(self) -> None:
        payload = {
            "category_id": "nope",
            "link_id": "x",
            "title": "X",
            "description": "X",
            "icon": ICON,
            "path": "/x",
        }
        response = self.client.post("/api/tabs/cms/links", json=payload, headers=self.staff)
        self.assertEqual(response.status_code, 400)

    def test_duplicate_link_id(self) -> None:
        self.create_link("servicios", "tramites")
        payload = {
            "category_id": "servicios",
            "link_id": "tramites",
            "title": "X",
            "description": "X",
            "icon": ICON,
            "path": "/x",
        }
        response = self.client.post("/api/tabs/cms/links", json=payload, headers=self.staff)
        self.assertEqual(response.status_code, 409)

    def test_list_and_paginate(self) -> None:
        for i in range(3):
            self.create_link("servicios", f"link-{i}", order=i)
        response = self.client.get("/api/tabs/cms/links?limit=2", headers=self.staff)
        data = response.json()["data"]
        self.assertEqual(len(data["links"]), 2)
        self.assertEqual(data["pagination"], {"total": 3, "page": 1, "limit": 2, "pages": 2})
        self.assertEqual(data["links"][0]["category_color"], "#e03735")

    def test_update_link_keeps_identity(self) -> None:
        self.create_link("servicios", "tramites")
        response = self.client.put(
            "/api/tabs/cms/links/tramites",
            json={"title": "Trámites", "link_id": "other", "category_id": "other"},
            headers=self.staff,
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["title"], "Trámites")
        self.assertEqual(data["link_id"], "tramites")
        self.assertEqual(data["category_id"], "servicios")

    def test_delete_twice_removes(self) -> None:
        self.create_link("servicios", "tramites")
        response = self.client.delete("/api/tabs/cms/links/tramites", headers=self.staff)
        self.assertEqual(response.json()["message"], "Link deactivated")
        response = self.client.delete("/api/tabs/cms/links/tramites", headers=self.staff)
        self.assertEqual(response.json()["message"], "Link deleted")
        response = self.client.get("/api/tabs/cms/links/tramites", headers=self.staff)
        self.assertEqual(response.status_code, 404)

    def test_reorder(self) -> None:
        self.create_link("servicios", "a", order=0)
        self.create_link("servicios", "b", order=1)
        self.create_link("servicios", "c", order=2)
        response = self.client.put(
            "/api/tabs/cms/links/reorder",
            json={
                "category_id": "servicios",
                "order": [
                    {"link_id": "c", "position": 0},
                    {"link_id": "a", "position": 1},
                    {"link_id": "b", "position": 2},
                ],
            },
            headers=self.staff,
        )
        self.assertEqual(response.status_code, 200)
        links = response.json()["data"]
        self.assertEqual([x["link_id"] for x in links], ["c", "a", "b"])
        self.assertEqual([x["order"] for x in links], [0, 10, 20])

    def test_icon_gallery_deduplicates(self) -> None:
        self.create_link("servicios", "a")
        self.create_link("servicios", "b")
        self.create_link("servicios", "c", icon="<svg>other</svg>")
        data = self.client.get("/api/tabs/cms/icons", headers=self.staff).json()["data"]
        self.assertEqual(data["total"], 2)
        group = data["by_category"][0]
        self.assertEqual(group["category_id"], "servicios")
        self.assertEqual([i["id"] for i in group["icons"]], ["servicios-1", "servicios-2"])
        self.assertEqual(data["all"][0]["category_name"], "Servicios")
