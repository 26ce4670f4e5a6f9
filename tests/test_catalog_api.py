"""HTTP tests for /api/catalog and the barcode template routes, with the catalog API mocked out."""

import json
import unittest
from unittest.mock import AsyncMock

from labeldesk.api.routes.catalog import get_catalog_client
from labeldesk.core.config import get_settings
from labeldesk.main import app
from labeldesk.services.catalog_client import CatalogApiError, CatalogClient
from support import ApiTestCase


class CatalogApiTestCase(ApiTestCase):
    """Logged-in admin; every catalog call goes through self.request."""

    def setUp(self) -> None:
        super().setUp()
        self.catalog = CatalogClient(get_settings())
        self.request = AsyncMock(return_value=None)
        self.catalog.request = self.request
        app.dependency_overrides[get_catalog_client] = lambda: self.catalog
        self.login()


class TestCatalogResources(CatalogApiTestCase):
    def test_requires_session(self) -> None:
        self.client.post("/api/auth/logout")
        resp = self.client.get("/api/catalog/packs")
        self.assertEqual(resp.status_code, 401)
        self.request.assert_not_awaited()

    def test_list_passes_body_through(self) -> None:
        self.request.return_value = [{"id": 1, "name": "Box 10"}]
        resp = self.client.get("/api/catalog/packs")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [{"id": 1, "name": "Box 10"}])
        self.request.assert_awaited_once_with("GET", "packs/", error="Failed to fetch packs")

    def test_unknown_resource_is_not_found(self) -> None:
        resp = self.client.get("/api/catalog/widgets")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"error": "NOT_FOUND", "path": "/api/catalog/widgets"})
        self.request.assert_not_awaited()

    def test_create(self) -> None:
        self.request.return_value = {"id": 3, "name": "Milk"}
        resp = self.client.post("/api/catalog/nomenclature", json={"name": "Milk"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json(), {"id": 3, "name": "Milk"})
        self.request.assert_awaited_once_with(
            "POST", "nomenclature/", json={"name": "Milk"}, error="Failed to create nomenclature"
        )

    def test_create_needs_json_object(self) -> None:
        resp = self.client.post("/api/catalog/packs", json=[1, 2])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "INVALID_INPUT"})

    def test_update(self) -> None:
        self.request.return_value = {"id": 2, "name": "Kefir"}
        resp = self.client.patch("/api/catalog/labels/2", json={"name": "Kefir"})
        self.assertEqual(resp.status_code, 200)
        self.request.assert_awaited_once_with(
            "PATCH", "labels/2/", json={"name": "Kefir"}, error="Failed to update label"
        )

    def test_links_and_attributes_cannot_be_updated(self) -> None:
        for resource in ("links", "attributes"):
            with self.subTest(resource=resource):
                resp = self.client.patch(f"/api/catalog/{resource}/4", json={"name": "x"})
                self.assertEqual(resp.status_code, 405)
                self.assertEqual(resp.json(), {"error": "METHOD_NOT_ALLOWED"})
        self.request.assert_not_awaited()

    def test_delete(self) -> None:
        resp = self.client.delete("/api/catalog/links/4")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})
        self.request.assert_awaited_once_with(
            "DELETE", "links/4/", error="Failed to delete link", expect_body=False
        )


class TestStations(CatalogApiTestCase):
    def test_sync(self) -> None:
        self.request.return_value = {"ok": True}
        resp = self.client.post("/api/catalog/stations/6f1c-aa/sync")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})
        self.assertEqual(self.request.call_args.args, ("POST", "stations/6f1c-aa/sync_data/"))

    def test_full_dump(self) -> None:
        self.request.return_value = {"products": [], "labels": []}
        resp = self.client.get("/api/catalog/stations/6f1c-aa/full_dump")
        self.assertEqual(resp.json(), {"products": [], "labels": []})
        self.assertEqual(self.request.call_args.args, ("GET", "stations/6f1c-aa/full_dump/"))

    def test_server_ip(self) -> None:
        self.request.return_value = {"ip": "10.0.0.5"}
        self.assertEqual(self.client.get("/api/catalog/stations/server_ip").json(), {"ip": "10.0.0.5"})
        self.request.return_value = {}
        self.assertEqual(self.client.get("/api/catalog/stations/server_ip").json(), {"ip": None})

    def test_send_to_stations(self) -> None:
        self.request.return_value = {"sent": 2}
        resp = self.client.post("/api/catalog/nomenclature/send_to_stations", json={"stations": ["s1", "s2"]})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.request.call_args.kwargs["json"], {"stations": ["s1", "s2"]})

    def test_send_to_no_stations_is_invalid(self) -> None:
        resp = self.client.post("/api/catalog/nomenclature/send_to_stations", json={"stations": []})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "INVALID_INPUT"})
        self.request.assert_not_awaited()


class TestCatalogErrors(CatalogApiTestCase):
    def test_no_response_is_unavailable(self) -> None:
        self.request.side_effect = CatalogApiError("Failed to fetch packs: request timed out")
        resp = self.client.get("/api/catalog/packs")
        self.assertEqual(resp.status_code, 503)
        self.assertEqual(
            resp.json(),
            {"error": "CATALOG_UNAVAILABLE", "message": "Failed to fetch packs: request timed out"},
        )

    def test_client_errors_pass_through(self) -> None:
        self.request.side_effect = CatalogApiError("Name already used", 409)
        resp = self.client.post("/api/catalog/packs", json={"name": "Box"})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json(), {"error": "CATALOG_REJECTED", "message": "Name already used"})

    def test_server_errors_are_bad_gateway(self) -> None:
        self.request.side_effect = CatalogApiError("Failed to delete label", 500)
        with self.assertLogs("labeldesk.api.routes.catalog", level="WARNING"):
            resp = self.client.delete("/api/catalog/labels/7")
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json(), {"error": "CATALOG_ERROR", "message": "Failed to delete label"})


STRUCTURE = {
    "barcode_type": "ean13",
    "barcode_name": "Weight",
    "fields": [
        {"field_type": "constanta", "value": "22"},
        {"field_type": "weight_netto_pack", "length": "5", "decimalPlaces": "3"},
    ],
}


class TestBarcodeTemplates(CatalogApiTestCase):
    def test_default_structure(self) -> None:
        resp = self.client.get("/api/barcodes/templates/default")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["fields"][0]["value"], "460")
        self.request.assert_not_awaited()

    def test_list_skips_unparseable_items(self) -> None:
        self.request.return_value = [
            {"id": 1, "name": "Weight", "structure": json.dumps(STRUCTURE)},
            {"name": "no id"},
            {"id": 2, "name": "Broken", "structure": "{oops"},
            {"id": 3, "name": "Colour", "structure": {"fields": [{"field_type": "color"}]}},
        ]
        with self.assertLogs("labeldesk.api.routes.barcodes", level="WARNING"):
            resp = self.client.get("/api/barcodes/templates")
        self.assertEqual(resp.status_code, 200)
        templates = resp.json()["templates"]
        self.assertEqual([t["id"] for t in templates], ["1", "3"])
        self.assertEqual(templates[0]["structure"]["fields"][1]["decimalPlaces"], "3")
        self.assertEqual(templates[1]["unknown_field_types"], ["color"])
        self.assertEqual(self.request.call_args.args, ("GET", "barcodes/"))

    def test_create_sends_structure_as_json_string(self) -> None:
        self.request.return_value = {"id": 5, "name": "Weight", "structure": json.dumps(STRUCTURE)}
        resp = self.client.post(
            "/api/barcodes/templates",
            json={
                "name": "  Weight ",
                "fields": [{"field_type": "constanta", "value": "22"}, {"field_type": "exp_date"}],
            },
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["id"], "5")

        call = self.request.call_args
        self.assertEqual(call.args, ("POST", "barcodes/"))
        sent = call.kwargs["json"]
        self.assertEqual(sent["name"], "Weight")
        structure = json.loads(sent["structure"])
        self.assertEqual(structure["barcode_name"], "Weight")
        self.assertEqual(structure["fields"][1], {"field_type": "exp_date", "dateFormat": "ddMMyy"})

    def test_replace_patches_template(self) -> None:
        self.request.return_value = {"id": 5, "name": "Pack", "structure": None}
        resp = self.client.put("/api/barcodes/templates/5", json={"name": "Pack", "fields": []})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["name"], "Pack")
        self.assertEqual(self.request.call_args.args, ("PATCH", "barcodes/5/"))

    def test_save_rejects_empty_name_and_unknown_fields(self) -> None:
        resp = self.client.post("/api/barcodes/templates", json={"name": "   ", "fields": []})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "INVALID_INPUT"})

        resp = self.client.post(
            "/api/barcodes/templates",
            json={"name": "X", "fields": [{"field_type": "color"}, {"field_type": "ai", "value": "01"}]},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"error": "INVALID_INPUT", "message": "Unknown field types: color"})
        self.request.assert_not_awaited()

    def test_saved_template_without_id_is_bad_gateway(self) -> None:
        self.request.return_value = {"name": "Weight"}
        resp = self.client.post("/api/barcodes/templates", json={"name": "Weight", "fields": []})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["error"], "CATALOG_ERROR")

    def test_delete(self) -> None:
        resp = self.client.delete("/api/barcodes/templates/5")
        self.assertEqual(resp.json(), {"ok": True})
        self.assertEqual(self.request.call_args.args, ("DELETE", "barcodes/5/"))


class TestBarcodePreview(CatalogApiTestCase):
    def test_preview_returns_png(self) -> None:
        self.request.return_value = {"png": "iVBORw0KGgo="}
        resp = self.client.post("/api/barcodes/preview", json=STRUCTURE)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"png": "iVBORw0KGgo="})
        call = self.request.call_args
        self.assertEqual(call.args, ("POST", "barcodes/generate/"))
        self.assertEqual(call.kwargs["json"]["barcode_structure"]["fields"][1]["decimalPlaces"], "3")

    def test_preview_accepts_structure_string(self) -> None:
        self.request.return_value = {"png": "iVBORw0KGgo="}
        resp = self.client.post("/api/barcodes/preview", json=json.dumps(STRUCTURE))
        self.assertEqual(resp.status_code, 200)

    def test_bad_structure_is_invalid_input(self) -> None:
        for body in ("{oops", [1, 2], {"fields": [{"value": "1"}]}):
            with self.subTest(body=body):
                resp = self.client.post("/api/barcodes/preview", json=body)
                self.assertEqual(resp.status_code, 400)
                self.assertEqual(resp.json()["error"], "INVALID_INPUT")
                self.assertIn("message", resp.json())
        self.request.assert_not_awaited()

    def test_answer_without_png_is_bad_gateway(self) -> None:
        self.request.return_value = {}
        with self.assertLogs("labeldesk.api.routes.catalog", level="WARNING"):
            resp = self.client.post("/api/barcodes/preview", json=STRUCTURE)
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(
            resp.json(), {"error": "CATALOG_ERROR", "message": "Barcode preview response missing png"}
        )


if __name__ == "__main__":
    unittest.main()
