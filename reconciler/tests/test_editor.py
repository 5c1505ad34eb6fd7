import copy
from unittest.mock import MagicMock

import requests
import responses
from django.test import TestCase

from reconciler.clients.product_client import PRODUCT_API_BASE_URL, ProductApiClient
from reconciler.editor import ProductEditor, refresh_snapshot_data
from reconciler.models import ProductSnapshot


def _server_product():
    return {
        "id": 202,
        "slug": "t-shirt",
        "name": "T-shirt",
        "product_type": "variable",
        "categories": [{"id": 8, "pivot": {"categories_id": 8, "sous_categories_id": "21"}}],
        "tags": [{"id": 7, "name": "coton"}],
        "variations": [
            {"id": 11, "value": "Red", "attribute": {"id": 1, "slug": "color", "name": "Color"}},
            {"id": 12, "value": "Blue", "attribute": {"id": 1, "slug": "color", "name": "Color"}},
        ],
        "variation_options": [
            {"id": 901, "price": 25, "sale_price": 20, "quantity": 4, "options": [{"name": "Color", "value": "Red"}]},
            {"id": 902, "price": 30, "quantity": 6, "options": [{"name": "Color", "value": "Blue"}]},
        ],
    }


def _make_editor(product):
    source = MagicMock()
    source.get.return_value = copy.deepcopy(product) if product else None
    return ProductEditor(source=source, client=ProductApiClient())


class TestLoad(TestCase):
    def test_load_captures_snapshot(self):
        editor = _make_editor(_server_product())

        values = editor.load(202)

        self.assertEqual(values["product_type"]["value"], "variable")
        self.assertEqual(values["categories"], [{"categories_id": 8, "sous_categories_id": [21], "sub_categories_id": []}])
        snapshot = ProductSnapshot.objects.get(pk="202")
        self.assertEqual(snapshot.data["variation_options"][1]["id"], 902)
        self.assertEqual(snapshot.form_hash, "")

    def test_missing_product_opens_empty_form(self):
        editor = _make_editor(None)

        values = editor.load(999)

        self.assertTrue(values["in_stock"])
        self.assertEqual(ProductSnapshot.objects.count(), 0)

    def test_no_id_is_create_mode(self):
        editor = _make_editor(_server_product())

        values = editor.load()

        self.assertEqual(values["variation_options"], [])
        editor.source.get.assert_not_called()

    def test_new_translation_copy(self):
        values = _make_editor(_server_product()).load(202, is_new_translation=True)
        self.assertEqual(values["variation_options"], [])
        self.assertEqual(values["name"], "T-shirt")


class TestSave(TestCase):
    @responses.activate
    def test_update_deletes_removed_options(self):
        responses.add(
            responses.PUT,
            f"{PRODUCT_API_BASE_URL}/products/202",
            json={"data": {"id": 202, "variation_options": [{"id": 901}]}},
            status=200,
        )
        editor = _make_editor(_server_product())
        values = editor.load(202)
        values["variation_options"] = values["variation_options"][:1]

        result = editor.save(values, product_id=202)

        self.assertEqual(result["status"], "updated")
        self.assertEqual(result["payload"]["variation_options"]["delete"], [902])
        self.assertEqual(result["payload"]["quantity"], 4)
        snapshot = ProductSnapshot.objects.get(pk="202")
        self.assertEqual(snapshot.data["variation_options"], [{"id": 901}])
        self.assertNotEqual(snapshot.form_hash, "")

    @responses.activate
    def test_resubmitting_the_same_form_is_skipped(self):
        responses.add(
            responses.PUT,
            f"{PRODUCT_API_BASE_URL}/products/202",
            json={"data": {"id": 202}},
            status=200,
        )
        editor = _make_editor(_server_product())
        values = editor.load(202)

        editor.save(values, product_id=202)
        result = editor.save(values, product_id=202)

        self.assertEqual(result["status"], "unchanged")
        self.assertEqual(len(responses.calls), 1)

    @responses.activate
    def test_create_stores_snapshot_for_new_id(self):
        responses.add(
            responses.POST,
            f"{PRODUCT_API_BASE_URL}/products",
            json={"data": {"id": 303, "name": "Mug"}},
            status=201,
        )
        editor = _make_editor(None)
        values = editor.load()
        values["name"] = "Mug"

        result = editor.save(values)

        self.assertEqual(result["status"], "created")
        self.assertEqual(result["payload"]["variation_options"], {"upsert": [], "delete": []})
        self.assertTrue(ProductSnapshot.objects.filter(pk="303").exists())

    @responses.activate
    def test_update_without_snapshot_deletes_nothing(self):
        responses.add(responses.PUT, f"{PRODUCT_API_BASE_URL}/products/55", json={"id": 55}, status=200)
        editor = _make_editor(None)

        with self.assertLogs('reconciler.editor', level='WARNING'):
            result = editor.save({"name": "Orphan"}, product_id=55)

        self.assertEqual(result["payload"]["variation_options"]["delete"], [])

    @responses.activate
    def test_api_error_keeps_snapshot(self):
        responses.add(
            responses.PUT,
            f"{PRODUCT_API_BASE_URL}/products/202",
            json={"error": "server error"},
            status=500,
        )
        editor = _make_editor(_server_product())
        values = editor.load(202)

        with self.assertRaises(requests.exceptions.HTTPError):
            editor.save(values, product_id=202)

        snapshot = ProductSnapshot.objects.get(pk="202")
        self.assertEqual(len(snapshot.data["variation_options"]), 2)
        self.assertEqual(snapshot.form_hash, "")

    @responses.activate
    def test_partial_write_response_keeps_variation_options_for_next_save(self):
        responses.add(
            responses.PUT,
            f"{PRODUCT_API_BASE_URL}/products/202",
            json={"data": {"id": 202}},
            status=200,
        )
        editor = _make_editor(_server_product())
        values = editor.load(202)

        first = editor.save(values, product_id=202)
        values = {**values, "variation_options": values["variation_options"][:1]}
        second = editor.save(values, product_id=202)
        values = {**values, "name": "T-shirt bio"}
        third = editor.save(values, product_id=202)

        self.assertEqual(first["payload"]["variation_options"]["delete"], [])
        self.assertEqual(second["payload"]["variation_options"]["delete"], [902])
        self.assertEqual(third["payload"]["variation_options"]["delete"], [])
        snapshot = ProductSnapshot.objects.get(pk="202")
        self.assertEqual([o["id"] for o in snapshot.data["variation_options"]], [901])
        self.assertEqual(snapshot.data["name"], "T-shirt")

    @responses.activate
    def test_load_by_slug_then_save_by_slug(self):
        responses.add(
            responses.PUT,
            f"{PRODUCT_API_BASE_URL}/products/202",
            json={"data": {"id": 202}},
            status=200,
        )
        editor = _make_editor(_server_product())
        values = editor.load("t-shirt")
        values["variation_options"] = values["variation_options"][:1]

        result = editor.save(values, product_id="t-shirt")

        self.assertEqual(result["status"], "updated")
        self.assertEqual(result["payload"]["variation_options"]["delete"], [902])
        self.assertTrue(responses.calls[0].request.url.endswith("/products/202"))


class TestRefreshSnapshotData(TestCase):
    def test_response_without_options_keeps_survivors(self):
        previous = _server_product()
        payload = {"variation_options": {"upsert": [], "delete": ["902"]}}

        data = refresh_snapshot_data(previous, {"id": 202, "slug": "t-shirt-2"}, payload)

        self.assertEqual([o["id"] for o in data["variation_options"]], [901])
        self.assertEqual(data["slug"], "t-shirt-2")
        self.assertEqual(data["name"], "T-shirt")

    def test_response_options_replace_previous(self):
        payload = {"variation_options": {"upsert": [], "delete": []}}

        data = refresh_snapshot_data(_server_product(), {"id": 202, "variation_options": [{"id": 903}]}, payload)

        self.assertEqual(data["variation_options"], [{"id": 903}])

    def test_create_without_previous_snapshot(self):
        payload = {"variation_options": {"upsert": [], "delete": []}}

        data = refresh_snapshot_data(None, {"id": 303}, payload)

        self.assertEqual(data, {"id": 303, "variation_options": []})
