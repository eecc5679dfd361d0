import unittest

from app.modules.products.service import compute_profitability
from tests.helpers import ApiTestCase


class TestComputeProfitability(unittest.TestCase):
    def test_fixed_and_percentage_costs(self):
        product = {
            "sale_price": 100.0,
            "cost_price": 40.0,
            "fba_fee": 10.0,
            "commission": 15.0,
            "taxes": 5.0,
            "prep_center_fee": 2.5,
            "fbm_fee": 99.0,
            "custom_costs": [
                {"name": "ads", "value": 10, "type": "percentage"},
                {"name": "box", "value": 1.25, "type": "fixed"},
            ],
        }
        self.assertEqual(
            compute_profitability(product),
            {"total_cost": 83.75, "profit": 16.25, "margin": 16.25}
        )

    def test_missing_prices(self):
        for product in ({"sale_price": 10.0}, {"cost_price": 10.0}, {}):
            with self.subTest(product=product):
                self.assertEqual(
                    compute_profitability(product),
                    {"total_cost": None, "profit": None, "margin": None}
                )

    def test_zero_sale_price(self):
        result = compute_profitability({"sale_price": 0, "cost_price": 5.0})
        self.assertEqual(result, {"total_cost": 5.0, "profit": -5.0, "margin": 0.0})

    def test_loss(self):
        result = compute_profitability({"sale_price": 20.0, "cost_price": 30.0})
        self.assertEqual(result["profit"], -10.0)
        self.assertEqual(result["margin"], -50.0)


class TestProductsApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.owner, self.owner_client = self.client_for("ALUNO")
        self.other, self.other_client = self.client_for("ALUNO")

    def test_crud_with_profitability(self):
        response = self.owner_client.post(
            "/api/products", json={"name": "Mug", "sku": "MUG-1", "cost_price": 10, "sale_price": 25}
        )
        self.assertEqual(response.status_code, 201, response.text)
        product = response.json()
        self.assertEqual(product["profit"], 15.0)
        self.assertEqual(product["margin"], 60.0)

        updated = self.owner_client.put(f"/api/products/{product['id']}", json={"fba_fee": 5}).json()
        self.assertEqual(updated["profit"], 10.0)
        self.assertEqual(updated["name"], "Mug")

        found = self.owner_client.get("/api/products", params={"search": "mug-"}).json()
        self.assertEqual([p["id"] for p in found], [product["id"]])

        self.assertEqual(self.owner_client.delete(f"/api/products/{product['id']}").status_code, 204)
        self.assertEqual(self.owner_client.get(f"/api/products/{product['id']}").status_code, 404)

    def test_other_users_products_are_invisible(self):
        product = self.owner_client.post("/api/products", json={"name": "Mug"}).json()
        url = f"/api/products/{product['id']}"
        self.assertEqual(self.other_client.get(url).status_code, 404)
        self.assertEqual(self.other_client.put(url, json={"name": "Stolen"}).status_code, 404)
        self.assertEqual(self.other_client.delete(url).status_code, 404)
        self.assertEqual(self.other_client.get("/api/products").json(), [])
        self.assertEqual(self.db.rows("products")[0]["name"], "Mug")

    def test_basic_users_have_no_catalogue(self):
        _, client = self.client_for("BASIC")
        self.assertEqual(client.get("/api/products").status_code, 403)
        self.assertEqual(client.get("/api/my-suppliers").status_code, 403)


class TestMySuppliersApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.owner, self.owner_client = self.client_for("ALUNO")
        self.other, self.other_client = self.client_for("ALUNO")
        response = self.owner_client.post("/api/my-suppliers", json={"name": "Shenzhen Co", "email": "s@example.com"})
        self.assertEqual(response.status_code, 201, response.text)
        self.supplier = response.json()
        self.base = f"/api/my-suppliers/{self.supplier['id']}"

    def test_detail_includes_branches_and_contacts(self):
        branch = self.owner_client.post(f"{self.base}/branches", json={"name": "HQ", "city": "Shenzhen"}).json()
        self.owner_client.post(f"{self.base}/contacts", json={"name": "Li", "branch_id": branch["id"]})

        detail = self.owner_client.get(self.base).json()
        self.assertEqual([b["name"] for b in detail["branches"]], ["HQ"])
        self.assertEqual(detail["contacts"][0]["branch_id"], branch["id"])

    def test_deleting_branch_keeps_contacts(self):
        branch = self.owner_client.post(f"{self.base}/branches", json={"name": "HQ"}).json()
        contact = self.owner_client.post(f"{self.base}/contacts", json={"name": "Li", "branch_id": branch["id"]}).json()
        self.assertEqual(self.owner_client.delete(f"{self.base}/branches/{branch['id']}").status_code, 204)

        contacts = self.owner_client.get(f"{self.base}/contacts").json()
        self.assertEqual([c["id"] for c in contacts], [contact["id"]])
        self.assertIsNone(contacts[0]["branch_id"])

    def test_contact_branch_must_belong_to_supplier(self):
        other_supplier = self.owner_client.post("/api/my-suppliers", json={"name": "Other"}).json()
        foreign_branch = self.owner_client.post(
            f"/api/my-suppliers/{other_supplier['id']}/branches", json={"name": "Far"}
        ).json()
        response = self.owner_client.post(f"{self.base}/contacts", json={"name": "Li", "branch_id": foreign_branch["id"]})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], "Branch not found")

    def test_other_users_get_404(self):
        for method, url in [
            ("get", self.base),
            ("delete", self.base),
            ("get", f"{self.base}/branches"),
            ("get", f"{self.base}/contacts"),
        ]:
            with self.subTest(method=method, url=url):
                response = getattr(self.other_client, method)(url)
                self.assertEqual(response.status_code, 404)
                self.assertEqual(response.json()["detail"], "Supplier not found")

    def test_delete_cascades(self):
        self.owner_client.post(f"{self.base}/branches", json={"name": "HQ"})
        self.owner_client.post(f"{self.base}/contacts", json={"name": "Li"})
        self.assertEqual(self.owner_client.delete(self.base).status_code, 204)
        self.assertEqual(self.db.rows("my_supplier_branches"), [])
        self.assertEqual(self.db.rows("my_supplier_contacts"), [])

    def test_dashboard_counts(self):
        self.owner_client.post("/api/products", json={"name": "Mug"})
        metrics = self.owner_client.get("/api/dashboard/metrics").json()
        self.assertEqual(metrics["suppliers_count"], 1)
        self.assertEqual(metrics["products_count"], 1)
        self.assertEqual(self.other_client.get("/api/dashboard/metrics").json()["suppliers_count"], 0)


if __name__ == "__main__":
    unittest.main()
