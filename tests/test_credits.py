import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest import mock

from fastapi import HTTPException
from postgrest.exceptions import APIError

from app.config import settings
from app.main import app
from app.modules.credits.service import CreditService
from app.modules.payments.routes import get_stripe_gateway
from tests.fake_supabase import FakeSupabase
from tests.helpers import ApiTestCase


class TestCreditDeduction(unittest.TestCase):
    def setUp(self):
        self.db = FakeSupabase()
        self.user = self.db.table("users").insert({"email": "c@example.com", "full_name": "C", "ai_credits": 60}).execute().data[0]
        self.service = CreditService(self.db)

    def test_concurrent_deductions_never_overdraw(self):
        """20 parallel charges of 5 against a balance of 60: exactly 12 succeed"""
        def charge(_):
            try:
                return self.service.deduct(self.user["id"], 5)
            except HTTPException as e:
                return e.status_code

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(charge, range(20)))

        self.assertEqual(results.count(400), 8)
        self.assertEqual(self.service.get_balance(self.user["id"]), 0)

    def test_insufficient_balance_leaves_credits(self):
        with self.assertRaises(HTTPException) as ctx:
            self.service.deduct(self.user["id"], 61)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(self.service.get_balance(self.user["id"]), 60)


class TestAiUsageApi(ApiTestCase):
    def test_usage_charges_agent_cost(self):
        user, client = self.client_for("ALUNO", ai_credits=12)
        cost = settings.ai_agent_costs["listing_generator"]

        response = client.post("/api/ai/usage", json={"agent_type": "listing_generator", "input_data": {"asin": "B0"}})
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json(), {"credits_used": cost, "remaining_credits": 12 - cost})

        history = client.get("/api/ai/usage").json()
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["input_data"], {"asin": "B0"})
        self.assertEqual(client.get("/api/ai/credits").json()["ai_credits"], 12 - cost)

    def test_sequential_uses_until_empty(self):
        cost = settings.ai_agent_costs["expert_amazon"]
        _, client = self.client_for("ALUNO", ai_credits=cost * 3)
        for remaining in (cost * 2, cost, 0):
            response = client.post("/api/ai/usage", json={"agent_type": "expert_amazon"})
            self.assertEqual(response.json()["remaining_credits"], remaining)

        response = client.post("/api/ai/usage", json={"agent_type": "expert_amazon"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Insufficient AI credits")
        self.assertEqual(len(self.db.rows("ai_usage_history")), 3)

    def test_unknown_agent(self):
        _, client = self.client_for("ALUNO", ai_credits=100)
        response = client.post("/api/ai/usage", json={"agent_type": "fortune_teller"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Unknown agent type: fortune_teller")
        self.assertEqual(client.get("/api/ai/credits").json()["ai_credits"], 100)

    def test_basic_users_cannot_use_agents(self):
        _, client = self.client_for("BASIC", ai_credits=100)
        self.assertEqual(client.post("/api/ai/usage", json={"agent_type": "expert_amazon"}).status_code, 403)

    def test_credits_lists_agent_costs(self):
        _, client = self.client_for("BASIC")
        body = client.get("/api/ai/credits").json()
        self.assertEqual(body["ai_credits"], 0)
        self.assertEqual(body["agent_costs"], settings.ai_agent_costs)


class TestPaymentsApi(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.user, self.user_client = self.client_for("BASIC")

    def _intent(self, credits=50):
        response = self.user_client.post("/api/create-payment-intent", json={"credits": credits})
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def test_create_intent_prices_credits(self):
        intent = self._intent(50)
        self.assertEqual(intent["amount"], 50 * settings.credit_price_cents)
        self.assertEqual(intent["currency"], settings.stripe_currency)
        stored = self.gateway.intents[intent["payment_intent_id"]]
        self.assertEqual(stored["metadata"], {"user_id": str(self.user["id"]), "credits": "50"})

    def test_invalid_credit_amounts(self):
        for credits in (0, -5, 100001):
            with self.subTest(credits=credits):
                response = self.user_client.post("/api/create-payment-intent", json={"credits": credits})
                self.assertEqual(response.status_code, 400)

    def test_confirm_adds_credits_once(self):
        intent_id = self._intent(50)["payment_intent_id"]
        self.gateway.succeed(intent_id)

        first = self.user_client.post("/api/confirm-payment", json={"payment_intent_id": intent_id})
        self.assertEqual(first.status_code, 200, first.text)
        self.assertEqual(first.json()["credits_added"], 50)
        self.assertEqual(first.json()["ai_credits"], 50)
        self.assertFalse(first.json()["already_processed"])

        replay = self.user_client.post("/api/confirm-payment", json={"payment_intent_id": intent_id})
        self.assertEqual(replay.status_code, 200)
        self.assertTrue(replay.json()["already_processed"])
        self.assertEqual(replay.json()["credits_added"], 0)
        self.assertEqual(replay.json()["ai_credits"], 50)

        self.assertEqual(len(self.db.rows("credit_purchases")), 1)
        actions = [row["action"] for row in self.db.rows("user_activity_log")]
        self.assertEqual(actions.count("ai_credits_purchased"), 1)

    def test_failed_confirmation_can_be_retried(self):
        """A confirmation that fails while crediting records nothing, so the retry still credits"""
        intent_id = self._intent(50)["payment_intent_id"]
        self.gateway.succeed(intent_id)

        timeout = APIError({"code": "57014", "message": "canceling statement due to statement timeout"})
        with mock.patch.object(self.db, "rpc_add_ai_credits", side_effect=timeout):
            first = self.user_client.post("/api/confirm-payment", json={"payment_intent_id": intent_id})
        self.assertEqual(first.status_code, 500)
        self.assertEqual(first.json()["detail"], "Failed to confirm payment")
        self.assertEqual(self.db.rows("credit_purchases"), [])

        retry = self.user_client.post("/api/confirm-payment", json={"payment_intent_id": intent_id})
        self.assertEqual(retry.status_code, 200, retry.text)
        self.assertFalse(retry.json()["already_processed"])
        self.assertEqual(retry.json()["credits_added"], 50)
        self.assertEqual(retry.json()["ai_credits"], 50)
        self.assertEqual(len(self.db.rows("credit_purchases")), 1)

    def test_unpaid_intent_is_rejected(self):
        intent_id = self._intent()["payment_intent_id"]
        response = self.user_client.post("/api/confirm-payment", json={"payment_intent_id": intent_id})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Payment not completed")

    def test_unknown_intent(self):
        response = self.user_client.post("/api/confirm-payment", json={"payment_intent_id": "pi_missing"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Invalid payment intent")

    def test_other_users_intent_is_forbidden(self):
        intent_id = self._intent()["payment_intent_id"]
        self.gateway.succeed(intent_id)
        _, thief = self.client_for("BASIC")
        response = thief.post("/api/confirm-payment", json={"payment_intent_id": intent_id})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(self.db.rows("credit_purchases"), [])

    def test_payments_unconfigured(self):
        del app.dependency_overrides[get_stripe_gateway]
        response = self.user_client.post("/api/create-payment-intent", json={"credits": 10})
        self.assertEqual(response.status_code, 503)

    def test_requires_login(self):
        self.assertEqual(self.client.post("/api/create-payment-intent", json={"credits": 10}).status_code, 401)


if __name__ == "__main__":
    unittest.main()
