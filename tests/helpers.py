import unittest

import stripe

from fastapi.testclient import TestClient

from app.core.rate_limit import limiter
from app.core.sessions import MemorySessionStore, get_session_store
from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.auth.service import hash_password, pwd_context
from app.modules.groups.service import get_group_id_by_name
from app.modules.payments.routes import get_stripe_gateway
from app.scripts.seed_access_control import seed_access_control
from tests.fake_supabase import FakeSupabase

PASSWORD = "secret123"

# Cheap hashes; the default cost makes every login slow
pwd_context.update(bcrypt__rounds=4)
limiter.enabled = False


class FakeStripeGateway:
    """Keeps payment intents in a dict, keyed by id."""

    def __init__(self):
        self.intents = {}
        self.created = []

    def create_payment_intent(self, amount, currency, metadata):
        intent_id = f"pi_test_{len(self.created) + 1}"
        intent = {
            "id": intent_id,
            "client_secret": f"{intent_id}_secret",
            "amount": amount,
            "currency": currency,
            "status": "requires_payment_method",
            "metadata": dict(metadata),
        }
        self.intents[intent_id] = intent
        self.created.append(intent)
        return dict(intent)

    def retrieve_payment_intent(self, payment_intent_id):
        if payment_intent_id not in self.intents:
            raise stripe.InvalidRequestError(f"No such payment_intent: {payment_intent_id}", "id")
        return dict(self.intents[payment_intent_id])

    def succeed(self, payment_intent_id):
        self.intents[payment_intent_id]["status"] = "succeeded"


class ApiTestCase(unittest.TestCase):
    """Runs the FastAPI app against an in-memory database with seeded groups."""

    def setUp(self):
        self.db = FakeSupabase()
        seed_access_control(self.db)
        self.store = MemorySessionStore()
        self.gateway = FakeStripeGateway()
        app.dependency_overrides[get_supabase] = lambda: self.db
        app.dependency_overrides[get_session_store] = lambda: self.store
        app.dependency_overrides[get_stripe_gateway] = lambda: self.gateway
        self.client = TestClient(app)
        self._emails = 0

    def tearDown(self):
        self.client.close()
        app.dependency_overrides.clear()

    def create_user(self, group="ALUNO", email=None, password=PASSWORD, **extra):
        """Insert a user straight into the database and return the row"""
        if email is None:
            self._emails += 1
            email = f"user{self._emails}@example.com"
        row = {
            "email": email,
            "password": hash_password(password),
            "full_name": extra.pop("full_name", email.split("@")[0].title()),
            "group_id": get_group_id_by_name(self.db, group) if group else None,
            "is_active": True,
            "ai_credits": 0,
        }
        row.update(extra)
        return self.db.table("users").insert(row).execute().data[0]

    def login(self, email, password=PASSWORD, client=None):
        client = client or self.client
        return client.post("/api/auth/login", json={"email": email, "password": password})

    def client_for(self, group="ALUNO", **extra):
        """Return (user row, TestClient holding a session for that user)"""
        user = self.create_user(group, **extra)
        client = TestClient(app)
        self.addCleanup(client.close)
        response = self.login(user["email"], client=client)
        self.assertEqual(response.status_code, 200, response.text)
        return user, client
