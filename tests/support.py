"""Shared test cases: fresh schema per test, plus an HTTP client for API tests."""

import unittest

from fastapi.testclient import TestClient
from httpx import Response

from notekeeper.core.database import SessionLocal, engine
from notekeeper.main import app
from notekeeper.models import Base, User

PASSWORD = "password123"


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables before each test and drops them afterwards."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)

    def load_user(self, email: str) -> User | None:
        """Read the user row as currently stored (bypassing the session identity map)."""
        self.db.expire_all()
        return self.db.query(User).filter(User.email == email.lower()).first()


class ApiTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.client = TestClient(app)

    def signup(self, email: str, password: str = PASSWORD) -> Response:
        return self.client.post("/auth/signup", json={"email": email, "password": password})

    def login(self, email: str, password: str = PASSWORD) -> Response:
        return self.client.post("/auth/login", json={"email": email, "password": password})

    def token_for(self, email: str, password: str = PASSWORD) -> str:
        response = self.signup(email, password)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["token"]

    @staticmethod
    def bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
