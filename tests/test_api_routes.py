"""
Integration tests for the HTTP surface: bearer-token gate, envelopes and
error codes. Uses TestClient with the database, token service and hasher
swapped for in-memory test doubles via dependency_overrides.
"""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from gatekeeper.api.v1.auth import get_password_hasher, get_token_service
from gatekeeper.core.database import get_db
from gatekeeper.core.security import TokenService
from gatekeeper.main import app
from gatekeeper.models import AdvanceUser
from gatekeeper.services.accounts import UserAccountManager
from tests.helpers import fast_hasher, make_session_factory, profile, token_service

PREFIX = "/api/v1"


class ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.Session = make_session_factory()
        self.tokens = token_service()
        self.hasher = fast_hasher()

        def override_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_db
        app.dependency_overrides[get_token_service] = lambda: self.tokens
        app.dependency_overrides[get_password_hasher] = lambda: self.hasher
        self.client = TestClient(app)

        db = self.Session()
        try:
            self.admin_id = UserAccountManager(db, self.hasher).register(
                profile(username="admin", email="admin@example.com", password="admin-password")
            )
        finally:
            db.close()
        self.auth = {"Authorization": f"Bearer {self.tokens.issue(self.admin_id)}"}

    def tearDown(self) -> None:
        app.dependency_overrides.clear()


class TestAuthorizationGate(ApiTestCase):
    """NO_TOKEN, INVALID_TOKEN and UNAUTHORIZED on protected routes."""

    def test_missing_header(self) -> None:
        resp = self.client.get(f"{PREFIX}/advance/roles")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "NO_TOKEN")
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_header_without_credential(self) -> None:
        resp = self.client.get(f"{PREFIX}/advance/roles", headers={"Authorization": "Bearer"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "INVALID_TOKEN")

    def test_undecodable_token(self) -> None:
        resp = self.client.get(
            f"{PREFIX}/advance/users", headers={"Authorization": "Bearer not.a.jwt"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "INVALID_TOKEN")

    def test_expired_token(self) -> None:
        token = self.tokens.issue(self.admin_id, now=datetime.now(UTC) - timedelta(days=1))
        resp = self.client.get(
            f"{PREFIX}/advance/users", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "UNAUTHORIZED")

    def test_forged_token(self) -> None:
        token = TokenService("attacker-controlled-secret-0123456789").issue(self.admin_id)
        resp = self.client.get(
            f"{PREFIX}/advance/roles/dropdown", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "UNAUTHORIZED")

    def test_every_advance_route_is_protected(self) -> None:
        calls = [
            ("get", "/advance/users"),
            ("post", "/advance/users"),
            ("patch", f"/advance/users/{self.admin_id}"),
            ("get", "/advance/roles"),
            ("post", "/advance/roles"),
            ("get", "/advance/roles/permissions"),
            ("get", "/advance/roles/dropdown"),
        ]
        for method, path in calls:
            with self.subTest(method=method, path=path):
                kwargs = {"json": {}} if method in ("post", "patch") else {}
                resp = getattr(self.client, method)(f"{PREFIX}{path}", **kwargs)
                self.assertEqual(resp.status_code, 401)
                self.assertEqual(resp.json()["code"], "NO_TOKEN")


class TestLoginRoute(ApiTestCase):
    def test_login_success(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/login", json={"username": "admin", "password": "admin-password"}
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["code"], "USER_LOGGED_IN")
        data = body["data"]
        self.assertEqual(self.tokens.verify(data["access_token"]), self.admin_id)
        self.assertEqual(data["id"], self.admin_id)
        self.assertEqual(data["user_name"], "admin")
        self.assertEqual(data["user_type"], "advance")
        self.assertEqual(data["email"], "admin@example.com")
        self.assertIn("mobile_no", data)
        self.assertNotIn("$2b$", resp.text)

    def test_issued_token_opens_protected_routes(self) -> None:
        login = self.client.post(
            f"{PREFIX}/login", json={"username": "admin", "password": "admin-password"}
        )
        token = login.json()["data"]["access_token"]
        resp = self.client.get(
            f"{PREFIX}/advance/roles", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(resp.status_code, 200)

    def test_wrong_password_matches_unknown_user(self) -> None:
        wrong = self.client.post(
            f"{PREFIX}/login", json={"username": "admin", "password": "nope-nope"}
        )
        unknown = self.client.post(
            f"{PREFIX}/login", json={"username": "ghost", "password": "admin-password"}
        )
        self.assertEqual(wrong.status_code, unknown.status_code)
        self.assertEqual(wrong.json(), unknown.json())
        self.assertEqual(wrong.json()["code"], "INVALID_CREDENTIALS")

    def test_blank_input(self) -> None:
        resp = self.client.post(f"{PREFIX}/login", json={"username": "admin"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_INPUT")

    def test_non_json_body_is_invalid_input(self) -> None:
        resp = self.client.post(f"{PREFIX}/login", content=b"not json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_INPUT")


class TestUserRoutes(ApiTestCase):
    def _create_role(self, name: str = "Editor") -> int:
        resp = self.client.post(
            f"{PREFIX}/advance/roles",
            json={"name": name, "description": "", "permissions": {"U_VIEW": True}},
            headers=self.auth,
        )
        self.assertEqual(resp.status_code, 201)
        return resp.json()["data"]["id"]

    def test_register_user(self) -> None:
        role_id = self._create_role()
        resp = self.client.post(
            f"{PREFIX}/advance/users",
            json=profile(role_id=str(role_id), is_auto_property_assign="true"),
            headers=self.auth,
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["code"], "USER_CREATED")
        db = self.Session()
        try:
            user = db.get(AdvanceUser, resp.json()["data"]["id"])
            self.assertEqual(user.created_by, self.admin_id)
            self.assertIs(user.is_auto_property_assign, True)
        finally:
            db.close()

    def test_register_duplicate_username(self) -> None:
        first = self.client.post(f"{PREFIX}/advance/users", json=profile(), headers=self.auth)
        self.assertEqual(first.status_code, 201)
        resp = self.client.post(
            f"{PREFIX}/advance/users",
            json=profile(name="Someone Else", email="else@example.com"),
            headers=self.auth,
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["code"], "UQ_USERNAME")

    def test_register_missing_fields(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/advance/users", json={"username": "x"}, headers=self.auth
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_INPUT")

    def test_list_users_hides_password(self) -> None:
        self.client.post(f"{PREFIX}/advance/users", json=profile(), headers=self.auth)
        resp = self.client.get(f"{PREFIX}/advance/users", headers=self.auth)
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["count"], 2)
        self.assertEqual([u["username"] for u in data["users"]], ["admin", "ada"])
        for user in data["users"]:
            self.assertNotIn("password", user)
        self.assertNotIn("$2b$", resp.text)

    def test_patch_user(self) -> None:
        created = self.client.post(f"{PREFIX}/advance/users", json=profile(), headers=self.auth)
        user_id = created.json()["data"]["id"]
        role_id = self._create_role()
        resp = self.client.patch(
            f"{PREFIX}/advance/users/{user_id}",
            json={"name": "Ada King", "role_id": role_id},
            headers=self.auth,
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["name"], "Ada King")
        self.assertEqual(data["role_name"], "Editor")
        self.assertEqual(data["permissions"], {"U_VIEW": True})

    def test_patch_username_conflict(self) -> None:
        created = self.client.post(f"{PREFIX}/advance/users", json=profile(), headers=self.auth)
        user_id = created.json()["data"]["id"]
        resp = self.client.patch(
            f"{PREFIX}/advance/users/{user_id}", json={"username": "admin"}, headers=self.auth
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["code"], "UQ_USERNAME")

    def test_patch_missing_user(self) -> None:
        resp = self.client.patch(
            f"{PREFIX}/advance/users/9999", json={"name": "x"}, headers=self.auth
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["code"], "USER_NOT_FOUND")


class TestRoleRoutes(ApiTestCase):
    def test_permissions_by_module(self) -> None:
        resp = self.client.get(f"{PREFIX}/advance/roles/permissions", headers=self.auth)
        self.assertEqual(resp.status_code, 200)
        modules = resp.json()["data"]["permissions_by_module"]
        self.assertEqual([m["module"] for m in modules], ["Users", "Roles", "Reports"])
        self.assertEqual(
            modules[0]["permissions"],
            [
                {"id": 1, "code": "U_VIEW", "name": "View users"},
                {"id": 2, "code": "U_EDIT", "name": "Edit users"},
            ],
        )
        self.assertEqual(modules[2]["permissions"], [])

    def test_create_role_twice(self) -> None:
        body = {"name": "Editor", "description": "Edits", "permissions": {"U_EDIT": True}}
        first = self.client.post(f"{PREFIX}/advance/roles", json=body, headers=self.auth)
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["code"], "ROLES_CREATED")
        second = self.client.post(f"{PREFIX}/advance/roles", json=body, headers=self.auth)
        self.assertEqual(second.status_code, 409)
        self.assertEqual(second.json()["code"], "UQ_ROLE_NAME")

        listed = self.client.get(f"{PREFIX}/advance/roles", headers=self.auth).json()["data"]
        self.assertEqual(listed["count"], 1)
        self.assertEqual(listed["roles"][0]["name"], "Editor")
        self.assertEqual(listed["roles"][0]["created_by"], self.admin_id)

    def test_unknown_permission_code(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/advance/roles",
            json={"name": "Bad", "permissions": {"MISSING": True}},
            headers=self.auth,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "UNKNOWN_PERMISSION")

    def test_permissions_must_be_an_object(self) -> None:
        resp = self.client.post(
            f"{PREFIX}/advance/roles",
            json={"name": "Bad", "permissions": ["U_VIEW"]},
            headers=self.auth,
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "INVALID_INPUT")

    def test_dropdown(self) -> None:
        self.client.post(
            f"{PREFIX}/advance/roles", json={"name": "Viewer", "permissions": {}}, headers=self.auth
        )
        resp = self.client.get(f"{PREFIX}/advance/roles/dropdown", headers=self.auth)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"], [{"id": 1, "name": "Viewer"}])


class TestStoreFailures(ApiTestCase):
    """Store errors become a generic 500 without leaking SQL."""

    def test_database_error_is_generic(self) -> None:
        broken = MagicMock()
        broken.query.side_effect = OperationalError(
            'SELECT * FROM "advanceRoles"', {}, Exception("connection refused")
        )
        app.dependency_overrides[get_db] = lambda: broken
        resp = self.client.get(f"{PREFIX}/advance/roles", headers=self.auth)
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(
            resp.json(), {"code": "SERVER_ERROR", "message": "Internal server error"}
        )
        self.assertNotIn("advanceRoles", resp.text)


class TestHealth(ApiTestCase):
    def test_health_reports_database(self) -> None:
        resp = self.client.get(f"{PREFIX}/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")
        self.assertEqual(resp.json()["database"], "connected")
        self.assertEqual(resp.json()["catalog"], "seeded")

    def test_health_flags_unseeded_catalog(self) -> None:
        empty = make_session_factory(seed=False)

        def override_db():
            db = empty()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_db
        resp = self.client.get(f"{PREFIX}/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["catalog"], "empty")

    def test_health_reports_unreachable_database(self) -> None:
        broken = MagicMock()
        broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        app.dependency_overrides[get_db] = lambda: broken
        resp = self.client.get(f"{PREFIX}/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["database"], "disconnected")
        self.assertIsNone(resp.json()["catalog"])


if __name__ == "__main__":
    unittest.main()
