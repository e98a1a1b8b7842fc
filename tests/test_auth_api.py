"""HTTP tests for /api/auth and the authorization gate."""

import unittest
from datetime import timedelta
from unittest.mock import patch

from support import PASSWORD, auth_headers, create_user, make_client, reset_database

from portal_api.api.v1.auth import check_roles
from portal_api.core.config import get_settings, settings
from portal_api.core.errors import Forbidden, Unauthenticated
from portal_api.core.limiter import limiter
from portal_api.core.roles import ADMIN_ROLES
from portal_api.core.security import create_access_token, create_refresh_token
from portal_api.models import User
from portal_api.schemas.auth import AuthContext


class AuthApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        reset_database()
        self.client = make_client()

    def login(self, email: str, password: str = PASSWORD):
        return self.client.post("/api/auth/login", json={"email": email, "password": password})


class TestLoginEndpoint(AuthApiTestCase):
    def test_login_envelope(self) -> None:
        create_user("ana@senado.bo", role="EDITOR")
        response = self.login("ana@senado.bo")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["user"]["role"], "EDITOR")
        self.assertEqual(body["data"]["tokens"]["token_type"], "bearer")
        self.assertNotIn("password_hash", body["data"]["user"])

    def test_wrong_password_is_401_with_challenge(self) -> None:
        create_user("ana@senado.bo")
        response = self.login("ana@senado.bo", "Wrong-pass1")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers.get("www-authenticate"), "Bearer")
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["code"], "InvalidCredentials")

    def test_malformed_body_is_400_with_field_errors(self) -> None:
        response = self.client.post("/api/auth/login", json={"email": "not-an-email"})
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["code"], "ValidationError")
        fields = {e["field"] for e in body["errors"]}
        self.assertIn("email", fields)
        self.assertIn("password", fields)


class TestRegisterEndpoint(AuthApiTestCase):
    def test_register_then_duplicate(self) -> None:
        payload = {"email": "new@x.com", "password": PASSWORD, "first_name": "Ana"}
        response = self.client.post("/api/auth/register", json=payload)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["data"]["user"]["role"], "CITIZEN")

        response = self.client.post("/api/auth/register", json=payload)
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["code"], "DuplicateEmail")

    def test_register_weak_password(self) -> None:
        response = self.client.post(
            "/api/auth/register", json={"email": "new@x.com", "password": "weakpass"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "ValidationError")


class TestSessionEndpoints(AuthApiTestCase):
    def test_refresh_logout_flow(self) -> None:
        create_user("ana@senado.bo")
        tokens = self.login("ana@senado.bo").json()["data"]["tokens"]
        headers = {"Authorization": f"Bearer {tokens['access_token']}"}

        response = self.client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        self.assertEqual(response.status_code, 200)
        rotated = response.json()["data"]

        response = self.client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "RevokedToken")

        response = self.client.post("/api/auth/logout", headers=headers)
        self.assertEqual(response.status_code, 200)
        response = self.client.post(
            "/api/auth/refresh", json={"refresh_token": rotated["refresh_token"]}
        )
        self.assertEqual(response.status_code, 401)

    def test_refresh_with_access_token_is_invalid(self) -> None:
        user = create_user("ana@senado.bo")
        access = create_access_token(user.id, get_settings())
        response = self.client.post("/api/auth/refresh", json={"refresh_token": access})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "InvalidToken")

    def test_refresh_for_deleted_identity(self) -> None:
        refresh = create_refresh_token(999, get_settings())
        response = self.client.post("/api/auth/refresh", json={"refresh_token": refresh})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "UnknownSubject")

    def test_change_password(self) -> None:
        user = create_user("ana@senado.bo")
        response = self.client.post(
            "/api/auth/change-password",
            json={"current_password": PASSWORD, "new_password": "Another-pass2"},
            headers=auth_headers(user),
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.login("ana@senado.bo").status_code, 401)
        self.assertEqual(self.login("ana@senado.bo", "Another-pass2").status_code, 200)


class TestGate(AuthApiTestCase):
    def test_me_requires_token(self) -> None:
        response = self.client.get("/api/auth/me")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "MissingToken")
        self.assertEqual(response.headers.get("www-authenticate"), "Bearer")

    def test_me_returns_identity(self) -> None:
        user = create_user("ana@senado.bo", role="VIEWER")
        response = self.client.get("/api/auth/me", headers=auth_headers(user))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["email"], "ana@senado.bo")

    def test_expired_token(self) -> None:
        user = create_user("ana@senado.bo")
        token = create_access_token(user.id, get_settings(), expires_delta=timedelta(seconds=-1))
        response = self.client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "ExpiredToken")

    def test_inactive_identity_rejected(self) -> None:
        user = create_user("ana@senado.bo", status="INACTIVE")
        response = self.client.get("/api/auth/me", headers=auth_headers(user))
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "AccountNotActive")

    def test_role_outside_allow_list_is_403(self) -> None:
        user = create_user("ana@senado.bo", role="MODERATOR")
        response = self.client.get("/api/content/stats", headers=auth_headers(user))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "Forbidden")


class TestValidateEndpoint(AuthApiTestCase):
    def test_validate_never_401(self) -> None:
        response = self.client.post("/api/auth/validate", json={"token": "garbage"})
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["data"]["valid"])

    def test_validate_header_token(self) -> None:
        user = create_user("ana@senado.bo")
        response = self.client.post("/api/auth/validate", headers=auth_headers(user))
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertTrue(data["valid"])
        self.assertEqual(data["decoded"]["sub"], str(user.id))


class TestMisc(AuthApiTestCase):
    def test_health(self) -> None:
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertIn("timestamp", body)

    def test_unknown_route_uses_envelope(self) -> None:
        response = self.client.get("/api/nope")
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.json()["success"])


class TestCheckRoles(unittest.TestCase):
    def test_missing_context_fails_closed(self) -> None:
        with self.assertRaises(Unauthenticated):
            check_roles(None, ADMIN_ROLES)

    def test_role_outside_allow_list_is_forbidden(self) -> None:
        context = AuthContext(user=User(id=7, email="v@senado.bo", role="VIEWER"), token="t")
        with self.assertRaises(Forbidden):
            check_roles(context, ADMIN_ROLES)


class TestAuthRateLimit(AuthApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        limiter.reset()
        patcher = patch.object(limiter, "enabled", True)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(limiter.reset)

    def test_excess_logins_get_rate_limited_envelope(self) -> None:
        allowed = int(settings.AUTH_RATE_LIMIT.split("/")[0])
        for _ in range(allowed):
            self.assertEqual(self.login("nadie@senado.bo").status_code, 401)
        response = self.login("nadie@senado.bo")
        self.assertEqual(response.status_code, 429)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["code"], "RateLimited")
