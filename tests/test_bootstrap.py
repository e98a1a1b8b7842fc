"""Startup provisioning of the super admin."""

import unittest
from unittest.mock import MagicMock, patch

from pydantic import SecretStr
from sqlalchemy.exc import OperationalError
from support import TestingSessionLocal, create_user, reset_database

from portal_api.core import lifespan
from portal_api.core.config import get_settings
from portal_api.models import User
from portal_api.services.bootstrap import ensure_super_admin


class TestEnsureSuperAdmin(unittest.TestCase):
    def setUp(self) -> None:
        reset_database()
        self.db = TestingSessionLocal()

    def tearDown(self) -> None:
        self.db.close()

    def settings(self, password: str | None):
        return get_settings().model_copy(
            update={
                "SUPER_ADMIN_EMAIL": "root@senado.bo",
                "SUPER_ADMIN_PASSWORD": SecretStr(password) if password else None,
            }
        )

    def test_skipped_without_password(self) -> None:
        self.assertIsNone(ensure_super_admin(self.db, self.settings(None)))
        self.assertEqual(self.db.query(User).count(), 0)

    def test_creates_once(self) -> None:
        settings = self.settings("Root-pass1")
        user = ensure_super_admin(self.db, settings)
        self.assertIsNotNone(user)
        self.assertEqual(user.role, "SUPER_ADMIN")
        self.assertEqual(user.status, "ACTIVE")
        self.assertEqual(user.profile["first_name"], "Super")

        self.assertIsNone(ensure_super_admin(self.db, settings))
        self.assertEqual(self.db.query(User).count(), 1)

    def test_existing_identity_is_not_promoted(self) -> None:
        create_user("root@senado.bo", role="EDITOR")
        with self.assertLogs("portal_api.services.bootstrap", level="WARNING"):
            self.assertIsNone(ensure_super_admin(self.db, self.settings("Root-pass1")))
        self.assertEqual(self.db.query(User).one().role, "EDITOR")

    def test_weak_password_is_logged_not_raised(self) -> None:
        with self.assertLogs("portal_api.services.bootstrap", level="ERROR"):
            self.assertIsNone(ensure_super_admin(self.db, self.settings("weak")))
        self.assertEqual(self.db.query(User).count(), 0)


class TestRunBootstrap(unittest.TestCase):
    """The lifespan hook logs a database failure and lets startup continue."""

    def test_failure_is_logged_and_swallowed(self) -> None:
        session = MagicMock()
        failure = OperationalError("SELECT 1", {}, Exception("database down"))
        with (
            patch.object(lifespan, "SessionLocal", return_value=session),
            patch.object(lifespan, "ensure_super_admin", side_effect=failure),
            self.assertLogs("portal_api.core.lifespan", level="ERROR"),
        ):
            lifespan.run_bootstrap()
        session.rollback.assert_called_once()
        session.close.assert_called_once()

    def test_unexpected_error_does_not_abort_startup(self) -> None:
        session = MagicMock()
        with (
            patch.object(lifespan, "SessionLocal", return_value=session),
            patch.object(lifespan, "ensure_super_admin", side_effect=ValueError("bad salt")),
            self.assertLogs("portal_api.core.lifespan", level="ERROR"),
        ):
            lifespan.run_bootstrap()
        session.close.assert_called_once()
