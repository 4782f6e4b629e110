"""Unit tests for app.services.auth: register, login and refresh against an in-memory database."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError

from app.core.security import decode_access_token, decode_refresh_token
from app.models import User
from app.services import auth
from app.services.errors import (
    EMAIL_IN_USE,
    INVALID_CREDENTIALS,
    INVALID_TOKEN,
    EmailInUseError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from app.services.users import create_user

from support import DEFAULT_PASSWORD, fast_hashing, make_database, seed_user


class AuthServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        rounds = fast_hashing()
        rounds.start()
        self.addCleanup(rounds.stop)
        self.database = make_database()
        self.addCleanup(self.database.dispose)
        self.db = self.database.session()
        self.addCleanup(self.db.close)


class TestRegister(AuthServiceTestCase):
    def test_normalizes_email_and_defaults_role(self) -> None:
        result = auth.register(
            self.db, email="A@B.com", password=DEFAULT_PASSWORD, first_name="A", last_name="B"
        )
        self.assertEqual(result.user.email, "a@b.com")
        self.assertEqual(result.user.role.value, "USER")
        stored = self.db.query(User).one()
        self.assertEqual(stored.email, "a@b.com")
        self.assertNotEqual(stored.password_hash, DEFAULT_PASSWORD)

    def test_projection_never_contains_password(self) -> None:
        result = auth.register(
            self.db, email="x@acme.io", password=DEFAULT_PASSWORD, first_name="X", last_name="Y"
        )
        dumped = result.user.model_dump(by_alias=True)
        self.assertNotIn("passwordHash", dumped)
        self.assertNotIn("password_hash", dumped)
        self.assertNotIn("password", dumped)
        self.assertEqual(dumped["userId"], self.db.query(User).one().id)

    def test_issues_token_pair_for_new_user(self) -> None:
        result = auth.register(
            self.db, email="x@acme.io", password=DEFAULT_PASSWORD, first_name="X", last_name="Y"
        )
        access = decode_access_token(result.tokens.access_token)
        refresh = decode_refresh_token(result.tokens.refresh_token)
        self.assertEqual(access["sub"], str(result.user.user_id))
        self.assertEqual(access["email"], "x@acme.io")
        self.assertEqual(refresh["role"], "USER")

    def test_duplicate_email_case_insensitive(self) -> None:
        auth.register(self.db, email="dup@acme.io", password=DEFAULT_PASSWORD, first_name="A", last_name="B")
        with self.assertRaises(EmailInUseError) as ctx:
            auth.register(
                self.db, email="DUP@acme.io", password=DEFAULT_PASSWORD, first_name="C", last_name="D"
            )
        self.assertEqual(ctx.exception.code, EMAIL_IN_USE)
        self.assertEqual(self.db.query(User).count(), 1)


class TestRegisterRace(unittest.TestCase):
    """A concurrent insert that trips the unique index surfaces as EMAIL_IN_USE."""

    def test_integrity_error_maps_to_email_in_use(self) -> None:
        session = MagicMock()
        session.query.return_value.filter.return_value.first.return_value = None
        session.commit.side_effect = IntegrityError("INSERT", {}, Exception("unique"))
        with fast_hashing(), self.assertRaises(EmailInUseError):
            create_user(
                session, email="race@acme.io", password=DEFAULT_PASSWORD, first_name="R", last_name="C"
            )
        session.rollback.assert_called_once()
        session.refresh.assert_not_called()


class TestLogin(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = seed_user(self.database, email="login@acme.io")

    def test_success_case_insensitive_email(self) -> None:
        result = auth.login(self.db, email="LOGIN@acme.io", password=DEFAULT_PASSWORD)
        self.assertEqual(result.user.user_id, self.user.id)
        self.assertEqual(decode_access_token(result.tokens.access_token)["sub"], str(self.user.id))

    def test_wrong_password_and_unknown_email_are_indistinguishable(self) -> None:
        with self.assertRaises(InvalidCredentialsError) as wrong_password:
            auth.login(self.db, email="login@acme.io", password="not-the-password")
        with self.assertRaises(InvalidCredentialsError) as unknown_email:
            auth.login(self.db, email="nobody@acme.io", password=DEFAULT_PASSWORD)
        self.assertEqual(wrong_password.exception.code, INVALID_CREDENTIALS)
        self.assertEqual(wrong_password.exception.code, unknown_email.exception.code)
        self.assertEqual(wrong_password.exception.message, unknown_email.exception.message)


class TestRefresh(AuthServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = seed_user(self.database, email="refresh@acme.io")
        self.tokens = auth.login(self.db, email="refresh@acme.io", password=DEFAULT_PASSWORD).tokens

    def test_issues_new_pair(self) -> None:
        result = auth.refresh(self.db, self.tokens.refresh_token)
        self.assertEqual(result.user.user_id, self.user.id)
        self.assertEqual(decode_refresh_token(result.tokens.refresh_token)["sub"], str(self.user.id))

    def test_used_refresh_token_stays_valid(self) -> None:
        auth.refresh(self.db, self.tokens.refresh_token)
        result = auth.refresh(self.db, self.tokens.refresh_token)
        self.assertEqual(result.user.email, "refresh@acme.io")

    def test_new_tokens_carry_current_role(self) -> None:
        user = self.db.get(User, self.user.id)
        user.role = "ADMIN"
        self.db.commit()
        result = auth.refresh(self.db, self.tokens.refresh_token)
        self.assertEqual(decode_access_token(result.tokens.access_token)["role"], "ADMIN")

    def test_access_token_is_rejected(self) -> None:
        with self.assertRaises(InvalidTokenError) as ctx:
            auth.refresh(self.db, self.tokens.access_token)
        self.assertEqual(ctx.exception.code, INVALID_TOKEN)

    def test_garbage_token_is_rejected(self) -> None:
        with self.assertRaises(InvalidTokenError):
            auth.refresh(self.db, "not.a.jwt")

    def test_deleted_user_is_rejected(self) -> None:
        self.db.delete(self.db.get(User, self.user.id))
        self.db.commit()
        with self.assertRaises(InvalidTokenError):
            auth.refresh(self.db, self.tokens.refresh_token)
