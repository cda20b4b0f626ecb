import inspect

import pytest
from fastapi import Request
from firebase_admin.auth import InvalidSessionCookieError

from certadmin.core import dependencies, security
from certadmin.core.config import settings
from certadmin.core.dependencies import get_current_user, get_optional_user, require_admin, resolve_role
from certadmin.core.security import has_role, verify_session_cookie
from certadmin.crud.admin_user_crud import admin_user_doc_id, get_admin_role
from certadmin.models.enums import UserRole
from certadmin.schemas.user_schema import TokenData
from tests.utils.factories import create_admin_user_factory


@pytest.mark.parametrize(
    "user_role, required_role, expected",
    [
        (UserRole.MASTER_ADMIN, UserRole.ADMIN, True),
        (UserRole.ADMIN, UserRole.ADMIN, True),
        (UserRole.EDITOR, UserRole.ADMIN, False),
        (UserRole.VIEWER, UserRole.EDITOR, False),
        ("EDITOR", "VIEWER", True),
    ],
)
def test_has_role(user_role, required_role, expected):
    assert has_role(user_role, required_role) is expected


def test_admin_user_doc_id():
    assert admin_user_doc_id("Jane.Doe@Example.com") == "jane_doe@example_com"


class TestResolveRole:
    def test_should_use_admin_users_document(self, fake_db):
        create_admin_user_factory(fake_db, "editor@example.com", "EDITOR")

        assert resolve_role(fake_db, "Editor@Example.com") == UserRole.EDITOR

    def test_should_fall_back_to_viewer_for_unknown_stored_role(self, fake_db):
        create_admin_user_factory(fake_db, "odd@example.com", "SUPERUSER")

        assert get_admin_role(fake_db, "odd@example.com") == UserRole.VIEWER

    def test_should_grant_master_admin_from_settings(self, fake_db, monkeypatch):
        monkeypatch.setattr(settings, "MASTER_ADMIN_EMAILS_STR", "Boss@Example.com, other@example.com")

        assert resolve_role(fake_db, "boss@example.com") == UserRole.MASTER_ADMIN

    def test_should_default_to_viewer(self, fake_db, monkeypatch):
        monkeypatch.setattr(settings, "MASTER_ADMIN_EMAILS_STR", "")

        assert resolve_role(fake_db, "nobody@example.com") == UserRole.VIEWER


class TestVerifySessionCookie:
    @pytest.fixture(autouse=True)
    def _no_firebase_app(self, monkeypatch):
        monkeypatch.setattr(security, "get_firebase_app", lambda: None)

    def test_should_return_token_data(self, monkeypatch):
        monkeypatch.setattr(
            security.auth, "verify_session_cookie",
            lambda cookie, check_revoked: {"uid": "u1", "email": "staff@example.com"},
        )

        token_data = verify_session_cookie("cookie")

        assert token_data.firebase_uid == "u1"
        assert token_data.email == "staff@example.com"

    def test_should_return_none_for_invalid_cookie(self, monkeypatch):
        def reject(cookie, check_revoked):
            raise InvalidSessionCookieError("bad cookie")

        monkeypatch.setattr(security.auth, "verify_session_cookie", reject)

        assert verify_session_cookie("cookie") is None

    def test_should_return_none_without_email_claim(self, monkeypatch):
        monkeypatch.setattr(security.auth, "verify_session_cookie", lambda cookie, check_revoked: {"uid": "u1"})

        assert verify_session_cookie("cookie") is None


def make_request(cookie_header=None):
    headers = [(b"cookie", cookie_header.encode())] if cookie_header else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


class TestSessionDependencies:
    @pytest.mark.parametrize("dependency", [get_optional_user, get_current_user, require_admin])
    def test_should_be_sync_so_firebase_calls_run_in_thread_pool(self, dependency):
        assert not inspect.iscoroutinefunction(dependency)

    def test_should_build_user_from_session_cookie(self, fake_db, monkeypatch):
        create_admin_user_factory(fake_db, "editor@example.com", "EDITOR")
        seen = []

        def fake_verify(cookie):
            seen.append(cookie)
            return TokenData(firebase_uid="u1", email="editor@example.com")

        monkeypatch.setattr(dependencies, "verify_session_cookie", fake_verify)

        user = get_optional_user(make_request(f"{settings.SESSION_COOKIE_NAME}=abc"), db=fake_db)

        assert seen == ["abc"]
        assert user.uid == "u1"
        assert user.role == UserRole.EDITOR

    def test_should_return_none_without_cookie(self, fake_db):
        assert get_optional_user(make_request(), db=fake_db) is None
