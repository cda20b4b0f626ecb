import pytest
from fastapi.testclient import TestClient

from certadmin.core.database import get_db
from certadmin.core.dependencies import get_optional_user
from certadmin.main import app
from certadmin.models.enums import UserRole
from certadmin.schemas.user_schema import AuthUser
from certadmin.services.toast_center import toast_center
from tests.utils.factories import create_course_factory
from tests.utils.fake_firestore import FakeFirestore


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def session_state():
    # Holds the user the overridden session dependency returns
    return {"user": None}


@pytest.fixture
def test_app(fake_db, session_state):
    def override_get_db():
        yield fake_db

    def override_get_optional_user():
        return session_state["user"]

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_optional_user] = override_get_optional_user

    toast_center.clear()
    toast_center.activate()

    yield app

    app.dependency_overrides.clear()
    toast_center.clear()


@pytest.fixture
def test_client(test_app):
    # Not used as a context manager: startup would try to reach Firebase
    return TestClient(test_app)


@pytest.fixture
def login_as(session_state):
    def _login(role: UserRole = UserRole.ADMIN, email: str = "staff@example.com") -> AuthUser:
        user = AuthUser(uid=f"uid-{role.value.lower()}", email=email, role=role)
        session_state["user"] = user
        return user

    return _login


@pytest.fixture
def course_lm(fake_db):
    return create_course_factory(fake_db, "LM")
