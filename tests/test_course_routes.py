import pytest

from certadmin.models.enums import UserRole
from tests.utils.factories import create_certificate_factory, create_course_factory


def course_payload(**overrides):
    payload = {
        "id": "DIP-IA",
        "name": "Diplomado en Inteligencia Artificial",
        "courseType": "Diplomado",
        "year": 2025,
        "month": 3,
        "edition": 1,
        "origin": "nuevo",
        "status": "active",
    }
    payload.update(overrides)
    return payload


class TestListCourses:
    def test_should_sort_by_name_and_filter_by_status(self, test_client, fake_db, login_as):
        login_as(UserRole.VIEWER)
        create_course_factory(fake_db, "ZT", name="Taller de Zapatería")
        create_course_factory(fake_db, "AR", name="Arquitectura")
        create_course_factory(fake_db, "OLD", name="Marketing 2010", status="archived")

        response = test_client.get("/api/courses")
        assert [c["id"] for c in response.json()] == ["AR", "OLD", "ZT"]

        response = test_client.get("/api/courses", params={"status": "active"})
        assert [c["id"] for c in response.json()] == ["AR", "ZT"]


class TestCreateCourse:
    def test_admin_should_create_course(self, test_client, fake_db, login_as):
        login_as(UserRole.ADMIN)

        response = test_client.post("/api/courses", json=course_payload())

        assert response.status_code == 201
        assert response.json()["courseType"] == "Diplomado"
        stored = fake_db.docs("courses")["DIP-IA"]
        assert stored["id"] == "DIP-IA"
        assert stored["edition"] == 1
        assert list(fake_db.docs("systemHistory").values())[0]["entityType"] == "course"

    def test_should_return_409_for_duplicate_code(self, test_client, fake_db, login_as):
        login_as(UserRole.ADMIN)
        create_course_factory(fake_db, "DIP-IA")

        response = test_client.post("/api/courses", json=course_payload())

        assert response.status_code == 409

    def test_editor_should_not_create(self, test_client, login_as):
        login_as(UserRole.EDITOR)

        response = test_client.post("/api/courses", json=course_payload())

        assert response.status_code == 403

    @pytest.mark.parametrize(
        "overrides",
        [
            {"id": "dip-ia"},
            {"id": "X" * 21},
            {"month": 13},
            {"month": 4, "edition": None},
            {"edition": 0},
            {"courseType": "Congreso"},
        ],
    )
    def test_should_return_422_for_invalid_body(self, test_client, login_as, overrides):
        login_as(UserRole.ADMIN)

        response = test_client.post("/api/courses", json=course_payload(**overrides))

        assert response.status_code == 422


class TestUpdateCourse:
    def test_should_update_only_sent_fields(self, test_client, fake_db, login_as):
        login_as(UserRole.ADMIN)
        create_course_factory(fake_db, "LM", name="Liderazgo", driveFolderId="folder-1")

        response = test_client.put("/api/courses/LM", json={"status": "archived"})

        assert response.status_code == 200
        stored = fake_db.docs("courses")["LM"]
        assert stored["status"] == "archived"
        assert stored["name"] == "Liderazgo"
        assert stored["driveFolderId"] == "folder-1"

    def test_should_require_edition_when_month_is_set(self, test_client, fake_db, login_as):
        login_as(UserRole.ADMIN)
        create_course_factory(fake_db, "LM")

        response = test_client.put("/api/courses/LM", json={"month": 5})

        assert response.status_code == 400
        assert fake_db.docs("courses")["LM"]["month"] is None

    def test_should_return_404_for_missing_course(self, test_client, login_as):
        login_as(UserRole.ADMIN)

        response = test_client.put("/api/courses/NOPE", json={"name": "x"})

        assert response.status_code == 404


class TestDeleteCourse:
    def test_should_refuse_while_referenced(self, test_client, fake_db, login_as):
        login_as(UserRole.ADMIN)
        create_course_factory(fake_db, "LM")
        create_certificate_factory(fake_db, courseId="LM-2025-01")

        response = test_client.delete("/api/courses/LM")

        assert response.status_code == 409
        assert "LM" in fake_db.docs("courses")

    def test_should_delete_unreferenced_course(self, test_client, fake_db, login_as):
        login_as(UserRole.ADMIN)
        create_course_factory(fake_db, "LM")
        create_certificate_factory(fake_db, courseId="LMX-2025-01")

        response = test_client.delete("/api/courses/LM")

        assert response.status_code == 200
        assert "LM" not in fake_db.docs("courses")
