from certadmin.core.toast import toast
from certadmin.models.enums import UserRole
from tests.utils.factories import create_admin_user_factory, create_certificate_factory


class TestAuthRedirect:
    def test_admin_should_redirect_to_login_without_session(self, test_client):
        response = test_client.get("/admin", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_detail_should_redirect_to_login_without_session(self, test_client):
        response = test_client.get("/admin/certificados/abc", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_root_should_redirect_to_admin(self, test_client):
        response = test_client.get("/", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/admin"

    def test_login_page_should_render(self, test_client):
        response = test_client.get("/login")

        assert response.status_code == 200
        assert "login-form" in response.text


class TestDashboard:
    def test_should_list_certificates_and_toasts(self, test_client, fake_db, login_as):
        login_as(UserRole.VIEWER)
        create_certificate_factory(fake_db, fullName="Beatriz Soto")
        toast.success("Cambios guardados")

        response = test_client.get("/admin")

        assert response.status_code == 200
        assert "Beatriz Soto" in response.text
        assert "Cambios guardados" in response.text

    def test_should_filter_by_search(self, test_client, fake_db, login_as):
        login_as(UserRole.VIEWER)
        create_certificate_factory(fake_db, fullName="Beatriz Soto")
        create_certificate_factory(fake_db, fullName="Carlos Ruiz", email="carlos@example.com")

        response = test_client.get("/admin", params={"q": "carlos"})

        assert "Carlos Ruiz" in response.text
        assert "Beatriz Soto" not in response.text


class TestCertificateDetail:
    def test_should_render_existing_certificate(self, test_client, fake_db, login_as, course_lm):
        login_as(UserRole.VIEWER)
        cert_id = create_certificate_factory(fake_db, fullName="Diego Mora", courseId="LM-2025-02")

        response = test_client.get(f"/admin/certificados/{cert_id}")

        assert response.status_code == 200
        assert "Diego Mora" in response.text

    def test_should_render_404_page_for_missing_certificate(self, test_client, login_as):
        login_as(UserRole.VIEWER)

        response = test_client.get("/admin/certificados/missing")

        assert response.status_code == 404
        assert "missing" in response.text


def test_courses_page_lists_courses(test_client, login_as, course_lm):
    login_as(UserRole.VIEWER)

    response = test_client.get("/admin/cursos")

    assert response.status_code == 200
    assert "Liderazgo y Management" in response.text


class TestRolesPage:
    def test_should_list_admin_users_and_history(self, test_client, fake_db, login_as):
        login_as(UserRole.MASTER_ADMIN, email="boss@example.com")
        create_admin_user_factory(fake_db, "lector@example.com", "VIEWER")
        cert_id = create_certificate_factory(fake_db, fullName="Beatriz Soto")
        test_client.delete(f"/api/certificates/{cert_id}")

        response = test_client.get("/admin/roles")

        assert response.status_code == 200
        assert "lector@example.com" in response.text
        assert "Beatriz Soto" in response.text

    def test_should_deny_non_master_admins(self, test_client, login_as):
        login_as(UserRole.ADMIN)

        response = test_client.get("/admin/roles")

        assert response.status_code == 403
        assert "Acceso denegado" in response.text

    def test_should_redirect_to_login_without_session(self, test_client):
        response = test_client.get("/admin/roles", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
