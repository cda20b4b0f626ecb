from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from typing import Optional
import logging

from certadmin.core.config import settings
from certadmin.core.database import get_db
from certadmin.core.dependencies import get_optional_user
from certadmin.core.security import has_role
from certadmin.crud import admin_user_crud, certificate_crud, course_crud, history_crud
from certadmin.models.enums import CourseStatus, DeliveryStatus, UserRole
from certadmin.schemas.user_schema import AuthUser
from certadmin.services.toast_center import ToastCenter, get_toast_center

logger = logging.getLogger(__name__)
# HTML pages for staff. The JSON API lives under /api.
router = APIRouter(tags=["Admin Pages"], include_in_schema=False)

templates = Jinja2Templates(directory=settings.PAGES_TEMPLATES_DIR)

LOGIN_PATH = "/login"
RECENT_HISTORY_LIMIT = 20

DELIVERY_STATUS_LABELS = {
    DeliveryStatus.FILED.value: "En archivo",
    DeliveryStatus.READY_FOR_DELIVERY.value: "Listo para entrega",
    DeliveryStatus.DELIVERED.value: "Entregado",
    DeliveryStatus.SENT_DIGITALLY.value: "Digital enviado",
    DeliveryStatus.VOIDED.value: "Anulado",
}


def redirect_to_login() -> RedirectResponse:
    return RedirectResponse(LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)


def _page_context(user: Optional[AuthUser], center: ToastCenter, **extra) -> dict:
    context = {
        "app_name": settings.PROJECT_NAME,
        "user": user,
        "toasts": center.active(),
        "status_labels": DELIVERY_STATUS_LABELS,
    }
    context.update(extra)
    return context


@router.get("/")
def read_root():
    return RedirectResponse("/admin", status_code=status.HTTP_303_SEE_OTHER)


@router.get(LOGIN_PATH)
def login_page(
    request: Request,
    user: Optional[AuthUser] = Depends(get_optional_user),
    center: ToastCenter = Depends(get_toast_center),
):
    if user is not None:
        return RedirectResponse("/admin", status_code=status.HTTP_303_SEE_OTHER)
    firebase_config = {
        "apiKey": settings.FIREBASE_WEB_API_KEY,
        "authDomain": settings.FIREBASE_WEB_AUTH_DOMAIN,
        "projectId": settings.FIREBASE_WEB_PROJECT_ID,
    }
    return templates.TemplateResponse(
        request, "login.html", _page_context(None, center, firebase_config=firebase_config)
    )


@router.get("/admin")
def admin_dashboard(
    request: Request,
    q: Optional[str] = Query(None),
    delivery_status: Optional[DeliveryStatus] = Query(None, alias="deliveryStatus"),
    year: Optional[int] = Query(None),
    user: Optional[AuthUser] = Depends(get_optional_user),
    db=Depends(get_db),
    center: ToastCenter = Depends(get_toast_center),
):
    """
    Dashboard: statistics plus the filtered certificate list.
    Without a valid session the browser is sent to the login page.
    """
    if user is None:
        logger.debug("No session for /admin, redirecting to login.")
        return redirect_to_login()

    certificates = certificate_crud.list_certificates(db, search=q, delivery_status=delivery_status, year=year)
    stats = certificate_crud.compute_stats(db)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        _page_context(
            user, center,
            certificates=certificates,
            stats=stats,
            filters={"q": q or "", "deliveryStatus": delivery_status.value if delivery_status else "", "year": year or ""},
        ),
    )


@router.get("/admin/certificados/{certificate_id}")
def certificate_detail_page(
    request: Request,
    certificate_id: str,
    user: Optional[AuthUser] = Depends(get_optional_user),
    db=Depends(get_db),
    center: ToastCenter = Depends(get_toast_center),
):
    if user is None:
        return redirect_to_login()

    certificate = certificate_crud.get_certificate(db, certificate_id)
    if certificate is None:
        logger.info(f"Certificate detail page: {certificate_id} not found.")
        return templates.TemplateResponse(
            request,
            "not_found.html",
            _page_context(user, center, message=f"Certificado {certificate_id} no encontrado."),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    course = course_crud.find_referenced_course(db, certificate.course_id)
    return templates.TemplateResponse(
        request, "certificate_detail.html", _page_context(user, center, certificate=certificate, course=course)
    )


@router.get("/admin/cursos")
def courses_page(
    request: Request,
    course_status: Optional[CourseStatus] = Query(None, alias="status"),
    user: Optional[AuthUser] = Depends(get_optional_user),
    db=Depends(get_db),
    center: ToastCenter = Depends(get_toast_center),
):
    if user is None:
        return redirect_to_login()

    courses = course_crud.list_courses(db, status=course_status)
    return templates.TemplateResponse(
        request,
        "courses.html",
        _page_context(user, center, courses=courses, status_filter=course_status.value if course_status else ""),
    )


@router.get("/admin/roles")
def roles_page(
    request: Request,
    user: Optional[AuthUser] = Depends(get_optional_user),
    db=Depends(get_db),
    center: ToastCenter = Depends(get_toast_center),
):
    """Staff roles and the latest audit entries. Master admins only."""
    if user is None:
        return redirect_to_login()
    if not has_role(user.role, UserRole.MASTER_ADMIN):
        logger.info(f"Roles page denied for {user.email} ({user.role}).")
        return templates.TemplateResponse(
            request,
            "not_found.html",
            _page_context(user, center, heading="Acceso denegado", message="Solo MASTER_ADMIN puede gestionar roles."),
            status_code=status.HTTP_403_FORBIDDEN,
        )

    admin_users = admin_user_crud.list_admin_users(db)
    history = history_crud.list_history(db, limit=RECENT_HISTORY_LIMIT).data
    return templates.TemplateResponse(
        request, "roles.html", _page_context(user, center, admin_users=admin_users, history=history)
    )
