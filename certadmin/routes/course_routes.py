from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
import logging

from certadmin.core.database import get_db
from certadmin.core.dependencies import get_course_or_404, require_admin, require_viewer
from certadmin.core.toast import ToastDispatcher, get_toaster
from certadmin.crud import course_crud as crud
from certadmin.crud.certificate_crud import count_certificates_for_course
from certadmin.crud.history_crud import record_history
from certadmin.models.course_model import Course
from certadmin.models.enums import CourseStatus
from certadmin.schemas import course_schema as schemas
from certadmin.schemas.certificate_schema import DeleteResponse
from certadmin.schemas.user_schema import AuthUser

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/courses", tags=["Courses"])

ENTITY_TYPE = "course"


@router.get("", response_model=List[Course])
def read_courses_list(
    course_status: Optional[CourseStatus] = Query(None, alias="status"),
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_viewer),
):
    """
    Get the list of courses ordered by name.
    Supports filtering by status (active or archived).
    """
    logger.debug(f"Fetching courses with status: {course_status}")
    return crud.list_courses(db, status=course_status)


@router.post("", response_model=Course, status_code=status.HTTP_201_CREATED)
def create_new_course(
    course_in: schemas.CourseCreate,
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_admin),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """
    Create a new course. (Admin only)
    The course code becomes the document id and cannot be changed later.
    """
    logger.info(f"Admin user {current_user.email} creating course: {course_in.id}")
    course = crud.create_course(db, course_in)
    record_history(db, "create", ENTITY_TYPE, course.id, course.name, current_user.email)
    toaster.success(f"Curso {course.id} creado")
    return course


@router.get("/{course_id}", response_model=Course)
def read_single_course(
    current_user: AuthUser = Depends(require_viewer),
    course: Course = Depends(get_course_or_404),
):
    return course


@router.put("/{course_id}", response_model=Course)
def update_existing_course(
    course_in: schemas.CourseUpdate,
    current_user: AuthUser = Depends(require_admin),
    course: Course = Depends(get_course_or_404),
    db=Depends(get_db),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """
    Update an existing course. (Admin only)
    Fields left out of the body keep their current value.
    """
    logger.info(f"Admin user {current_user.email} updating course {course.id}")
    updated = crud.update_course(db, course, course_in)
    record_history(
        db, "update", ENTITY_TYPE, updated.id, updated.name, current_user.email,
        details={"fields": sorted(course_in.model_dump(exclude_unset=True))},
    )
    toaster.success(f"Curso {updated.id} actualizado")
    return updated


@router.delete("/{course_id}", response_model=DeleteResponse)
def delete_existing_course(
    current_user: AuthUser = Depends(require_admin),
    course: Course = Depends(get_course_or_404),
    db=Depends(get_db),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """
    Delete a course. (Admin only)
    Refused while any certificate still references it.
    """
    logger.info(f"Admin user {current_user.email} deleting course {course.id}")
    crud.delete_course(db, course.id, count_certificates_for_course(db, course.id))
    record_history(db, "delete", ENTITY_TYPE, course.id, course.name, current_user.email)
    toaster.success(f"Curso {course.id} eliminado")
    return DeleteResponse(message="Curso eliminado")
