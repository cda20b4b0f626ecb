import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from certadmin.core.exceptions import ConflictError, ValidationError
from certadmin.models.course_model import COLLECTION, Course
from certadmin.models.enums import CourseStatus
from certadmin.schemas.course_schema import CourseCreate, CourseUpdate, check_month_requires_edition

logger = logging.getLogger(__name__)

# "CODE-YEAR-NN", e.g. "LM-2025-03"
SEQUENCED_ID_PATTERN = re.compile(r"^(?P<code>.+)-(?P<year>\d{4})-(?P<seq>\d+)$")
_TRAILING_SEQUENCE = re.compile(r"-\d+$")

# Fields a partial update may explicitly clear
_NULLABLE_FIELDS = {"month", "edition", "drive_folder_id"}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def course_reference_candidates(certificate_course_id: str) -> List[str]:
    """
    Course ids a certificate `courseId` may point at, most specific first:
    the id itself, the id without its trailing "-NN" sequence, and the CODE of a CODE-YEAR-NN id.
    """
    candidates = [certificate_course_id]
    without_sequence = _TRAILING_SEQUENCE.sub("", certificate_course_id)
    if without_sequence and without_sequence != certificate_course_id:
        candidates.append(without_sequence)
    match = SEQUENCED_ID_PATTERN.match(certificate_course_id)
    if match:
        candidates.append(match.group("code"))
    return list(dict.fromkeys(candidates))


def get_course(db, course_id: str) -> Optional[Course]:
    """Fetches a course by its code (document id)."""
    logger.debug(f"Fetching course by ID: {course_id}")
    snapshot = db.collection(COLLECTION).document(course_id).get()
    if not snapshot.exists:
        return None
    return Course.from_snapshot(snapshot)


def find_referenced_course(db, certificate_course_id: str) -> Optional[Course]:
    for candidate in course_reference_candidates(certificate_course_id):
        course = get_course(db, candidate)
        if course:
            return course
    return None


def ensure_course_reference(db, certificate_course_id: str) -> Course:
    course = find_referenced_course(db, certificate_course_id)
    if course is None:
        logger.warning(f"Certificate courseId '{certificate_course_id}' does not reference an existing course.")
        raise ValidationError(
            message=f"courseId '{certificate_course_id}' does not reference an existing course.",
            field="courseId",
        )
    return course


def list_courses(db, status: Optional[CourseStatus] = None) -> List[Course]:
    """
    Lists courses ordered by name. Sorting and the status filter run in memory so no
    composite index is needed, and documents without a status count as active.
    """
    courses: List[Course] = []
    for snapshot in db.collection(COLLECTION).stream():
        try:
            courses.append(Course.from_snapshot(snapshot))
        except PydanticValidationError as e:
            logger.warning(f"Skipping malformed course document {snapshot.id}: {e}")

    if status is not None:
        courses = [course for course in courses if course.status == CourseStatus(status).value]

    courses.sort(key=lambda course: course.name.lower())
    return courses


def create_course(db, course_in: CourseCreate) -> Course:
    doc_ref = db.collection(COLLECTION).document(course_in.id)
    if doc_ref.get().exists:
        logger.warning(f"Course code already in use: {course_in.id}")
        raise ConflictError(message=f"A course with code '{course_in.id}' already exists.", resource="course")

    now = _now_iso()
    course = Course(**course_in.model_dump(), created_at=now, updated_at=now)
    doc_ref.set(course.to_firestore())
    logger.info(f"Course created: {course.id} ('{course.name}')")
    return course


def update_course(db, current: Course, course_in: CourseUpdate) -> Course:
    changes = {
        field: value
        for field, value in course_in.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }
    try:
        check_month_requires_edition(
            changes.get("month", current.month), changes.get("edition", current.edition)
        )
    except ValueError as e:
        raise ValidationError(message=str(e), field="edition")

    merged = Course.model_validate({**current.model_dump(), **changes, "updated_at": _now_iso()})
    stored = merged.to_firestore()
    update_data = {to_camel(field): stored[to_camel(field)] for field in changes}
    update_data["updatedAt"] = stored["updatedAt"]
    db.collection(COLLECTION).document(current.id).update(update_data)
    logger.info(f"Course {current.id} updated. Fields: {sorted(changes)}")
    return merged


def delete_course(db, course_id: str, referencing_certificates: int) -> None:
    if referencing_certificates:
        raise ConflictError(
            message=f"Course '{course_id}' is still referenced by {referencing_certificates} certificate(s).",
            resource="course",
        )
    db.collection(COLLECTION).document(course_id).delete()
    logger.info(f"Course deleted: {course_id}")
