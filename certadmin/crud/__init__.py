# This file makes the 'crud' directory a Python package.
# Every function takes the Firestore client as its first argument.

from .admin_user_crud import (
    admin_user_doc_id, get_admin_role, list_admin_users, save_admin_user, delete_admin_user
)

from .history_crud import record_history, list_history

from .course_crud import (
    course_reference_candidates, get_course, find_referenced_course, ensure_course_reference,
    list_courses, create_course, update_course, delete_course
)

from .certificate_crud import (
    get_certificate, list_certificates, next_sequence, allocate_course_id, count_certificates_for_course,
    create_certificate, update_certificate, mark_email_sent, delete_certificate,
    bulk_update_status, bulk_delete, compute_stats
)


__all__ = [
    # Admin users
    "admin_user_doc_id", "get_admin_role", "list_admin_users", "save_admin_user", "delete_admin_user",

    # History
    "record_history", "list_history",

    # Course CRUD
    "course_reference_candidates", "get_course", "find_referenced_course", "ensure_course_reference",
    "list_courses", "create_course", "update_course", "delete_course",

    # Certificate CRUD
    "get_certificate", "list_certificates", "next_sequence", "allocate_course_id", "count_certificates_for_course",
    "create_certificate", "update_certificate", "mark_email_sent", "delete_certificate",
    "bulk_update_status", "bulk_delete", "compute_stats",
]
