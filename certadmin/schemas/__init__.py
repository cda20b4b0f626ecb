# This file makes the 'schemas' directory a Python package.

from .user_schema import (
    TokenData, AuthUser, SessionCreateRequest, OkResponse, MeResponse
)

from .certificate_schema import (
    CertificateBase, CertificateCreate, CertificateUpdate,
    BulkIdsRequest, BulkStatusUpdateRequest, BulkStatusUpdateResponse, BulkDeleteResponse,
    StatusCounts, CertificateStats, NextSequenceResponse, EmailNoticeResponse, DeleteResponse
)

from .course_schema import (
    CourseBase, CourseCreate, CourseUpdate
)

from .notification_schema import (
    Toast, ToastCloseResponse
)

from .admin_user_schema import (
    AdminUserCreate, AdminUserDisplay, AdminUserSaveResponse, HistoryEntry, Pagination, HistoryPage
)


__all__ = [
    # User / session
    "TokenData", "AuthUser", "SessionCreateRequest", "OkResponse", "MeResponse",

    # Certificate
    "CertificateBase", "CertificateCreate", "CertificateUpdate",
    "BulkIdsRequest", "BulkStatusUpdateRequest", "BulkStatusUpdateResponse", "BulkDeleteResponse",
    "StatusCounts", "CertificateStats", "NextSequenceResponse", "EmailNoticeResponse", "DeleteResponse",

    # Course
    "CourseBase", "CourseCreate", "CourseUpdate",

    # Notifications
    "Toast", "ToastCloseResponse",

    # Admin users / history
    "AdminUserCreate", "AdminUserDisplay", "AdminUserSaveResponse", "HistoryEntry", "Pagination", "HistoryPage",
]
