from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
import logging

from certadmin.core.database import get_db
from certadmin.core.dependencies import (
    get_certificate_or_404,
    require_admin,
    require_editor,
    require_master_admin,
    require_viewer,
)
from certadmin.core.exceptions import ExternalServiceError, ValidationError
from certadmin.core.toast import ToastDispatcher, get_toaster
from certadmin.crud import certificate_crud as crud
from certadmin.crud.history_crud import record_history
from certadmin.models.certificate_model import Certificate
from certadmin.models.enums import DeliveryStatus
from certadmin.schemas import certificate_schema as schemas
from certadmin.schemas.user_schema import AuthUser
from certadmin.services import email_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/certificates", tags=["Certificates"])

ENTITY_TYPE = "certificate"


@router.get("", response_model=List[Certificate])
def read_certificates(
    q: Optional[str] = Query(None, description="Search over name, course name, course id and email"),
    delivery_status: Optional[DeliveryStatus] = Query(None, alias="deliveryStatus"),
    year: Optional[int] = Query(None),
    course_id: Optional[str] = Query(None, alias="courseId"),
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_viewer),
):
    """
    List certificates, newest first. All filters are optional and combine.
    """
    return crud.list_certificates(db, search=q, delivery_status=delivery_status, year=year, course_id=course_id)


@router.post("", response_model=Certificate, status_code=status.HTTP_201_CREATED)
def create_new_certificate(
    certificate_in: schemas.CertificateCreate,
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_editor),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """
    Create a certificate. (Editor and above)
    A sequenced courseId (CODE-YEAR-NN) for the certificate year gets the next free number.
    """
    logger.info(f"User {current_user.email} creating certificate for '{certificate_in.full_name}' ({certificate_in.course_id})")
    certificate = crud.create_certificate(db, certificate_in)
    record_history(
        db, "create", ENTITY_TYPE, certificate.id, certificate.full_name, current_user.email,
        details={"courseId": certificate.course_id},
    )
    toaster.success(f"Certificado de {certificate.full_name} creado")
    return certificate


@router.get("/stats", response_model=schemas.CertificateStats)
def read_certificate_stats(
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_viewer),
):
    """Totals by delivery status and by year."""
    return crud.compute_stats(db)


@router.get("/next-sequence", response_model=schemas.NextSequenceResponse)
def read_next_sequence(
    course_code: Optional[str] = Query(None, alias="courseCode"),
    year: Optional[int] = Query(None),
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_viewer),
):
    """Next free sequence number for a course code and year, e.g. LM-2025-04."""
    if not course_code or not course_code.strip() or year is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="courseCode and year are required.",
        )
    sequence, formatted_id = crud.next_sequence(db, course_code.strip(), year)
    return schemas.NextSequenceResponse(next_sequence=sequence, formatted_id=formatted_id)


@router.put("/bulk", response_model=schemas.BulkStatusUpdateResponse)
def bulk_update_certificates(
    payload: schemas.BulkStatusUpdateRequest,
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_admin),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """
    Admin: set the delivery status of up to 100 certificates at once.
    The request is all-or-nothing.
    """
    logger.info(f"Admin {current_user.email} bulk-updating {len(payload.ids)} certificate(s) to {payload.delivery_status}")
    updated = crud.bulk_update_status(db, payload.ids, payload.delivery_status)
    message = f"{updated} certificado(s) actualizado(s)"
    record_history(
        db, "bulk_update", ENTITY_TYPE, ",".join(payload.ids), message, current_user.email,
        details={"ids": payload.ids, "deliveryStatus": payload.delivery_status},
    )
    toaster.success(message)
    return schemas.BulkStatusUpdateResponse(message=message, updated=updated)


@router.delete("/bulk", response_model=schemas.BulkDeleteResponse)
def bulk_delete_certificates(
    payload: schemas.BulkIdsRequest,
    db=Depends(get_db),
    current_user: AuthUser = Depends(require_editor),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """Delete up to 100 certificates. (Editor and above)"""
    logger.info(f"User {current_user.email} bulk-deleting {len(payload.ids)} certificate(s)")
    deleted = crud.bulk_delete(db, payload.ids)
    message = f"{deleted} certificado(s) eliminado(s)"
    record_history(
        db, "bulk_delete", ENTITY_TYPE, ",".join(payload.ids), message, current_user.email,
        details={"ids": payload.ids},
    )
    toaster.success(message)
    return schemas.BulkDeleteResponse(message=message, deleted=deleted)


@router.get("/{certificate_id}", response_model=Certificate)
def read_single_certificate(
    current_user: AuthUser = Depends(require_viewer),
    certificate: Certificate = Depends(get_certificate_or_404),
):
    return certificate


@router.put("/{certificate_id}", response_model=Certificate)
def update_existing_certificate(
    certificate_in: schemas.CertificateUpdate,
    current_user: AuthUser = Depends(require_editor),
    certificate: Certificate = Depends(get_certificate_or_404),
    db=Depends(get_db),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """
    Update a certificate. (Editor and above)
    Delivery status changes must follow the delivery lifecycle.
    """
    logger.info(f"User {current_user.email} updating certificate {certificate.id}")
    updated = crud.update_certificate(db, certificate, certificate_in)
    record_history(
        db, "update", ENTITY_TYPE, updated.id, updated.full_name, current_user.email,
        details={"deliveryStatus": {"from": certificate.delivery_status, "to": updated.delivery_status}},
    )
    toaster.success(f"Certificado de {updated.full_name} actualizado")
    return updated


@router.delete("/{certificate_id}", response_model=schemas.DeleteResponse)
def delete_existing_certificate(
    current_user: AuthUser = Depends(require_master_admin),
    certificate: Certificate = Depends(get_certificate_or_404),
    db=Depends(get_db),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """Master admin: delete a certificate permanently."""
    logger.info(f"Master admin {current_user.email} deleting certificate {certificate.id}")
    crud.delete_certificate(db, certificate.id)
    record_history(db, "delete", ENTITY_TYPE, certificate.id, certificate.full_name, current_user.email)
    toaster.success(f"Certificado de {certificate.full_name} eliminado")
    return schemas.DeleteResponse(message="Certificado eliminado")


@router.post("/{certificate_id}/send-email", response_model=schemas.EmailNoticeResponse)
def send_certificate_email(
    current_user: AuthUser = Depends(require_editor),
    certificate: Certificate = Depends(get_certificate_or_404),
    db=Depends(get_db),
    toaster: ToastDispatcher = Depends(get_toaster),
):
    """Email the holder that the certificate is ready, then flag it as emailed."""
    if not certificate.email:
        raise ValidationError(message="Certificate has no email address.", field="email")

    if not email_service.send_certificate_ready_email(certificate):
        toaster.error(f"No se pudo enviar el correo a {certificate.email}")
        raise ExternalServiceError(message="The email could not be sent.", service="smtp")

    updated = crud.mark_email_sent(db, certificate)
    record_history(
        db, "send_email", ENTITY_TYPE, updated.id, updated.full_name, current_user.email,
        details={"email": updated.email},
    )
    toaster.success(f"Correo enviado a {updated.email}")
    return schemas.EmailNoticeResponse(email_sent=updated.email_sent)
