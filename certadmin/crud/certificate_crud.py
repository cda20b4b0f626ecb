import logging
import re
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from google.cloud.firestore_v1.base_query import FieldFilter
from pydantic import ValidationError as PydanticValidationError

from certadmin.core.exceptions import NotFoundError
from certadmin.crud.course_crud import SEQUENCED_ID_PATTERN, course_reference_candidates, ensure_course_reference
from certadmin.models.certificate_model import COLLECTION, Certificate
from certadmin.models.enums import DELIVERED_STATUSES, DeliveryStatus
from certadmin.schemas.certificate_schema import (
    CertificateCreate, CertificateUpdate, CertificateStats, StatusCounts
)
from certadmin.services.delivery_service import apply_delivery_invariant, ensure_bulk_transitions, ensure_transition

logger = logging.getLogger(__name__)

# Upper bound for Firestore prefix range queries
PREFIX_END = "\uf8ff"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_snapshots(snapshots: Iterable) -> List[Certificate]:
    certificates: List[Certificate] = []
    for snapshot in snapshots:
        try:
            certificates.append(Certificate.from_snapshot(snapshot))
        except PydanticValidationError as e:
            logger.warning(f"Skipping malformed certificate document {snapshot.id}: {e}")
    return certificates


def matches_search(certificate: Certificate, term: str) -> bool:
    """Case-insensitive substring match over name, course name, course id and email."""
    needle = term.strip().lower()
    haystack = (
        certificate.full_name,
        certificate.course_name,
        certificate.course_id,
        certificate.email or "",
    )
    return any(needle in value.lower() for value in haystack)


def get_certificate(db, certificate_id: str) -> Optional[Certificate]:
    """Fetches a certificate by its document id."""
    logger.debug(f"Fetching certificate by ID: {certificate_id}")
    snapshot = db.collection(COLLECTION).document(certificate_id).get()
    if not snapshot.exists:
        return None
    return Certificate.from_snapshot(snapshot)


def list_certificates(
    db,
    search: Optional[str] = None,
    delivery_status: Optional[DeliveryStatus] = None,
    year: Optional[int] = None,
    course_id: Optional[str] = None,
) -> List[Certificate]:
    """Lists certificates, newest first. Equality filters run in Firestore, the text search in memory."""
    query = db.collection(COLLECTION)
    if delivery_status is not None:
        query = query.where(filter=FieldFilter("deliveryStatus", "==", DeliveryStatus(delivery_status).value))
    if year is not None:
        query = query.where(filter=FieldFilter("year", "==", year))
    if course_id:
        query = query.where(filter=FieldFilter("courseId", "==", course_id))

    certificates = _parse_snapshots(query.stream())
    if search and search.strip():
        certificates = [c for c in certificates if matches_search(c, search)]

    certificates.sort(key=lambda c: c.created_at or "", reverse=True)
    logger.debug(f"Listed {len(certificates)} certificates (search={search!r}, status={delivery_status}, year={year}, courseId={course_id})")
    return certificates


def _course_ids_with_prefix(db, prefix: str) -> List[str]:
    query = (
        db.collection(COLLECTION)
        .where(filter=FieldFilter("courseId", ">=", prefix))
        .where(filter=FieldFilter("courseId", "<", prefix + PREFIX_END))
    )
    return [(snapshot.to_dict() or {}).get("courseId") or "" for snapshot in query.stream()]


def next_sequence(db, course_code: str, year: int) -> Tuple[int, str]:
    """
    Next free sequence number for "<course_code>-<year>-NN" ids and the formatted id.
    The highest existing number wins, so gaps left by deletions are not reused.
    """
    prefix = f"{course_code}-{year}-"
    pattern = re.compile(rf"^{re.escape(course_code)}-{year}-(\d+)$")

    highest = 0
    for existing_id in _course_ids_with_prefix(db, prefix):
        match = pattern.match(existing_id)
        if match:
            highest = max(highest, int(match.group(1)))

    sequence = highest + 1
    return sequence, f"{prefix}{sequence:02d}"


def allocate_course_id(db, course_id: str, year: int) -> str:
    """
    A sequenced id whose year matches the certificate year gets the next free number
    for its CODE-YEAR prefix; any other id is kept as given.
    """
    match = SEQUENCED_ID_PATTERN.match(course_id)
    if not match or int(match.group("year")) != year:
        return course_id
    _, formatted = next_sequence(db, match.group("code"), year)
    if formatted != course_id:
        logger.info(f"Course id {course_id} re-sequenced to {formatted}")
    return formatted


def count_certificates_for_course(db, course_id: str) -> int:
    """Number of certificates whose courseId resolves to `course_id`."""
    return sum(
        1 for certificate_course_id in _course_ids_with_prefix(db, course_id)
        if course_id in course_reference_candidates(certificate_course_id)
    )


def create_certificate(db, certificate_in: CertificateCreate) -> Certificate:
    ensure_course_reference(db, certificate_in.course_id)

    now = _now_iso()
    data = certificate_in.model_dump()
    data["course_id"] = allocate_course_id(db, certificate_in.course_id, certificate_in.year)
    certificate = apply_delivery_invariant(Certificate(**data, created_at=now, updated_at=now))

    _, doc_ref = db.collection(COLLECTION).add(certificate.to_firestore())
    certificate = certificate.model_copy(update={"id": doc_ref.id})
    logger.info(f"Certificate created (ID: {certificate.id}, courseId: {certificate.course_id}).")
    return certificate


def update_certificate(db, current: Certificate, certificate_in: CertificateUpdate) -> Certificate:
    ensure_transition(current.delivery_status, certificate_in.delivery_status, current.id)
    if certificate_in.course_id != current.course_id:
        ensure_course_reference(db, certificate_in.course_id)

    updated = apply_delivery_invariant(Certificate(
        id=current.id,
        **certificate_in.model_dump(),
        created_at=current.created_at,
        updated_at=_now_iso(),
    ))
    # merge=True keeps fields this model does not know about
    db.collection(COLLECTION).document(current.id).set(updated.to_firestore(), merge=True)
    logger.info(f"Certificate {current.id} updated (status: {current.delivery_status} -> {updated.delivery_status}).")
    return updated


def mark_email_sent(db, certificate: Certificate) -> Certificate:
    now = _now_iso()
    db.collection(COLLECTION).document(certificate.id).update({"emailSent": True, "updatedAt": now})
    return certificate.model_copy(update={"email_sent": True, "updated_at": now})


def delete_certificate(db, certificate_id: str) -> None:
    db.collection(COLLECTION).document(certificate_id).delete()
    logger.info(f"Certificate deleted: {certificate_id}")


def bulk_update_status(db, ids: List[str], delivery_status: DeliveryStatus) -> int:
    """
    Moves every certificate in `ids` to `delivery_status` in one batch.
    Nothing is written unless all ids exist and every transition is allowed.
    """
    target = DeliveryStatus(delivery_status)
    unique_ids = list(dict.fromkeys(ids))
    collection = db.collection(COLLECTION)
    refs = [collection.document(certificate_id) for certificate_id in unique_ids]

    missing: List[str] = []
    current_statuses: List[Tuple[str, str]] = []
    for ref in refs:
        snapshot = ref.get()
        if not snapshot.exists:
            missing.append(ref.id)
            continue
        current_statuses.append((ref.id, (snapshot.to_dict() or {}).get("deliveryStatus") or DeliveryStatus.FILED.value))

    if missing:
        raise NotFoundError(message=f"Certificates not found: {', '.join(missing)}.", resource="certificate")
    ensure_bulk_transitions(current_statuses, target)

    update_data = {"deliveryStatus": target.value, "updatedAt": _now_iso()}
    if target not in DELIVERED_STATUSES:
        update_data.update({"deliveryDate": None, "deliveredTo": None})

    batch = db.batch()
    for ref in refs:
        batch.update(ref, update_data)
    batch.commit()
    logger.info(f"Bulk status update: {len(refs)} certificate(s) -> {target.value}")
    return len(refs)


def bulk_delete(db, ids: List[str]) -> int:
    unique_ids = list(dict.fromkeys(ids))
    collection = db.collection(COLLECTION)
    batch = db.batch()
    for certificate_id in unique_ids:
        batch.delete(collection.document(certificate_id))
    batch.commit()
    logger.info(f"Bulk delete: {len(unique_ids)} certificate(s)")
    return len(unique_ids)


def compute_stats(db) -> CertificateStats:
    """
    Aggregated counts by delivery status and by year.
    Raw documents are counted so a malformed one still shows up in the totals.
    """
    current_year = datetime.now().year
    by_status: Counter = Counter()
    by_year: Counter = Counter()
    total = 0

    for snapshot in db.collection(COLLECTION).stream():
        data = snapshot.to_dict() or {}
        total += 1
        by_status[data.get("deliveryStatus") or DeliveryStatus.FILED.value] += 1
        try:
            by_year[int(data.get("year") or current_year)] += 1
        except (TypeError, ValueError):
            by_year[current_year] += 1

    return CertificateStats(
        total=total,
        by_status=StatusCounts(
            delivered=by_status[DeliveryStatus.DELIVERED.value],
            ready_for_delivery=by_status[DeliveryStatus.READY_FOR_DELIVERY.value],
            filed=by_status[DeliveryStatus.FILED.value],
            sent_digitally=by_status[DeliveryStatus.SENT_DIGITALLY.value],
            voided=by_status[DeliveryStatus.VOIDED.value],
        ),
        by_year=dict(by_year),
        this_year=by_year[current_year],
    )
