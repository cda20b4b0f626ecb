"""
Delivery lifecycle of a certificate.

    en_archivo -> listo_para_entrega -> entregado | digital_enviado

Any state other than `anulado` may move to `anulado`, which is terminal. Staying in the
same state is always allowed, so re-saving a certificate never trips the check.
"""
from typing import Dict, FrozenSet, Iterable, List, Tuple, Union

from certadmin.core.exceptions import ConflictError
from certadmin.models.certificate_model import Certificate
from certadmin.models.enums import DELIVERED_STATUSES, DeliveryStatus

ALLOWED_TRANSITIONS: Dict[DeliveryStatus, FrozenSet[DeliveryStatus]] = {
    DeliveryStatus.FILED: frozenset({DeliveryStatus.READY_FOR_DELIVERY, DeliveryStatus.VOIDED}),
    DeliveryStatus.READY_FOR_DELIVERY: frozenset({
        DeliveryStatus.DELIVERED, DeliveryStatus.SENT_DIGITALLY, DeliveryStatus.VOIDED,
    }),
    DeliveryStatus.DELIVERED: frozenset({DeliveryStatus.VOIDED}),
    DeliveryStatus.SENT_DIGITALLY: frozenset({DeliveryStatus.VOIDED}),
    DeliveryStatus.VOIDED: frozenset(),
}

StatusLike = Union[DeliveryStatus, str]


class InvalidTransitionError(ConflictError):
    def __init__(self, current: StatusLike, target: StatusLike, certificate_id: str = None):
        self.current = DeliveryStatus(current)
        self.target = DeliveryStatus(target)
        prefix = f"Certificate {certificate_id}: " if certificate_id else ""
        super().__init__(
            message=f"{prefix}cannot change delivery status from '{self.current.value}' to '{self.target.value}'.",
            resource="certificate",
        )


def can_transition(current: StatusLike, target: StatusLike) -> bool:
    current, target = DeliveryStatus(current), DeliveryStatus(target)
    return current == target or target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: StatusLike, target: StatusLike, certificate_id: str = None) -> None:
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target, certificate_id)


def ensure_bulk_transitions(pairs: Iterable[Tuple[str, StatusLike]], target: StatusLike) -> None:
    """Checks every (certificate_id, current_status) pair before anything is written."""
    rejected: List[str] = [cert_id for cert_id, current in pairs if not can_transition(current, target)]
    if rejected:
        raise ConflictError(
            message=f"Cannot change delivery status to '{DeliveryStatus(target).value}' for: {', '.join(rejected)}.",
            resource="certificate",
        )


def apply_delivery_invariant(certificate: Certificate) -> Certificate:
    """Delivery date and recipient only make sense once the certificate was delivered or sent."""
    if DeliveryStatus(certificate.delivery_status) in DELIVERED_STATUSES:
        return certificate
    return certificate.model_copy(update={"delivery_date": None, "delivered_to": None})
