import pytest

from certadmin.core.exceptions import ConflictError
from certadmin.models.certificate_model import Certificate
from certadmin.models.enums import DeliveryStatus
from certadmin.services.delivery_service import (
    InvalidTransitionError,
    apply_delivery_invariant,
    can_transition,
    ensure_bulk_transitions,
    ensure_transition,
)


@pytest.mark.parametrize(
    "current, target",
    [
        ("en_archivo", "listo_para_entrega"),
        ("listo_para_entrega", "entregado"),
        ("listo_para_entrega", "digital_enviado"),
        ("en_archivo", "anulado"),
        ("entregado", "anulado"),
        ("digital_enviado", "anulado"),
        ("entregado", "entregado"),
        ("anulado", "anulado"),
    ],
)
def test_allowed_transitions(current, target):
    assert can_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        ("en_archivo", "entregado"),
        ("en_archivo", "digital_enviado"),
        ("entregado", "listo_para_entrega"),
        ("digital_enviado", "entregado"),
        ("anulado", "en_archivo"),
        ("anulado", "listo_para_entrega"),
    ],
)
def test_rejected_transitions(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidTransitionError) as exc_info:
        ensure_transition(current, target, "cert-1")
    assert exc_info.value.status_code == 409
    assert "cert-1" in exc_info.value.message


def test_bulk_check_lists_every_rejected_id():
    pairs = [("a", "listo_para_entrega"), ("b", "en_archivo"), ("c", "anulado")]

    with pytest.raises(ConflictError) as exc_info:
        ensure_bulk_transitions(pairs, DeliveryStatus.DELIVERED)

    assert exc_info.value.message.endswith("for: b, c.")


def _certificate(status):
    return Certificate(
        full_name="Ana", course_name="Curso", course_id="LM", course_type="Curso", year=2025,
        delivery_status=status, delivery_date="2025-03-01", delivered_to="Ana", physical_location="Caja 3",
    )


def test_invariant_clears_delivery_fields_when_not_delivered():
    result = apply_delivery_invariant(_certificate(DeliveryStatus.READY_FOR_DELIVERY))

    assert result.delivery_date is None
    assert result.delivered_to is None
    assert result.physical_location == "Caja 3"


def test_invariant_keeps_delivery_fields_when_delivered():
    result = apply_delivery_invariant(_certificate(DeliveryStatus.DELIVERED))

    assert result.delivery_date == "2025-03-01"
    assert result.delivered_to == "Ana"
