from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

import funeralcover.services.policy as policy_service
from funeralcover.errors import DomainValidationError, NotSupportedError
from funeralcover.repositories.payment import get_payments_by_policy_id
from funeralcover.services.policy import get_arrears, record_payment, update_policy


def _headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _set_status(db: Session, policy, status: str) -> None:
    policy.status = status
    db.commit()


# ============================================================================
# POLICY CRUD TESTS
# ============================================================================


def test_create_policy_defaults(client, db: Session, clock, agent_token: str, member):
    response = client.post(
        "/api/v1/policies",
        json={
            "member_id": member.id,
            "plan_type": "Family",
            "cover_level": "15000.00",
            "premium": "120.50",
        },
        headers=_headers(agent_token),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "Active"
    assert Decimal(data["premium"]) == Decimal("120.50")
    assert Decimal(data["cover_level"]) == Decimal("15000.00")
    assert data["last_payment_at"] is None


def test_create_policy_unknown_member(client, db: Session, agent_token: str):
    response = client.post(
        "/api/v1/policies",
        json={"member_id": 9999, "plan_type": "Single", "cover_level": "1000", "premium": "10"},
        headers=_headers(agent_token),
    )
    assert response.status_code == 404


def test_create_policy_negative_premium(client, db: Session, agent_token: str, member):
    response = client.post(
        "/api/v1/policies",
        json={"member_id": member.id, "plan_type": "Single", "cover_level": "1000", "premium": "-1"},
        headers=_headers(agent_token),
    )
    assert response.status_code == 422


def test_list_policies_filters(client, db: Session, agent_token: str, member, policy):
    response = client.get(
        f"/api/v1/policies?member_id={member.id}&status=Active",
        headers=_headers(agent_token),
    )
    assert [p["id"] for p in response.json()] == [policy.id]

    response = client.get("/api/v1/policies?status=Lapsed", headers=_headers(agent_token))
    assert response.json() == []


def test_update_policy_fields(client, db: Session, agent_token: str, policy):
    response = client.put(
        f"/api/v1/policies/{policy.id}",
        json={"plan_type": "Extended Family", "premium": "150"},
        headers=_headers(agent_token),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["plan_type"] == "Extended Family"
    assert Decimal(data["premium"]) == Decimal("150.00")


def test_cancel_policy(client, db: Session, agent_token: str, policy):
    response = client.put(
        f"/api/v1/policies/{policy.id}",
        json={"status": "Cancelled"},
        headers=_headers(agent_token),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Cancelled"

    response = client.put(
        f"/api/v1/policies/{policy.id}",
        json={"status": "Active"},
        headers=_headers(agent_token),
    )
    assert response.status_code == 400


def test_status_cannot_be_set_to_lapsed_by_hand(client, db: Session, agent_token: str, policy):
    response = client.put(
        f"/api/v1/policies/{policy.id}",
        json={"status": "Lapsed"},
        headers=_headers(agent_token),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_reactivating_lapsed_policy_is_not_supported(client, db: Session, agent_token: str, policy):
    _set_status(db, policy, "Lapsed")

    response = client.put(
        f"/api/v1/policies/{policy.id}",
        json={"status": "Active"},
        headers=_headers(agent_token),
    )
    assert response.status_code == 501
    assert response.json()["code"] == "NOT_IMPLEMENTED"

    response = client.post(f"/api/v1/policies/{policy.id}/reinstate", headers=_headers(agent_token))
    assert response.status_code == 501


def test_reinstate_unknown_policy(client, db: Session, agent_token: str):
    response = client.post("/api/v1/policies/9999/reinstate", headers=_headers(agent_token))
    assert response.status_code == 404


def test_update_policy_service_rejects_clearing_fields(db: Session, policy):
    with pytest.raises(DomainValidationError):
        update_policy(db, policy.id, premium=None)
    _set_status(db, policy, "Lapsed")
    with pytest.raises(NotSupportedError):
        update_policy(db, policy.id, status="Active")


def test_delete_policy(client, db: Session, agent_token: str, policy):
    response = client.delete(f"/api/v1/policies/{policy.id}", headers=_headers(agent_token))
    assert response.status_code == 204
    assert client.get(f"/api/v1/policies/{policy.id}", headers=_headers(agent_token)).status_code == 404


def test_delete_policy_with_payments_is_rejected(client, db: Session, clock, agent_token: str, policy):
    record_payment(db, policy.id, Decimal("100"), clock.now())
    response = client.delete(f"/api/v1/policies/{policy.id}", headers=_headers(agent_token))
    assert response.status_code == 400
    assert "payments" in response.json()["detail"]


# ============================================================================
# LEDGER AND ARREARS TESTS
# ============================================================================


def test_payment_on_lapsed_policy_is_recorded_without_status_change(db: Session, clock, policy):
    _set_status(db, policy, "Lapsed")
    payment = record_payment(db, policy.id, Decimal("300"), clock.now(), reference="LATE-1")
    assert payment.amount == Decimal("300.00")
    db.refresh(policy)
    assert policy.status == "Lapsed"
    assert policy.last_payment_at == clock.now()


def test_payments_listed_in_order(client, db: Session, clock, agent_token: str, policy):
    record_payment(db, policy.id, Decimal("100"), clock.now(), reference="P-1")
    clock.advance(days=30)
    record_payment(db, policy.id, Decimal("90"), clock.now(), reference="P-2")

    response = client.get(f"/api/v1/policies/{policy.id}/payments", headers=_headers(agent_token))
    assert response.status_code == 200
    assert [p["reference"] for p in response.json()] == ["P-1", "P-2"]


def test_record_payment_rejects_non_positive_amount(db: Session, clock, policy):
    with pytest.raises(DomainValidationError):
        record_payment(db, policy.id, Decimal("0"), clock.now())
    assert get_payments_by_policy_id(db, policy.id) == []


def test_replayed_reference_racing_the_lookup_returns_recorded_payment(
    db: Session, clock, policy, monkeypatch
):
    first = record_payment(db, policy.id, Decimal("100"), clock.now(), reference="WH-7")
    lookup = policy_service.payment_repo.get_payment_by_reference
    calls = []

    def miss_first_lookup(session, reference):
        calls.append(reference)
        if len(calls) == 1:
            return None
        return lookup(session, reference)

    monkeypatch.setattr(policy_service.payment_repo, "get_payment_by_reference", miss_first_lookup)

    replay = record_payment(db, policy.id, Decimal("100"), clock.now(), reference="WH-7")

    assert replay.id == first.id
    assert len(calls) == 2
    assert len(get_payments_by_policy_id(db, policy.id)) == 1

def test_arrears_endpoint(client, db: Session, clock, agent_token: str, policy):
    record_payment(db, policy.id, Decimal("100"), clock.now())
    clock.advance(days=65)

    response = client.get(f"/api/v1/policies/{policy.id}/arrears", headers=_headers(agent_token))
    assert response.status_code == 200
    data = response.json()
    assert data["elapsed_periods"] == 2
    assert Decimal(data["total_paid"]) == Decimal("100.00")
    assert Decimal(data["arrears"]) == Decimal("100.00")
    assert data["beyond_grace"] is False
    assert data["status"] == "Active"


def test_arrears_for_new_policy_is_zero(db: Session, clock, policy):
    clock.advance(days=10)
    arrears = get_arrears(db, policy.id, clock.now())
    assert arrears.arrears == Decimal("0.00")
    assert arrears.elapsed_periods == 0


def test_arrears_with_backdated_start(db: Session, clock, member):
    from funeralcover.services.policy import create_policy

    policy = create_policy(
        db,
        member_id=member.id,
        plan_type="Single",
        cover_level=Decimal("8000"),
        premium=Decimal("80"),
        now=clock.now(),
        start_date=clock.now() - timedelta(days=95),
    )
    arrears = get_arrears(db, policy.id, clock.now())
    assert arrears.elapsed_periods == 3
    assert arrears.arrears == Decimal("240.00")
    assert arrears.beyond_grace is True
