from datetime import timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from funeralcover.repositories.payment import get_payments_by_policy_id
from funeralcover.repositories.user import get_user_by_id


def test_premium_event_appends_to_ledger(client, db: Session, clock, policy):
    response = client.post(
        "/api/v1/payments/webhook",
        json={"policy_id": policy.id, "amount": "100.00", "reference": "PREM-1"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "premium"
    assert data["subscription"] is None
    assert data["payment"]["policy_id"] == policy.id
    assert Decimal(data["payment"]["amount"]) == Decimal("100.00")

    payments = get_payments_by_policy_id(db, policy.id)
    assert len(payments) == 1
    assert payments[0].paid_at == clock.now()


def test_replayed_premium_event_is_recorded_once(client, db: Session, policy):
    body = {"policy_id": policy.id, "amount": "100.00", "reference": "PREM-2"}
    first = client.post("/api/v1/payments/webhook", json=body)
    second = client.post("/api/v1/payments/webhook", json=body)
    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["payment"]["id"] == second.json()["payment"]["id"]
    assert len(get_payments_by_policy_id(db, policy.id)) == 1


def test_subscription_event_extends_access(client, db: Session, clock, agent_user: dict):
    clock.advance(days=40)
    response = client.post(
        "/api/v1/payments/webhook",
        json={"user_id": agent_user["id"], "reference": "SUB-1"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "subscription"
    assert data["payment"] is None
    assert data["subscription"]["user_id"] == agent_user["id"]

    user = get_user_by_id(db, agent_user["id"])
    assert user.has_paid is True
    assert user.subscription_expiry == clock.now() + timedelta(days=30)


def test_event_must_target_exactly_one_account(client, db: Session, policy, agent_user: dict):
    both = client.post(
        "/api/v1/payments/webhook",
        json={
            "user_id": agent_user["id"],
            "policy_id": policy.id,
            "amount": "100.00",
            "reference": "BOTH-1",
        },
    )
    assert both.status_code == 422

    neither = client.post("/api/v1/payments/webhook", json={"reference": "NONE-1"})
    assert neither.status_code == 422


def test_premium_event_requires_reference_and_amount(client, db: Session, policy):
    no_reference = client.post(
        "/api/v1/payments/webhook",
        json={"policy_id": policy.id, "amount": "100.00", "reference": " "},
    )
    assert no_reference.status_code == 400

    no_amount = client.post(
        "/api/v1/payments/webhook",
        json={"policy_id": policy.id, "reference": "PREM-3"},
    )
    assert no_amount.status_code == 400
    assert len(get_payments_by_policy_id(db, policy.id)) == 0


def test_premium_event_unknown_policy(client, db: Session):
    response = client.post(
        "/api/v1/payments/webhook",
        json={"policy_id": 9999, "amount": "100.00", "reference": "PREM-4"},
    )
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_record_payment_endpoint(client, db: Session, policy, admin_token: str):
    headers = {"Authorization": f"Bearer {admin_token}"}
    response = client.post(
        "/api/v1/payments",
        json={"policy_id": policy.id, "amount": "50.00"},
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["reference"] is None

    response = client.post(
        "/api/v1/payments",
        json={"policy_id": policy.id, "amount": "0"},
        headers=headers,
    )
    assert response.status_code == 422


def test_reference_reused_on_another_policy(client, db: Session, clock, member, policy):
    from funeralcover.services.policy import create_policy

    other = create_policy(
        db,
        member_id=member.id,
        plan_type="Single",
        cover_level=Decimal("5000"),
        premium=Decimal("60"),
        now=clock.now(),
    )
    client.post(
        "/api/v1/payments/webhook",
        json={"policy_id": policy.id, "amount": "100.00", "reference": "PREM-5"},
    )
    response = client.post(
        "/api/v1/payments/webhook",
        json={"policy_id": other.id, "amount": "60.00", "reference": "PREM-5"},
    )
    assert response.status_code == 409
