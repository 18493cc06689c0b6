import asyncio
import io
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi import UploadFile
from sqlalchemy.orm import Session

from funeralcover.domain.claims import (
    ClaimEvent,
    ClaimStatus,
    is_terminal,
    next_status,
)
from funeralcover.errors import DomainValidationError, InvalidTransitionError
from funeralcover.repositories.claim import create_claim
from funeralcover.services.claim import begin_review
from funeralcover.services.documents import CHUNK_SIZE, LocalDocumentStorage


def _headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def _documents() -> dict:
    return {
        "death_cert": ("death_certificate.pdf", b"%PDF-1.4 death certificate", "application/pdf"),
        "affidavit": ("affidavit.pdf", b"%PDF-1.4 affidavit", "application/pdf"),
    }


def _submit(client, token: str, policy_id: int, files: dict | None = None):
    return client.post(
        "/api/v1/claims",
        data={"policy_id": str(policy_id)},
        files=_documents() if files is None else files,
        headers=_headers(token),
    )


# ============================================================================
# STATE MACHINE TESTS
# ============================================================================


def test_happy_path_transitions():
    status = ClaimStatus.SUBMITTED
    status = next_status(status, ClaimEvent.BEGIN_REVIEW)
    assert status is ClaimStatus.UNDER_REVIEW
    status = next_status(status, ClaimEvent.APPROVE)
    assert status is ClaimStatus.APPROVED
    status = next_status(status, ClaimEvent.DISBURSE)
    assert status is ClaimStatus.PAID
    assert is_terminal(status)


def test_reject_from_review():
    assert next_status(ClaimStatus.UNDER_REVIEW, ClaimEvent.REJECT) is ClaimStatus.REJECTED
    assert is_terminal(ClaimStatus.REJECTED)


@pytest.mark.parametrize(
    "status,event",
    [
        (ClaimStatus.SUBMITTED, ClaimEvent.APPROVE),
        (ClaimStatus.SUBMITTED, ClaimEvent.DISBURSE),
        (ClaimStatus.UNDER_REVIEW, ClaimEvent.DISBURSE),
        (ClaimStatus.APPROVED, ClaimEvent.REJECT),
        (ClaimStatus.PAID, ClaimEvent.DISBURSE),
        (ClaimStatus.REJECTED, ClaimEvent.BEGIN_REVIEW),
    ],
)
def test_disallowed_transitions(status, event):
    with pytest.raises(InvalidTransitionError):
        next_status(status, event)


# ============================================================================
# SUBMISSION TESTS
# ============================================================================


def test_submit_claim(client, db: Session, agent_token: str, policy, storage):
    response = _submit(client, agent_token, policy.id)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "Submitted"
    assert data["policy_id"] == policy.id
    assert Path(data["death_cert_path"]).read_bytes() == b"%PDF-1.4 death certificate"
    assert Path(data["affidavit_path"]).parent == storage.root


def test_submit_claim_missing_affidavit(client, db: Session, agent_token: str, policy):
    files = {"death_cert": _documents()["death_cert"]}
    response = _submit(client, agent_token, policy.id, files=files)
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_submit_claim_empty_document(client, db: Session, agent_token: str, policy):
    files = _documents()
    files["affidavit"] = ("affidavit.pdf", b"", "application/pdf")
    response = _submit(client, agent_token, policy.id, files=files)
    assert response.status_code == 400


def test_submit_claim_unknown_policy(client, db: Session, agent_token: str, storage):
    response = _submit(client, agent_token, 9999)
    assert response.status_code == 404
    assert not storage.root.exists() or list(storage.root.iterdir()) == []


def test_submit_claim_on_lapsed_policy(client, db: Session, agent_token: str, policy, storage):
    policy.status = "Lapsed"
    db.commit()
    response = _submit(client, agent_token, policy.id)
    assert response.status_code == 400
    assert "Lapsed" in response.json()["detail"]
    assert not storage.root.exists() or list(storage.root.iterdir()) == []



def test_submit_claim_oversized_document(client, db: Session, agent_token: str, policy, storage):
    storage.max_bytes = 20
    response = _submit(client, agent_token, policy.id)
    assert response.status_code == 400
    assert "exceeds" in response.json()["detail"]
    assert list(storage.root.iterdir()) == []


def test_storage_copies_large_upload_in_chunks(tmp_path):
    content = b"x" * (3 * CHUNK_SIZE + 5)
    upload = UploadFile(file=io.BytesIO(content), filename="Scan.PDF")
    storage = LocalDocumentStorage(tmp_path, max_bytes=len(content))

    reference = asyncio.run(storage.save(upload, "affidavit"))

    assert reference.endswith(".pdf")
    assert Path(reference).read_bytes() == content


def test_storage_refuses_upload_over_limit(tmp_path):
    upload = UploadFile(file=io.BytesIO(b"x" * (CHUNK_SIZE + 1)), filename="scan.pdf")
    storage = LocalDocumentStorage(tmp_path, max_bytes=CHUNK_SIZE)

    with pytest.raises(DomainValidationError):
        asyncio.run(storage.save(upload, "death_cert"))
    assert list(tmp_path.iterdir()) == []


# ============================================================================
# ADJUDICATION TESTS
# ============================================================================


def test_full_claim_flow(client, db: Session, clock, admin_token: str, policy):
    claim_id = _submit(client, admin_token, policy.id).json()["id"]

    clock.advance(hours=2)
    response = client.post(f"/api/v1/claims/{claim_id}/review", headers=_headers(admin_token))
    assert response.status_code == 200
    assert response.json()["status"] == "UnderReview"

    response = client.post(f"/api/v1/claims/{claim_id}/approve", headers=_headers(admin_token))
    assert response.json()["status"] == "Approved"

    clock.advance(days=1)
    response = client.post(
        f"/api/v1/claims/{claim_id}/disburse",
        json={"payout_amount": "10000.00"},
        headers=_headers(admin_token),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "Paid"
    assert Decimal(data["payout_amount"]) == Decimal("10000.00")
    assert data["paid_at"] is not None

    response = client.post(
        f"/api/v1/claims/{claim_id}/disburse",
        json={"payout_amount": "10.00"},
        headers=_headers(admin_token),
    )
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_TRANSITION"


def test_reject_requires_reason(client, db: Session, admin_token: str, policy):
    claim_id = _submit(client, admin_token, policy.id).json()["id"]
    client.post(f"/api/v1/claims/{claim_id}/review", headers=_headers(admin_token))

    response = client.post(
        f"/api/v1/claims/{claim_id}/reject", json={"reason": "  "}, headers=_headers(admin_token)
    )
    assert response.status_code == 400

    response = client.post(
        f"/api/v1/claims/{claim_id}/reject",
        json={"reason": "Death predates policy start"},
        headers=_headers(admin_token),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "Rejected"
    assert data["rejection_reason"] == "Death predates policy start"

    response = client.post(f"/api/v1/claims/{claim_id}/approve", headers=_headers(admin_token))
    assert response.status_code == 409


def test_cannot_approve_before_review(client, db: Session, admin_token: str, policy):
    claim_id = _submit(client, admin_token, policy.id).json()["id"]
    response = client.post(f"/api/v1/claims/{claim_id}/approve", headers=_headers(admin_token))
    assert response.status_code == 409


def test_payout_must_be_positive_and_within_cover(client, db: Session, admin_token: str, policy):
    claim_id = _submit(client, admin_token, policy.id).json()["id"]
    client.post(f"/api/v1/claims/{claim_id}/review", headers=_headers(admin_token))
    client.post(f"/api/v1/claims/{claim_id}/approve", headers=_headers(admin_token))

    for amount in ("0", "-5", "10000.01"):
        response = client.post(
            f"/api/v1/claims/{claim_id}/disburse",
            json={"payout_amount": amount},
            headers=_headers(admin_token),
        )
        assert response.status_code == 400, amount

    response = client.get(f"/api/v1/claims/{claim_id}", headers=_headers(admin_token))
    assert response.json()["status"] == "Approved"


def test_agent_cannot_adjudicate(client, db: Session, agent_token: str, policy):
    claim_id = _submit(client, agent_token, policy.id).json()["id"]
    response = client.post(f"/api/v1/claims/{claim_id}/review", headers=_headers(agent_token))
    assert response.status_code == 403


def test_review_requires_documents(db: Session, clock, policy):
    claim = create_claim(
        db,
        policy_id=policy.id,
        death_cert_path="uploads/death_cert.pdf",
        affidavit_path=None,
        created_at=clock.now(),
    )
    with pytest.raises(DomainValidationError):
        begin_review(db, claim.id, clock.now())


def test_list_claims_by_status(client, db: Session, admin_token: str, policy):
    first = _submit(client, admin_token, policy.id).json()["id"]
    _submit(client, admin_token, policy.id)
    client.post(f"/api/v1/claims/{first}/review", headers=_headers(admin_token))

    response = client.get("/api/v1/claims?status=UnderReview", headers=_headers(admin_token))
    assert [c["id"] for c in response.json()] == [first]

    response = client.get(f"/api/v1/claims?policy_id={policy.id}", headers=_headers(admin_token))
    assert len(response.json()) == 2
