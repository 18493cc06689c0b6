from datetime import datetime, timedelta, timezone
from decimal import Decimal

from funeralcover.domain.billing import (
    LapseRule,
    compute_arrears,
    elapsed_billing_periods,
)

START = datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)


def test_elapsed_periods_only_count_completed_periods():
    assert elapsed_billing_periods(START, START) == 0
    assert elapsed_billing_periods(START, START + timedelta(days=10)) == 0
    assert elapsed_billing_periods(START, START + timedelta(days=30) - timedelta(seconds=1)) == 0
    assert elapsed_billing_periods(START, START + timedelta(days=30)) == 1
    assert elapsed_billing_periods(START, START + timedelta(days=65)) == 2


def test_elapsed_periods_before_start_is_zero():
    assert elapsed_billing_periods(START, START - timedelta(days=40)) == 0


def test_new_policy_owes_nothing_within_first_period():
    arrears = compute_arrears(
        premium=Decimal("50.00"),
        start_date=START,
        payments=[],
        now=START + timedelta(days=10),
    )
    assert arrears == Decimal("0.00")


def test_arrears_after_two_periods_with_one_payment():
    arrears = compute_arrears(
        premium=Decimal("100.00"),
        start_date=START,
        payments=[Decimal("100.00")],
        now=START + timedelta(days=65),
    )
    assert arrears == Decimal("100.00")


def test_overpayment_never_goes_negative():
    arrears = compute_arrears(
        premium=Decimal("100.00"),
        start_date=START,
        payments=[Decimal("500.00")],
        now=START + timedelta(days=65),
    )
    assert arrears == Decimal("0.00")


def test_arrears_are_rounded_to_cents():
    arrears = compute_arrears(
        premium=Decimal("33.335"),
        start_date=START,
        payments=[],
        now=START + timedelta(days=30),
    )
    assert arrears == Decimal("33.34")


def test_one_missed_premium_is_grace():
    rule = LapseRule(premium=Decimal("100.00"))
    assert not rule.should_lapse(Decimal("0.00"))
    assert not rule.should_lapse(Decimal("100.00"))
    assert rule.should_lapse(Decimal("100.01"))
    assert rule.grace_allowance == Decimal("100.00")


def test_zero_premium_never_lapses():
    rule = LapseRule(premium=Decimal("0"))
    arrears = compute_arrears(
        premium=Decimal("0"),
        start_date=START,
        payments=[],
        now=START + timedelta(days=400),
    )
    assert arrears == Decimal("0.00")
    assert not rule.should_lapse(arrears)
