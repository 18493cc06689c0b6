from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum

BILLING_PERIOD_DAYS = 30
BILLING_PERIOD = timedelta(days=BILLING_PERIOD_DAYS)

CENTS = Decimal("0.01")


def to_money(value: Decimal | int | str) -> Decimal:
    """Quantize a monetary value to cents."""
    return Decimal(value).quantize(CENTS)


class PolicyStatus(str, Enum):
    ACTIVE = "Active"
    LAPSED = "Lapsed"
    CANCELLED = "Cancelled"


# Manual status changes. Lapsing is left to the lapse evaluator and
# Lapsed -> Active (reinstatement) is not supported.
MANUAL_POLICY_TRANSITIONS: dict[PolicyStatus, set[PolicyStatus]] = {
    PolicyStatus.ACTIVE: {PolicyStatus.CANCELLED},
    PolicyStatus.LAPSED: {PolicyStatus.CANCELLED},
    PolicyStatus.CANCELLED: set(),
}


def elapsed_billing_periods(start_date: datetime, now: datetime) -> int:
    """Count completed 30-day periods since ``start_date``.

    The current period only counts once it has fully elapsed, so a policy
    started 10 days ago has 0 periods and one started exactly 30 days ago has 1.
    """
    if now <= start_date:
        return 0
    return (now - start_date) // BILLING_PERIOD


def compute_arrears(
    *,
    premium: Decimal,
    start_date: datetime,
    payments: Iterable[Decimal],
    now: datetime,
) -> Decimal:
    """Premiums owed to date minus payments recorded, floored at zero."""
    owed = premium * elapsed_billing_periods(start_date, now)
    paid = sum(payments, Decimal("0"))
    return to_money(max(owed - paid, Decimal("0")))


@dataclass(frozen=True, slots=True)
class LapseRule:
    """Decides when arrears are bad enough to lapse a policy.

    One missed period is tolerated as grace: a policy lapses only when its
    arrears exceed a full premium. A zero premium never lapses.
    """

    premium: Decimal

    def should_lapse(self, arrears: Decimal) -> bool:
        return arrears > self.premium

    @property
    def grace_allowance(self) -> Decimal:
        return self.premium
