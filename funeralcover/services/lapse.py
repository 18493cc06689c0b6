"""Lapse evaluator and arrears reminders: batch passes over Active policies."""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

import funeralcover.repositories.payment as payment_repo
import funeralcover.repositories.policy as policy_repo
from funeralcover.domain.billing import LapseRule, PolicyStatus
from funeralcover.errors import NotificationError
from funeralcover.schemas.lifecycle import LapseSummary, ReminderSummary
from funeralcover.services.notifications import NotificationSender
from funeralcover.services.policy import policy_arrears

logger = logging.getLogger(__name__)


async def run_lapse_check(db: Session, now: datetime, notifier: NotificationSender) -> LapseSummary:
    """
    Lapse every Active policy whose arrears exceed one full premium.

    Each policy is read, evaluated and committed on its own, so the run can be
    interrupted between policies without leaving partial state. The status
    write is version-checked: if a payment landed on the policy after it was
    read, the write is rolled back and the policy is left for the next run.

    Already-Lapsed policies are never listed, so repeating a run with the same
    ``now`` and no new payments lapses nothing further.

    Notification failures are logged and counted; they never abort the run.
    """
    policies = policy_repo.get_active_policies(db)
    evaluated = lapsed = unchanged = notifications_failed = 0

    for policy in policies:
        # Attributes reload after the previous commit; skip rows another run moved.
        if policy.status != PolicyStatus.ACTIVE.value:
            continue
        evaluated += 1

        payments = payment_repo.get_payments_by_policy_id(db, policy.id)
        arrears = policy_arrears(policy, payments, now)
        if not LapseRule(premium=Decimal(policy.premium)).should_lapse(arrears):
            unchanged += 1
            continue

        try:
            policy_repo.mark_policy_lapsed(db, policy)
        except StaleDataError:
            db.rollback()
            logger.warning("Policy %s changed during lapse check; left Active", policy.id)
            unchanged += 1
            continue

        lapsed += 1
        logger.info("Policy %s lapsed with arrears %s", policy.id, arrears)

        try:
            await notifier.send_lapse_notice(policy.member, policy, arrears)
        except NotificationError as e:
            notifications_failed += 1
            logger.error("Failed to send lapse notice: %s", e)

    logger.info(
        "Lapse check at %s: evaluated=%s lapsed=%s unchanged=%s notifications_failed=%s",
        now.isoformat(),
        evaluated,
        lapsed,
        unchanged,
        notifications_failed,
    )
    return LapseSummary(
        evaluated=evaluated,
        lapsed=lapsed,
        unchanged=unchanged,
        notifications_failed=notifications_failed,
    )


async def send_arrears_reminders(
    db: Session, now: datetime, notifier: NotificationSender
) -> ReminderSummary:
    """
    Remind the member behind every Active policy that has any arrears.

    Failures are logged and counted.
    """
    policies = policy_repo.get_active_policies(db)
    sent = failed = 0

    for policy in policies:
        payments = payment_repo.get_payments_by_policy_id(db, policy.id)
        arrears = policy_arrears(policy, payments, now)
        if arrears <= 0:
            continue
        try:
            await notifier.send_reminder(policy.member, policy, arrears)
        except NotificationError as e:
            failed += 1
            logger.error("Failed to send arrears reminder: %s", e)
        else:
            sent += 1

    return ReminderSummary(evaluated=len(policies), sent=sent, failed=failed)
