from decimal import Decimal
from typing import Protocol

import aiosmtplib

from funeralcover.db.models.member import Member as MemberModel
from funeralcover.db.models.policy import Policy as PolicyModel
from funeralcover.errors import NotificationError
from funeralcover.services.email import send_arrears_reminder_email, send_lapse_notice_email


class NotificationSender(Protocol):
    """Outbound member notifications. Implementations raise NotificationError on failure."""

    async def send_reminder(self, member: MemberModel, policy: PolicyModel, arrears: Decimal) -> None: ...

    async def send_lapse_notice(self, member: MemberModel, policy: PolicyModel, arrears: Decimal) -> None: ...


class EmailNotificationSender:
    """Sends notifications to the member's email address over SMTP."""

    async def send_reminder(self, member: MemberModel, policy: PolicyModel, arrears: Decimal) -> None:
        email = self._recipient(member)
        try:
            await send_arrears_reminder_email(
                email=email,
                member_name=member.name,
                policy_id=policy.id,
                plan_type=policy.plan_type,
                premium=Decimal(policy.premium),
                arrears=arrears,
            )
        except (ValueError, aiosmtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Reminder for policy {policy.id} not sent: {e}") from e

    async def send_lapse_notice(self, member: MemberModel, policy: PolicyModel, arrears: Decimal) -> None:
        email = self._recipient(member)
        try:
            await send_lapse_notice_email(
                email=email,
                member_name=member.name,
                policy_id=policy.id,
                plan_type=policy.plan_type,
                arrears=arrears,
            )
        except (ValueError, aiosmtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Lapse notice for policy {policy.id} not sent: {e}") from e

    @staticmethod
    def _recipient(member: MemberModel) -> str:
        if not member.email:
            raise NotificationError(f"Member {member.id} has no email address")
        return member.email
