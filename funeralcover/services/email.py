import logging
from decimal import Decimal
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import aiosmtplib

from funeralcover.core.config import settings

logger = logging.getLogger(__name__)


def _ensure_smtp_configured(email: str) -> None:
    if not all([
        settings.smtp_host,
        settings.smtp_port,
        settings.smtp_user,
        settings.smtp_password,
        settings.smtp_from_email,
    ]):
        logger.warning(f"SMTP not configured - cannot send email to {email}")
        raise ValueError("SMTP is not configured. Please configure SMTP settings in .env file.")


async def _send(email: str, subject: str, text: str, html: str) -> None:
    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = settings.smtp_from_email
    message["To"] = email

    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))

    send_kwargs = {
        "hostname": settings.smtp_host,
        "port": settings.smtp_port,
        "username": settings.smtp_user,
        "password": settings.smtp_password,
    }

    # Handle TLS based on smtp_use_tls configuration
    if settings.smtp_use_tls:
        # Port 587 uses STARTTLS, port 465 uses direct TLS
        if settings.smtp_port == 465:
            send_kwargs["use_tls"] = True
        else:
            send_kwargs["start_tls"] = True

    await aiosmtplib.send(message, **send_kwargs)


async def send_arrears_reminder_email(
    email: str,
    member_name: str,
    policy_id: int,
    plan_type: str,
    premium: Decimal,
    arrears: Decimal,
) -> None:
    """
    Remind a member that premiums on a policy are outstanding.

    Raises:
        ValueError: If SMTP is not configured.
    """
    _ensure_smtp_configured(email)

    text = f"""
Dear {member_name},

Your {plan_type} policy (number {policy_id}) is behind on premiums.

Monthly premium: {premium:.2f}
Amount outstanding: {arrears:.2f}

Please pay the outstanding amount to keep your cover active. A policy that
falls more than one premium behind will lapse.
    """
    html = f"""
<html>
  <body>
    <p>Dear {member_name},</p>
    <p>Your <strong>{plan_type}</strong> policy (number {policy_id}) is behind on premiums.</p>
    <table>
      <tr><td>Monthly premium</td><td>{premium:.2f}</td></tr>
      <tr><td>Amount outstanding</td><td><strong>{arrears:.2f}</strong></td></tr>
    </table>
    <p>Please pay the outstanding amount to keep your cover active.
       A policy that falls more than one premium behind will lapse.</p>
  </body>
</html>
    """
    await _send(email, f"Premium reminder for policy {policy_id}", text, html)


async def send_lapse_notice_email(
    email: str,
    member_name: str,
    policy_id: int,
    plan_type: str,
    arrears: Decimal,
) -> None:
    """
    Tell a member that a policy has lapsed for non-payment.

    Raises:
        ValueError: If SMTP is not configured.
    """
    _ensure_smtp_configured(email)

    text = f"""
Dear {member_name},

Your {plan_type} policy (number {policy_id}) has lapsed because premiums of
{arrears:.2f} are outstanding. Claims cannot be submitted against a lapsed policy.

Please contact your agent to discuss your options.
    """
    html = f"""
<html>
  <body>
    <p>Dear {member_name},</p>
    <p>Your <strong>{plan_type}</strong> policy (number {policy_id}) has lapsed because
       premiums of <strong>{arrears:.2f}</strong> are outstanding.
       Claims cannot be submitted against a lapsed policy.</p>
    <p>Please contact your agent to discuss your options.</p>
  </body>
</html>
    """
    await _send(email, f"Policy {policy_id} has lapsed", text, html)
