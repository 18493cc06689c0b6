from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_clock, get_db, get_notifier, require_roles
from funeralcover.core.clock import Clock
from funeralcover.schemas.lifecycle import ReminderSummary
from funeralcover.services.lapse import send_arrears_reminders
from funeralcover.services.notifications import NotificationSender

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    dependencies=[Depends(require_roles("admin"))],
)


@router.post("/reminders", response_model=ReminderSummary)
async def send_reminders(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    notifier: NotificationSender = Depends(get_notifier),
):
    """Email a reminder for every Active policy with outstanding premiums."""
    return await send_arrears_reminders(db, clock.now(), notifier)
