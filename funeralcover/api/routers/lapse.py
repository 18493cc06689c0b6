from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from funeralcover.api.deps import get_clock, get_db, get_notifier, require_roles
from funeralcover.core.clock import Clock
from funeralcover.schemas.lifecycle import LapseSummary
from funeralcover.services.lapse import run_lapse_check
from funeralcover.services.notifications import NotificationSender

router = APIRouter(prefix="/lapse", tags=["lapse"], dependencies=[Depends(require_roles("admin"))])


@router.post("/run", response_model=LapseSummary)
async def run_lapse(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    notifier: NotificationSender = Depends(get_notifier),
):
    """Lapse every Active policy more than one premium in arrears."""
    return await run_lapse_check(db, clock.now(), notifier)
