from pydantic import BaseModel


class LapseSummary(BaseModel):
    evaluated: int
    lapsed: int
    unchanged: int
    notifications_failed: int


class ReminderSummary(BaseModel):
    evaluated: int
    sent: int
    failed: int
