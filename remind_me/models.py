from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ConversationState(str, Enum):
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    AWAITING_CONTENT = "awaiting_content"
    AWAITING_TIME = "awaiting_time"
    AWAITING_DATE = "awaiting_date"
    AWAITING_BOTH = "awaiting_both"


class SlotCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    task: str = ""                 # "" => no command recognized
    time: Optional[str] = None     # "3pm" | "9 am" | "3 o'clock" | ...
    date: Optional[str] = None     # "Jan 5" | "monday"


class PendingReminder(BaseModel):
    task: str
    time: Optional[str] = None
    date: Optional[str] = None

    def is_complete(self) -> bool:
        return bool(self.task and self.time and self.date)


class Reminder(BaseModel):
    id: str
    task: str
    time: Optional[str] = None
    date: Optional[str] = None
    created_at: str

    def display(self) -> str:
        when = " - ".join(part for part in (self.date, self.time) if part)
        return f"{self.task} ({when})" if when else self.task


class TurnResult(BaseModel):
    next_state: ConversationState
    prompt: Optional[str] = None
    committed: Optional[Reminder] = None
    next_pending: Optional[PendingReminder] = None
