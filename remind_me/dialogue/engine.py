# remind_me/dialogue/engine.py

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable

from ..models import ConversationState, PendingReminder, Reminder, SlotCandidate, TurnResult
from ..nlu.extractor import SlotExtractor, has_trigger, is_affirmative, is_negative
from ..prompts import dialogue_prompts as prompts

logger = logging.getLogger(__name__)

State = ConversationState


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ReminderIdFactory:
    """
    Timestamp-derived reminder ids.

    Zero-padded nanoseconds, so string order is creation order. Strictly
    increasing within a process even if the clock stalls.
    """

    def __init__(self, clock: Callable[[], int] = time.time_ns) -> None:
        self.clock = clock
        self._last = 0

    def __call__(self) -> str:
        stamp = max(self.clock(), self._last + 1)
        self._last = stamp
        return f"{stamp:020d}"


class DialogueManager:
    """
    Responsible for:
    - Running one utterance through the slot extractor
    - Merging extracted slots into the pending reminder
    - Picking the next conversation state and the prompt to speak
    - Committing a reminder once task, time and date are known

    Holds no conversational state. Callers pass `state` and `pending` in
    and keep `next_state` / `next_pending` from the result.
    """

    def __init__(
        self,
        extractor: SlotExtractor | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.extractor = extractor or SlotExtractor()
        self.id_factory = id_factory or ReminderIdFactory()
        self._handlers: dict[State, Callable[[str, PendingReminder | None], TurnResult]] = {
            State.IDLE: self._on_idle,
            State.AWAITING_CONFIRMATION: self._on_confirmation,
            State.AWAITING_CONTENT: self._on_content,
            State.AWAITING_TIME: self._on_time,
            State.AWAITING_DATE: self._on_date,
            State.AWAITING_BOTH: self._on_both,
        }

    # ------------------------------------------------------------------ #
    # Merging & committing
    # ------------------------------------------------------------------ #

    @staticmethod
    def merge(pending: PendingReminder, candidate: SlotCandidate) -> PendingReminder:
        """Field-wise override; absent (or empty-task) fields never erase."""
        update = {
            field: value
            for field, value in (
                ("task", candidate.task),
                ("time", candidate.time),
                ("date", candidate.date),
            )
            if value
        }
        return pending.model_copy(update=update)

    def _commit(self, pending: PendingReminder) -> TurnResult:
        if not pending.task:
            # Never hand an empty task to persistence.
            return TurnResult(next_state=State.IDLE, prompt=prompts.NOT_UNDERSTOOD)

        reminder = Reminder(
            id=self.id_factory(),
            task=pending.task,
            time=pending.time,
            date=pending.date,
            created_at=_now_iso(),
        )
        logger.info("[DialogueManager] Committed reminder %s", reminder.id)
        return TurnResult(next_state=State.IDLE, prompt=prompts.SAVED, committed=reminder)

    @staticmethod
    def _ask_for_missing(pending: PendingReminder) -> TurnResult:
        if pending.date and not pending.time:
            return TurnResult(next_state=State.AWAITING_TIME, prompt=prompts.ASK_TIME, next_pending=pending)
        if pending.time and not pending.date:
            return TurnResult(next_state=State.AWAITING_DATE, prompt=prompts.ASK_DATE, next_pending=pending)
        return TurnResult(next_state=State.AWAITING_BOTH, prompt=prompts.ASK_BOTH, next_pending=pending)

    def _settle(self, pending: PendingReminder) -> TurnResult:
        if pending.is_complete():
            return self._commit(pending)
        return self._ask_for_missing(pending)

    def _from_candidate(self, candidate: SlotCandidate, retry_state: State) -> TurnResult:
        if not candidate.task:
            return TurnResult(next_state=retry_state, prompt=prompts.NOT_UNDERSTOOD)
        pending = PendingReminder(task=candidate.task, time=candidate.time, date=candidate.date)
        return self._settle(pending)

    @staticmethod
    def _lost_track(state: State) -> TurnResult:
        logger.warning("[DialogueManager] %s without a pending reminder, resetting", state.value)
        return TurnResult(next_state=State.IDLE, prompt=prompts.LOST_TRACK)

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #

    def _on_idle(self, text: str, pending: PendingReminder | None) -> TurnResult:
        if not has_trigger(text):
            return TurnResult(next_state=State.AWAITING_CONFIRMATION, prompt=prompts.ASK_CONFIRMATION)
        return self._from_candidate(self.extractor.extract(text), retry_state=State.IDLE)

    def _on_confirmation(self, text: str, pending: PendingReminder | None) -> TurnResult:
        if is_affirmative(text):
            return TurnResult(next_state=State.AWAITING_CONTENT, prompt=prompts.ASK_CONTENT, next_pending=pending)
        if is_negative(text):
            return TurnResult(next_state=State.IDLE, prompt=prompts.DECLINED)
        return TurnResult(
            next_state=State.AWAITING_CONFIRMATION,
            prompt=prompts.REASK_CONFIRMATION,
            next_pending=pending,
        )

    def _on_content(self, text: str, pending: PendingReminder | None) -> TurnResult:
        return self._from_candidate(self.extractor.extract(text), retry_state=State.AWAITING_CONTENT)

    def _on_time(self, text: str, pending: PendingReminder | None) -> TurnResult:
        if pending is None:
            return self._lost_track(State.AWAITING_TIME)
        slots = self.extractor.extract_slots(text)
        if not slots.time:
            return TurnResult(next_state=State.AWAITING_TIME, prompt=prompts.REASK_TIME, next_pending=pending)
        merged = pending.model_copy(
            update={"time": slots.time, "date": pending.date or self.extractor.today_label()}
        )
        return self._settle(merged)

    def _on_date(self, text: str, pending: PendingReminder | None) -> TurnResult:
        if pending is None:
            return self._lost_track(State.AWAITING_DATE)
        slots = self.extractor.extract_slots(text)
        if not slots.date:
            return TurnResult(next_state=State.AWAITING_DATE, prompt=prompts.REASK_DATE, next_pending=pending)
        return self._settle(pending.model_copy(update={"date": slots.date}))

    def _on_both(self, text: str, pending: PendingReminder | None) -> TurnResult:
        if pending is None:
            return self._lost_track(State.AWAITING_BOTH)
        slots = self.extractor.extract_slots(text)
        if not slots.time and not slots.date:
            return TurnResult(next_state=State.AWAITING_BOTH, prompt=prompts.REASK_BOTH, next_pending=pending)
        return self._settle(self.merge(pending, slots))

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def handle(
        self,
        utterance: str,
        state: State | str | Any,
        pending: PendingReminder | None = None,
    ) -> TurnResult:
        """
        Process one utterance.

        Returns the next state, the prompt to speak (if any), the committed
        reminder (if any) and the pending reminder to carry into the next
        turn. Unknown state values reset the conversation.
        """
        try:
            current = State(state)
        except (ValueError, TypeError):
            logger.warning("[DialogueManager.handle] Unknown state %r, resetting", state)
            return self.reset()

        logger.debug("[DialogueManager.handle] state=%s utterance=%r", current.value, utterance)
        return self._handlers[current](utterance or "", pending)

    @staticmethod
    def reset() -> TurnResult:
        return TurnResult(next_state=State.IDLE)
