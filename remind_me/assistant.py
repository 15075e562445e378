# remind_me/assistant.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from .dialogue.engine import DialogueManager
from .models import ConversationState, PendingReminder, Reminder, TurnResult
from .nlu.extractor import SlotExtractor
from .prompts import dialogue_prompts as prompts
from .speech.console_speaker import ConsoleSpeaker
from .storage.sqlite_store import ReminderStore

logger = logging.getLogger(__name__)


class ReminderAssistant:
    """
    Public facade.

    Owns the one live conversation (state + pending reminder) and wires the
    dialogue manager to its collaborators:
    - process() runs an utterance through DialogueManager, speaks the
      prompt and appends committed reminders to the store
    - reset() drops the in-flight reminder and goes back to idle
    - reminders() / clear_reminders() read and wipe the store

    Not thread-safe; one input stream drives one assistant.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        speaker: Callable[[str], None] | None = None,
        store: ReminderStore | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        config = config or {}

        sqlite_path = config.get("sqlite_path", "~/.remind_me/reminders.db")
        resolve_weekdays = bool(config.get("resolve_weekdays", False))

        # Core components
        self.store = store or ReminderStore(path=sqlite_path)
        self.extractor = SlotExtractor(now=now, resolve_weekdays=resolve_weekdays)
        self.dialogue = DialogueManager(extractor=self.extractor)
        self.speaker = speaker or ConsoleSpeaker()

        # Conversation
        self.state = ConversationState.IDLE
        self.pending: PendingReminder | None = None
        self.last_heard: str | None = None

    # ------------------------------------------------------------------ #
    # Turns
    # ------------------------------------------------------------------ #

    def process(self, text: str) -> TurnResult | None:
        """
        Handle one transcribed utterance.

        Blank input is ignored. When the store rejects a committed reminder
        the turn is rolled back: state and pending stay as they were, so the
        user can repeat the answer to retry.
        """
        if not text or not text.strip():
            return None
        self.last_heard = text.strip()

        result = self.dialogue.handle(text, self.state, self.pending)

        if result.committed is not None and not self._save(result.committed):
            self._speak(prompts.SAVE_FAILED)
            return TurnResult(
                next_state=self.state,
                prompt=prompts.SAVE_FAILED,
                next_pending=self.pending,
            )

        self.state = result.next_state
        self.pending = result.next_pending
        if result.prompt:
            self._speak(result.prompt)
        return result

    def reset(self) -> None:
        result = self.dialogue.reset()
        self.state = result.next_state
        self.pending = result.next_pending
        self.last_heard = None
        logger.info("[ReminderAssistant.reset] Conversation reset")

    # ------------------------------------------------------------------ #
    # Stored reminders
    # ------------------------------------------------------------------ #

    def reminders(self) -> list[Reminder]:
        return self.store.list_all()

    def clear_reminders(self) -> int:
        removed = self.store.clear()
        logger.info("[ReminderAssistant.clear_reminders] Removed %s reminders", removed)
        return removed

    def status_text(self, listening: bool = False) -> str:
        heard = self.last_heard if listening else None
        return prompts.status_text(self.state, listening=listening, heard=heard)

    def close(self) -> None:
        self.store.close()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _save(self, reminder: Reminder) -> bool:
        try:
            self.store.insert(reminder)
        except Exception as e:
            logger.exception("[ReminderAssistant.process] Saving reminder %s failed: %s", reminder.id, e)
            return False
        return True

    def _speak(self, text: str) -> None:
        try:
            self.speaker(text)
        except Exception as e:
            logger.exception("[ReminderAssistant] Speech output failed: %s", e)
