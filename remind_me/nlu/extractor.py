# remind_me/nlu/extractor.py

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable

from ..models import SlotCandidate
from .patterns import (
    AFFIRMATIVE_WORDS,
    DANGLING_CONNECTOR,
    DATE_PATTERNS,
    NEGATIVE_WORDS,
    TIME_PATTERNS,
    TRIGGER_PHRASES,
    TRIGGER_STRIP_ORDER,
    format_date_label,
    keep_literal,
    next_weekday,
)

logger = logging.getLogger(__name__)


def _normalize(text: str) -> str:
    return (text or "").lower().strip()


def _cut(text: str, start: int, end: int) -> str:
    return (text[:start] + text[end:]).strip()


def has_trigger(text: str) -> bool:
    lowered = _normalize(text)
    return any(lowered.startswith(phrase) for phrase in TRIGGER_PHRASES)


def is_affirmative(text: str) -> bool:
    return _normalize(text) in AFFIRMATIVE_WORDS


def is_negative(text: str) -> bool:
    return _normalize(text) in NEGATIVE_WORDS


def _take_time(text: str) -> tuple[str | None, str]:
    for pattern in TIME_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip(), _cut(text, *match.span())
    return None, text


def _isolate_task(text: str) -> str:
    task = " ".join(text.split())
    for phrase in TRIGGER_STRIP_ORDER:
        if task == phrase or task.startswith(phrase + " "):
            task = task[len(phrase):].strip()
            break
    return DANGLING_CONNECTOR.sub("", task).strip()


class SlotExtractor:
    """
    Rule-based slot extraction component.

    - Gates on a leading trigger phrase ("remind me ...").
    - Pulls at most one time and one date expression out of the text,
      in priority order (see patterns.TIME_PATTERNS / DATE_PATTERNS).
    - Whatever remains after the trigger is the task.

    Stateless apart from the clock; every call returns a fresh candidate.
    """

    def __init__(
        self,
        now: Callable[[], datetime] | None = None,
        resolve_weekdays: bool = False,
    ) -> None:
        self.now = now or datetime.now
        self.resolve_weekdays = resolve_weekdays

    def today(self) -> date:
        return self.now().date()

    def today_label(self) -> str:
        return format_date_label(self.today())

    def _take_date(self, text: str, today: date) -> tuple[str | None, str]:
        for pattern, normalize in DATE_PATTERNS:
            match = pattern.search(text)
            if not match:
                continue
            label = normalize(match, today)
            if label is None:
                logger.debug("[SlotExtractor] Unresolvable date keyword %r", match.group(0))
            elif normalize is keep_literal and self.resolve_weekdays:
                label = next_weekday(label, today) or label
            return label, _cut(text, *match.span())
        return None, text

    def extract(self, utterance: str) -> SlotCandidate:
        """
        Turn one utterance into a {task, time, date} candidate.

        Returns an empty task when the utterance does not start with a
        trigger phrase. A time without any date keyword means today.
        """
        text = _normalize(utterance)
        if not has_trigger(text):
            return SlotCandidate(task="")

        today = self.today()
        time, text = _take_time(text)
        date_label, text = self._take_date(text, today)
        task = _isolate_task(text)

        if time and not date_label:
            date_label = format_date_label(today)

        return SlotCandidate(task=task, time=time, date=date_label)

    def extract_slots(self, utterance: str) -> SlotCandidate:
        """
        Time/date only, for follow-up answers ("tomorrow", "3pm").

        No trigger gate and no time-implies-today default; the dialogue
        manager decides what a missing date means in context.
        """
        text = _normalize(utterance)
        time, text = _take_time(text)
        date_label, _ = self._take_date(text, self.today())
        return SlotCandidate(task="", time=time, date=date_label)


_default_extractor = SlotExtractor()


def extract(utterance: str) -> SlotCandidate:
    return _default_extractor.extract(utterance)


def extract_slots(utterance: str) -> SlotCandidate:
    return _default_extractor.extract_slots(utterance)
