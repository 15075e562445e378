# remind_me/nlu/patterns.py

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Callable, Optional

TRIGGER_PHRASES = ("remind me that", "remind me to", "remind me")

# Order used when stripping the trigger off the task text.
TRIGGER_STRIP_ORDER = ("remind me to", "remind me that", "remind me")

AFFIRMATIVE_WORDS = frozenset({"yes", "yeah", "yep", "sure"})
NEGATIVE_WORDS = frozenset({"no", "nope", "nah"})

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)
_WEEKDAY_ALT = "|".join(WEEKDAYS)

DANGLING_CONNECTOR = re.compile(r"\s*\b(?:at|on)\b\s*$")

DateNormalizer = Callable[[re.Match, date], Optional[str]]


def format_date_label(day: date) -> str:
    """Render a calendar day in the fixed short form, e.g. "Jan 5"."""
    return f"{day:%b} {day.day}"


def _days_later(match: re.Match, today: date) -> str | None:
    try:
        days = int(match.group(1))
    except (TypeError, ValueError):
        return None
    try:
        return format_date_label(today + timedelta(days=days))
    except OverflowError:
        return None


def _offset(days: int) -> DateNormalizer:
    def normalize(match: re.Match, today: date) -> str | None:
        return format_date_label(today + timedelta(days=days))

    return normalize


def keep_literal(match: re.Match, today: date) -> str | None:
    return match.group(0)


# ------------------------------------------------------------------ #
# Ordered cascades. First match wins; later entries overlap earlier
# ones, so the order is part of the grammar.
# ------------------------------------------------------------------ #

TIME_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"(\d{1,2}:\d{2}\s*(?:am|pm))"),
    re.compile(r"(\d{1,2}\s*(?:am|pm))"),
    re.compile(r"(\d{1,2}\s*o'?clock)"),
    re.compile(r"\bat\s*(\d{1,2}(?::\d{2})?(?:\s*(?:am|pm))?)"),
)

DATE_PATTERNS: tuple[tuple[re.Pattern, DateNormalizer], ...] = (
    (re.compile(r"(\d+)\s*days?\s*later"), _days_later),
    (re.compile(r"next\s*week"), _offset(7)),
    (re.compile(r"tomorrow"), _offset(1)),
    (re.compile(r"today"), _offset(0)),
    (re.compile(rf"({_WEEKDAY_ALT})"), keep_literal),
    (re.compile(rf"next\s*({_WEEKDAY_ALT})"), keep_literal),
)


def next_weekday(label: str, today: date) -> str | None:
    """Resolve "monday" / "next monday" to the next occurrence after today."""
    name = label.split()[-1] if label else ""
    if name not in WEEKDAYS:
        return None
    ahead = (WEEKDAYS.index(name) - today.weekday()) % 7 or 7
    return format_date_label(today + timedelta(days=ahead))
