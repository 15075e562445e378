from __future__ import annotations

from datetime import datetime

import pytest

from remind_me.dialogue.engine import DialogueManager, ReminderIdFactory
from remind_me.models import ConversationState, PendingReminder, SlotCandidate
from remind_me.nlu.extractor import SlotExtractor
from remind_me.prompts import dialogue_prompts as prompts

State = ConversationState

# Monday, January 5th 2026.
FIXED_NOW = datetime(2026, 1, 5, 9, 30)


def _manager() -> DialogueManager:
    return DialogueManager(extractor=SlotExtractor(now=lambda: FIXED_NOW))


def test_scenario_task_then_date_then_time() -> None:
    manager = _manager()

    first = manager.handle("remind me to call mom", State.IDLE, None)
    assert first.next_state is State.AWAITING_BOTH
    assert first.next_pending == PendingReminder(task="call mom")
    assert first.prompt == prompts.ASK_BOTH
    assert first.committed is None

    second = manager.handle("tomorrow", first.next_state, first.next_pending)
    assert second.next_state is State.AWAITING_TIME
    assert second.next_pending == PendingReminder(task="call mom", date="Jan 6")
    assert second.prompt == prompts.ASK_TIME

    third = manager.handle("3pm", second.next_state, second.next_pending)
    assert third.next_state is State.IDLE
    assert third.next_pending is None
    assert third.prompt == prompts.SAVED
    assert third.committed is not None
    assert (third.committed.task, third.committed.time, third.committed.date) == ("call mom", "3pm", "Jan 6")


def test_scenario_no_trigger_then_decline() -> None:
    manager = _manager()

    first = manager.handle("set an alarm", State.IDLE, None)
    assert first.next_state is State.AWAITING_CONFIRMATION
    assert first.prompt == prompts.ASK_CONFIRMATION

    second = manager.handle("no", first.next_state, first.next_pending)
    assert second.next_state is State.IDLE
    assert second.next_pending is None
    assert second.committed is None
    assert second.prompt == prompts.DECLINED


def test_idle_complete_utterance_commits_immediately() -> None:
    result = _manager().handle("remind me to call mom at 3pm tomorrow", State.IDLE, None)

    assert result.next_state is State.IDLE
    assert result.committed is not None
    assert result.committed.task == "call mom"
    assert result.committed.id
    assert result.next_pending is None


def test_idle_task_and_date_asks_for_time() -> None:
    result = _manager().handle("remind me to call mom tomorrow", State.IDLE, None)

    assert result.next_state is State.AWAITING_TIME
    assert result.prompt == prompts.ASK_TIME
    assert result.next_pending == PendingReminder(task="call mom", date="Jan 6")


@pytest.mark.parametrize("utterance", ["remind me", "remind me at 9 am", "remind me tomorrow"])
def test_idle_trigger_without_task_asks_to_repeat(utterance: str) -> None:
    result = _manager().handle(utterance, State.IDLE, None)

    assert result.next_state is State.IDLE
    assert result.prompt == prompts.NOT_UNDERSTOOD
    assert result.committed is None
    assert result.next_pending is None


def test_confirmation_yes_then_content() -> None:
    manager = _manager()

    yes = manager.handle("yeah", State.AWAITING_CONFIRMATION, None)
    assert yes.next_state is State.AWAITING_CONTENT
    assert yes.prompt == prompts.ASK_CONTENT

    content = manager.handle("remind me to buy milk", yes.next_state, yes.next_pending)
    assert content.next_state is State.AWAITING_BOTH
    assert content.next_pending == PendingReminder(task="buy milk")


def test_confirmation_reasks_on_anything_else() -> None:
    result = _manager().handle("maybe later", State.AWAITING_CONFIRMATION, None)

    assert result.next_state is State.AWAITING_CONFIRMATION
    assert result.prompt == prompts.REASK_CONFIRMATION


def test_content_without_task_stays_put() -> None:
    result = _manager().handle("buy milk", State.AWAITING_CONTENT, None)

    assert result.next_state is State.AWAITING_CONTENT
    assert result.prompt == prompts.NOT_UNDERSTOOD
    assert result.next_pending is None


def test_content_with_task_and_time_asks_for_nothing_more() -> None:
    result = _manager().handle("remind me to buy milk at 6pm", State.AWAITING_CONTENT, None)

    assert result.next_state is State.IDLE
    assert result.committed is not None
    assert result.committed.date == "Jan 5"


def test_awaiting_time_reasks_and_keeps_pending() -> None:
    pending = PendingReminder(task="call mom", date="Jan 6")

    result = _manager().handle("whenever", State.AWAITING_TIME, pending)

    assert result.next_state is State.AWAITING_TIME
    assert result.prompt == prompts.REASK_TIME
    assert result.next_pending == pending


def test_awaiting_time_defaults_date_to_today() -> None:
    pending = PendingReminder(task="call mom")

    result = _manager().handle("at 5", State.AWAITING_TIME, pending)

    assert result.committed is not None
    assert (result.committed.time, result.committed.date) == ("5", "Jan 5")


def test_awaiting_time_keeps_pending_date_over_implied_today() -> None:
    pending = PendingReminder(task="call mom", date="friday")

    result = _manager().handle("remind me at 3pm", State.AWAITING_TIME, pending)

    assert result.committed is not None
    assert result.committed.date == "friday"


def test_awaiting_date_commits_on_date() -> None:
    pending = PendingReminder(task="call mom", time="3pm")

    result = _manager().handle("on friday", State.AWAITING_DATE, pending)

    assert result.next_state is State.IDLE
    assert result.committed is not None
    assert (result.committed.time, result.committed.date) == ("3pm", "friday")


def test_awaiting_date_reasks() -> None:
    pending = PendingReminder(task="call mom", time="3pm")

    result = _manager().handle("3pm", State.AWAITING_DATE, pending)

    assert result.next_state is State.AWAITING_DATE
    assert result.prompt == prompts.REASK_DATE
    assert result.next_pending == pending


def test_awaiting_both_with_time_only_asks_for_date() -> None:
    manager = _manager()
    pending = PendingReminder(task="call mom")

    partial = manager.handle("3pm", State.AWAITING_BOTH, pending)
    assert partial.next_state is State.AWAITING_DATE
    assert partial.prompt == prompts.ASK_DATE
    assert partial.next_pending == PendingReminder(task="call mom", time="3pm")

    done = manager.handle("in 2 days later", partial.next_state, partial.next_pending)
    assert done.committed is not None
    assert (done.committed.time, done.committed.date) == ("3pm", "Jan 7")


def test_awaiting_both_with_both_commits() -> None:
    result = _manager().handle("tomorrow at 3pm", State.AWAITING_BOTH, PendingReminder(task="call mom"))

    assert result.next_state is State.IDLE
    assert result.committed is not None
    assert (result.committed.time, result.committed.date) == ("3pm", "Jan 6")


def test_awaiting_both_with_neither_reasks() -> None:
    pending = PendingReminder(task="call mom")

    result = _manager().handle("soon", State.AWAITING_BOTH, pending)

    assert result.next_state is State.AWAITING_BOTH
    assert result.prompt == prompts.REASK_BOTH
    assert result.next_pending == pending


@pytest.mark.parametrize("state", [State.AWAITING_TIME, State.AWAITING_DATE, State.AWAITING_BOTH])
def test_follow_up_without_pending_resets(state: State) -> None:
    result = _manager().handle("tomorrow at 3pm", state, None)

    assert result.next_state is State.IDLE
    assert result.prompt == prompts.LOST_TRACK
    assert result.committed is None


@pytest.mark.parametrize("state", ["bogus", None, 42])
def test_unknown_state_resets_to_idle(state: object) -> None:
    result = _manager().handle("remind me to call mom", state, PendingReminder(task="x"))

    assert result.next_state is State.IDLE
    assert result.next_pending is None
    assert result.committed is None


def test_state_can_be_passed_as_its_string_value() -> None:
    result = _manager().handle("3pm", "awaiting_both", PendingReminder(task="call mom"))

    assert result.next_state is State.AWAITING_DATE


def test_reset() -> None:
    result = _manager().reset()

    assert result.next_state is State.IDLE
    assert result.next_pending is None
    assert result.prompt is None


@pytest.mark.parametrize(
    "pending",
    [
        PendingReminder(task="call mom"),
        PendingReminder(task="call mom", time="3pm"),
        PendingReminder(task="call mom", time="3pm", date="Jan 6"),
    ],
)
def test_merging_empty_candidate_is_a_no_op(pending: PendingReminder) -> None:
    assert DialogueManager.merge(pending, SlotCandidate()) == pending


def test_merge_overrides_present_fields_only() -> None:
    pending = PendingReminder(task="call mom", time="3pm")

    merged = DialogueManager.merge(pending, SlotCandidate(date="Jan 6"))

    assert merged == PendingReminder(task="call mom", time="3pm", date="Jan 6")
    assert pending.date is None


@pytest.mark.parametrize(
    ("state", "pending", "utterance"),
    [
        (State.IDLE, None, "remind me to call mom at 3pm tomorrow"),
        (State.AWAITING_CONFIRMATION, None, "nope"),
        (State.AWAITING_CONTENT, None, "remind me to call mom at 3pm"),
        (State.AWAITING_TIME, PendingReminder(task="call mom", date="Jan 6"), "3pm"),
        (State.AWAITING_DATE, PendingReminder(task="call mom", time="3pm"), "tomorrow"),
        (State.AWAITING_BOTH, PendingReminder(task="call mom"), "tomorrow at 3pm"),
    ],
)
def test_every_state_can_reach_idle(state: State, pending: PendingReminder | None, utterance: str) -> None:
    result = _manager().handle(utterance, state, pending)

    assert result.next_state is State.IDLE


@pytest.mark.parametrize(
    ("state", "pending", "utterance"),
    [
        (State.IDLE, None, "remind me to call mom at 3pm tomorrow"),
        (State.AWAITING_CONTENT, None, "remind me to call mom today"),
        (State.AWAITING_TIME, PendingReminder(task="call mom", date="Jan 6"), "3pm"),
        (State.AWAITING_DATE, PendingReminder(task="call mom", time="3pm"), "next week"),
        (State.AWAITING_BOTH, PendingReminder(task="call mom"), "tomorrow at 3pm"),
        (State.AWAITING_BOTH, PendingReminder(task="call mom"), "3pm"),
    ],
)
def test_commit_always_clears_pending(state: State, pending: PendingReminder | None, utterance: str) -> None:
    result = _manager().handle(utterance, state, pending)

    if result.committed is not None:
        assert result.next_pending is None
        assert result.committed.task


def test_reminder_ids_are_unique_and_ordered_with_a_stalled_clock() -> None:
    factory = ReminderIdFactory(clock=lambda: 1_000)

    ids = [factory() for _ in range(3)]

    assert ids == sorted(ids)
    assert len(set(ids)) == 3
    assert ids[0] == f"{1_000:020d}"
