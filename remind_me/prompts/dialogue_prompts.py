# remind_me/prompts/dialogue_prompts.py

from __future__ import annotations

from ..models import ConversationState

SAVED = "Perfect! I will remind you."
SAVE_FAILED = "Sorry, I had trouble saving your reminder. Please try again."

ASK_TIME = "What time should I remind you?"
ASK_DATE = "When should I remind you?"
ASK_BOTH = "When and at what time should I remind you?"
ASK_CONTENT = "Tell me what I should remind you later."
ASK_CONFIRMATION = "Did you mean to set a reminder?"

NOT_UNDERSTOOD = "I couldn't understand what you want me to remind you about. Please try again."
DECLINED = 'Alright. Whenever you need to set a reminder, just say "remind me that".'
LOST_TRACK = "Sorry, I lost track of that reminder. Let's start again."

REASK_CONFIRMATION = "Please say yes or no. Did you mean to set a reminder?"
REASK_TIME = "I couldn't understand the time. Please tell me what time I should remind you."
REASK_DATE = "I couldn't understand when you want to be reminded. Please tell me the day."
REASK_BOTH = "I need to know when and at what time. Please tell me both the day and time."


# Hint lines shown next to the microphone, keyed by state.
LISTENING_HINTS: dict[ConversationState, str] = {
    ConversationState.AWAITING_CONFIRMATION: "Listening for yes/no...",
    ConversationState.AWAITING_CONTENT: "Listening for reminder...",
    ConversationState.AWAITING_TIME: "Listening for time...",
    ConversationState.AWAITING_DATE: "Listening for date...",
    ConversationState.AWAITING_BOTH: "Listening for time and date...",
}

IDLE_HINTS: dict[ConversationState, str] = {
    ConversationState.AWAITING_CONFIRMATION: "Say yes or no",
    ConversationState.AWAITING_CONTENT: "Tell me your reminder",
    ConversationState.AWAITING_TIME: "Tell me the time",
    ConversationState.AWAITING_DATE: "Tell me the date",
    ConversationState.AWAITING_BOTH: "Tell me time and date",
}


def status_text(
    state: ConversationState,
    listening: bool = False,
    heard: str | None = None,
    error: str | None = None,
) -> str:
    if error:
        return "An error occurred"
    if listening:
        if heard:
            return heard
        return LISTENING_HINTS.get(state, "Listening...")
    return IDLE_HINTS.get(state, "Tap to speak")


def state_label(state: ConversationState) -> str:
    """Title-cased state name, e.g. "Awaiting Time"."""
    return state.value.replace("_", " ").title()
