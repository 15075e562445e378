# remind_me/__init__.py

from .assistant import ReminderAssistant
from .dialogue.engine import DialogueManager
from .models import ConversationState, PendingReminder, Reminder, SlotCandidate, TurnResult
from .nlu.extractor import SlotExtractor, extract, extract_slots, is_affirmative, is_negative

__all__ = [
    "ConversationState",
    "DialogueManager",
    "PendingReminder",
    "Reminder",
    "ReminderAssistant",
    "SlotCandidate",
    "SlotExtractor",
    "TurnResult",
    "extract",
    "extract_slots",
    "is_affirmative",
    "is_negative",
]
