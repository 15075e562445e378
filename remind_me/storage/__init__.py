# remind_me/storage/__init__.py

from .sqlite_store import ReminderStore

__all__ = ["ReminderStore"]
