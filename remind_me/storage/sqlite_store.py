# remind_me/storage/sqlite_store.py

import os
import sqlite3

from ..models import Reminder


class ReminderStore:
    """
    SQLite-backed list of committed reminders.

    Append-only apart from bulk clear; rows come back ordered by id,
    which is creation order.
    """

    def __init__(self, path: str = "~/.remind_me/reminders.db") -> None:
        self.path = os.path.expanduser(path)
        if self.path != ":memory:":
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        self.conn = sqlite3.connect(self.path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        cur = self.conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS reminders (
                id TEXT PRIMARY KEY,
                task TEXT NOT NULL,
                time TEXT,
                date TEXT,
                created_at TEXT
            );
            """
        )
        self.conn.commit()

    @staticmethod
    def _row_to_model(row: sqlite3.Row) -> Reminder:
        return Reminder(
            id=row["id"],
            task=row["task"],
            time=row["time"],
            date=row["date"],
            created_at=row["created_at"],
        )

    def insert(self, reminder: Reminder) -> None:
        cur = self.conn.cursor()
        cur.execute(
            """
            INSERT INTO reminders (
                id,
                task,
                time,
                date,
                created_at
            ) VALUES (?, ?, ?, ?, ?)
            """,
            (
                reminder.id,
                reminder.task,
                reminder.time,
                reminder.date,
                reminder.created_at,
            ),
        )
        self.conn.commit()

    def list_all(self) -> list[Reminder]:
        cur = self.conn.cursor()
        cur.execute("SELECT * FROM reminders ORDER BY id ASC;")
        rows = cur.fetchall()
        return [self._row_to_model(r) for r in rows]

    def clear(self) -> int:
        cur = self.conn.cursor()
        cur.execute("DELETE FROM reminders;")
        self.conn.commit()
        return cur.rowcount

    def close(self) -> None:
        self.conn.close()
