"""CLI REPL interface."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Callable

from remind_me.assistant import ReminderAssistant
from remind_me.prompts.dialogue_prompts import state_label


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Remind Me CLI")
    parser.add_argument("--db-path", default=None)
    parser.add_argument("--resolve-weekdays", action="store_true")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("utterance", nargs=argparse.REMAINDER)
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> dict[str, object]:
    config: dict[str, object] = {"resolve_weekdays": bool(args.resolve_weekdays)}
    db_path = args.db_path or os.getenv("REMIND_ME_DB_PATH")
    if db_path:
        config["sqlite_path"] = db_path
    return config


def _print_help() -> None:
    print("Commands:")
    print("/help")
    print("/exit")
    print("/reset   start the current reminder over")
    print("/list    show saved reminders")
    print("/clear   delete all saved reminders")
    print("/status")
    print('Tip: start with "remind me to ...", e.g. "remind me to call mom at 3pm tomorrow".')


def _handle_list(assistant: ReminderAssistant) -> None:
    reminders = assistant.reminders()
    if not reminders:
        print('No reminders yet. Say "Remind me that..." to add one!')
        return
    for reminder in reminders:
        print(f"- {reminder.display()}")


def _handle_clear(assistant: ReminderAssistant) -> None:
    answer = input("Delete all reminders? [y/N] ").strip().lower()
    if answer not in {"y", "yes"}:
        print("Cancelled.")
        return
    removed = assistant.clear_reminders()
    print(f"Removed {removed} reminders.")


def _handle_status(assistant: ReminderAssistant) -> None:
    print(f"State: {state_label(assistant.state)}")
    if assistant.pending is not None:
        print(f"Pending: {assistant.pending.model_dump()}")
    print(assistant.status_text())


def run_cli(assistant: ReminderAssistant) -> None:
    """Run CLI REPL."""
    print("Remind Me ready. Type /help for commands.")

    handlers: dict[str, Callable[[], None]] = {
        "/help": _print_help,
        "/exit": lambda: (_ for _ in ()).throw(EOFError()),
        "/reset": assistant.reset,
        "/list": lambda: _handle_list(assistant),
        "/clear": lambda: _handle_clear(assistant),
        "/status": lambda: _handle_status(assistant),
    }

    try:
        while True:
            raw = input("> ").strip()
            if not raw:
                continue
            if raw.startswith("/"):
                handler = handlers.get(raw.split()[0].lower())
                if not handler:
                    print("Unknown command. Use /help.")
                    continue
                try:
                    handler()
                except EOFError:
                    break
                continue
            assistant.process(raw)
    except (KeyboardInterrupt, EOFError):
        print("\nExiting...")
    finally:
        assistant.close()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    assistant = ReminderAssistant(config=build_config(args))

    if args.utterance:
        try:
            assistant.process(" ".join(args.utterance).strip())
        finally:
            assistant.close()
        return 0

    run_cli(assistant)
    return 0


if __name__ == "__main__":
    sys.exit(main())
