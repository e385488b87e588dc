"""
Interactive command loop.

One command runs to completion before the next line is read.
A failing command prints its message and the session goes on.
If saving fails, the change stays in memory for the rest of the session.
"""

from __future__ import annotations

from classbook.commands import parse_command
from classbook.errors import ClassbookError, StorageError
from classbook.registry import ModuleList
from classbook.storage import Storage
from classbook.ui import Ui


def execute_line(line: str, module_list: ModuleList, ui: Ui, storage: Storage | None) -> bool:
    """
    Run one raw input line. Returns True if the session should end.
    Errors are printed, never raised.
    """
    try:
        command = parse_command(line)
        command.execute(module_list, ui, storage)
    except StorageError as exc:
        ui.print_warning(f"{exc.message}\nChanges are kept for this session only.")
        return False
    except ClassbookError as exc:
        ui.print_error(exc.message)
        return False
    return command.is_exit


def run_interactive(module_list: ModuleList, ui: Ui, storage: Storage | None) -> None:
    ui.print_welcome()
    while True:
        try:
            line = ui.read_command()
        except (EOFError, KeyboardInterrupt):
            ui.print_message("")
            break

        if not line.strip():
            continue

        ui.print_divider()
        done = execute_line(line, module_list, ui, storage)
        ui.print_divider()
        if done:
            break

    ui.print_goodbye()
