"""
CLI (Command Line Interface).

    classbook interactive
    classbook run average c/CS2113T a/Midterms
    classbook --data path/to/classbook.json interactive

Note:
- The command loop lives in classbook/interactive.py
- `run` executes exactly one command line and exits with 0 (ok) or 1 (error);
  unreadable data or a failed save counts as an error
"""

from __future__ import annotations

import argparse

from classbook.commands import parse_command
from classbook.errors import ClassbookError, InvalidStateError, StorageError
from classbook.registry import ModuleList
from classbook.storage import Storage
from classbook.ui import Ui


def _load_for_session(storage: Storage, ui: Ui) -> tuple[ModuleList, Storage | None]:
    """
    Load saved data for an interactive session.

    Broken data is moved aside to <name>.bak and the session starts empty,
    so the next save cannot overwrite it. If the file cannot be moved,
    saving is turned off for the session.
    """
    try:
        return storage.load(), storage
    except InvalidStateError as exc:
        try:
            backup = storage.move_aside()
        except StorageError as move_exc:
            ui.print_warning(
                f"{exc.message}\n{move_exc.message}\n"
                "Starting with an empty module list. Saving is turned off for this session."
            )
            return ModuleList(), None
        ui.print_warning(f"{exc.message}\nThe file was moved to {backup}.\nStarting with an empty module list.")
        return ModuleList(), storage


def _cmd_run(args: argparse.Namespace, storage: Storage, ui: Ui) -> int:
    line = " ".join(args.words).strip()
    if not line:
        ui.print_error("Please provide a command, e.g. 'list_modules'.")
        return 1

    # a failed load or save ends the run with exit 1 and leaves the file as it was
    try:
        module_list = storage.load()
        parse_command(line).execute(module_list, ui, storage)
    except ClassbookError as exc:
        ui.print_error(exc.message)
        return 1
    return 0


def _cmd_interactive(args: argparse.Namespace, storage: Storage, ui: Ui) -> int:
    from classbook.interactive import run_interactive

    module_list, session_storage = _load_for_session(storage, ui)
    run_interactive(module_list, ui, session_storage)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="classbook", description="Classbook CLI")
    parser.add_argument("--data", type=str, default=None, help="Path of the JSON data file")
    sub = parser.add_subparsers(dest="command", required=True)

    p_run = sub.add_parser("run", help="Run a single command, e.g. 'list_modules'")
    p_run.add_argument("words", nargs=argparse.REMAINDER, help="Command keyword and arguments")

    sub.add_parser("interactive", help="Interactive command mode")

    return parser


def main(argv: list[str] | None = None, ui: Ui | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    storage = Storage(args.data)
    ui = ui if ui is not None else Ui()

    if args.command == "run":
        raise SystemExit(_cmd_run(args, storage, ui))
    if args.command == "interactive":
        raise SystemExit(_cmd_interactive(args, storage, ui))

    raise SystemExit(2)
