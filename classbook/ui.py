"""
Console UI built on rich.

Commands only see print_message/print_error; they never format for a
particular terminal. Text is printed verbatim (no rich markup parsing), so
names containing brackets are shown as typed.
"""

from __future__ import annotations

from typing import Optional

from rich.console import Console

PROMPT = "> "
DIVIDER = "-" * 60


class Ui:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console if console is not None else Console()

    def print_message(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False)

    def print_error(self, text: str) -> None:
        self.console.print(text, style="bold red", markup=False, highlight=False)

    def print_warning(self, text: str) -> None:
        self.console.print(text, style="yellow", markup=False, highlight=False)

    def print_divider(self) -> None:
        self.console.print(DIVIDER, style="dim", markup=False, highlight=False)

    def print_welcome(self) -> None:
        self.console.print("\n=== Classbook ===", style="bold cyan", markup=False)
        self.print_message("Type 'help' to see all commands, 'exit' to quit.")

    def print_goodbye(self) -> None:
        self.print_message("Bye.")

    def read_command(self) -> str:
        """
        Read one line of input. Raises EOFError at end of input.
        """
        return self.console.input(PROMPT)
