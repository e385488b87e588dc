"""
Exceptions raised by commands, the model and storage.

Every error a user can trigger derives from ClassbookError, so the
interactive loop and the CLI only have to catch one type and print its
message. None of them is fatal to the session.
"""

from __future__ import annotations

from typing import Iterable


class ClassbookError(Exception):
    """Base class for all recoverable classbook errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UsageError(ClassbookError):
    """Raised when a command that needs arguments is invoked without any."""


class UnknownCommandError(ClassbookError):
    def __init__(self, keyword: str) -> None:
        super().__init__(f"Unknown command: {keyword!r}. Type 'help' to see all commands.")
        self.keyword = keyword


class MissingArgumentError(ClassbookError):
    """Raised when required key/value arguments are absent or blank."""

    def __init__(self, missing_keys: Iterable[str], usage: str) -> None:
        self.missing_keys = list(missing_keys)
        markers = ", ".join(f"{k}/" for k in self.missing_keys)
        super().__init__(f"Missing argument(s): {markers}\n{usage}")


class InvalidArgumentError(ClassbookError):
    """Raised when an argument value is malformed or out of range."""


class DuplicateEntryError(ClassbookError):
    """Raised when a key is already taken in its collection."""


class NotFoundError(ClassbookError):
    """Raised when a key does not resolve to an entity."""


class ModuleCodeNotFoundError(NotFoundError):
    def __init__(self, code: str) -> None:
        super().__init__(f"Module not found: {code}")
        self.code = code


class StudentNotFoundError(NotFoundError):
    def __init__(self, student_id: str) -> None:
        super().__init__(f"Student not found: {student_id}")
        self.student_id = student_id


class InvalidAssessmentNameError(NotFoundError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Invalid assessment name: {name}")
        self.name = name


class NoStudentsError(ClassbookError):
    def __init__(self, code: str = "") -> None:
        super().__init__(f"There are no students in {code}." if code else "There are no students.")
        self.code = code


class InvalidStateError(ClassbookError):
    """Raised when loaded data fails verification."""


class StorageError(ClassbookError):
    """Raised when the data file cannot be written."""


class ExportError(ClassbookError):
    """Raised when an export file cannot be written."""
