"""
Ordered, uniquely keyed collections of entities.

- StudentList: keyed by student id
- AssessmentList: keyed by assessment name
- ModuleList: keyed by module code

Keys are matched exactly (case-sensitive). get() returns None for an unknown
key so callers decide whether absence is an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Generic, Iterator, List, Optional, TypeVar

from classbook.errors import DuplicateEntryError

if TYPE_CHECKING:
    from classbook.model import Assessment, Module, Student

T = TypeVar("T")

MAX_TOTAL_WEIGHTAGE = 100.0


class _KeyedList(Generic[T]):
    """
    Insertion-ordered container; every entity exposes a .key property.
    """

    label = "Entry"

    def __init__(self) -> None:
        # dicts keep insertion order, which is the listing order
        self._entries: Dict[str, T] = {}

    def add(self, entity: T) -> T:
        key = entity.key  # type: ignore[attr-defined]
        if key in self._entries:
            raise DuplicateEntryError(f"{self.label} already exists: {key}")
        self._entries[key] = entity
        return entity

    def get(self, key: str) -> Optional[T]:
        return self._entries.get(key)

    def remove(self, key: str) -> Optional[T]:
        return self._entries.pop(key, None)

    @property
    def size(self) -> int:
        return len(self._entries)

    def items(self) -> List[T]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._entries.values()))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def verify(self) -> bool:
        """
        Check every member; stops at the first invalid one.
        """
        for key, entity in self._entries.items():
            if key != entity.key:  # type: ignore[attr-defined]
                return False
            if not entity.verify():  # type: ignore[attr-defined]
                return False
        return True


class StudentList(_KeyedList["Student"]):
    label = "Student"

    def find(self, keyword: str) -> List["Student"]:
        """
        Case-insensitive substring search over student id and name.
        """
        needle = keyword.strip().lower()
        if not needle:
            return []
        return [s for s in self if needle in f"{s.student_id} {s.name}".lower()]


class AssessmentList(_KeyedList["Assessment"]):
    label = "Assessment"

    def total_weightage(self) -> float:
        return sum(a.weightage for a in self)

    def verify(self) -> bool:
        if not super().verify():
            return False
        return self.total_weightage() <= MAX_TOTAL_WEIGHTAGE


class ModuleList(_KeyedList["Module"]):
    label = "Module"
