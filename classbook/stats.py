"""
Aggregate statistics over the students of a module.

Average rule:
    average = (sum of recorded marks) / (class size)

Unmarked students count as zero and stay in the denominator.
The number of unmarked students is returned so callers can report it.
"""

from __future__ import annotations

from dataclasses import dataclass

from classbook.errors import NoStudentsError
from classbook.registry import StudentList


@dataclass(frozen=True)
class AverageResult:
    average: float
    class_size: int
    unmarked: int


def average_marks(students: StudentList, assessment_name: str) -> AverageResult:
    """
    Average mark for one assessment across the whole class.
    Raises NoStudentsError for an empty class.
    """
    class_size = students.size
    if class_size <= 0:
        raise NoStudentsError()

    total = 0.0
    unmarked = 0
    for student in students:
        if student.marks_exist(assessment_name):
            total += student.get_marks(assessment_name) or 0.0
        else:
            unmarked += 1

    return AverageResult(average=total / class_size, class_size=class_size, unmarked=unmarked)
