"""
Central data model definitions used across the project.

This module defines the canonical structure of Student, Assessment and Module
objects so that:
- commands, storage and export share the same field names
- every entity can check its own invariants via verify()

Collections of entities live in classbook/registry.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from classbook.registry import AssessmentList, StudentList

MIN_MARKS = 0.0
MAX_MARKS = 100.0
MAX_WEIGHTAGE = 100.0


@dataclass
class Student:
    """
    Represents one student enrolled in a module.

    marks maps an assessment name to the recorded mark.
    A missing key means the student has not been marked yet.
    """

    student_id: str
    name: str
    marks: Dict[str, float] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return self.student_id

    def marks_exist(self, assessment_name: str) -> bool:
        return assessment_name in self.marks

    def get_marks(self, assessment_name: str) -> Optional[float]:
        return self.marks.get(assessment_name)

    def set_marks(self, assessment_name: str, value: float) -> None:
        self.marks[assessment_name] = float(value)

    def delete_marks(self, assessment_name: str) -> bool:
        return self.marks.pop(assessment_name, None) is not None

    def verify(self) -> bool:
        if not self.student_id or not self.name:
            return False
        for value in self.marks.values():
            if not isinstance(value, (int, float)) or not (MIN_MARKS <= value <= MAX_MARKS):
                return False
        return True

    def __str__(self) -> str:
        return f"{self.student_id} {self.name}"


@dataclass
class Assessment:
    """
    A gradable component of a module, e.g. "Midterms".

    weightage is the percentage the assessment contributes to the final grade.
    """

    name: str
    weightage: float

    @property
    def key(self) -> str:
        return self.name

    def verify(self) -> bool:
        if not self.name:
            return False
        return isinstance(self.weightage, (int, float)) and 0 < self.weightage <= MAX_WEIGHTAGE

    def __str__(self) -> str:
        return f"{self.name} ({self.weightage:g}%)"


@dataclass
class Module:
    """
    A course unit identified by its code.

    The module owns exactly one StudentList and one AssessmentList;
    both are created with the module and dropped together with it.
    """

    code: str
    name: str
    students: StudentList = field(default_factory=StudentList)
    assessments: AssessmentList = field(default_factory=AssessmentList)

    @property
    def key(self) -> str:
        return self.code

    def verify(self) -> bool:
        if not self.code or not self.name:
            return False
        if not self.students.verify():
            return False
        if not self.assessments.verify():
            return False
        # marks may only refer to assessments defined on this module
        for student in self.students:
            for assessment_name in student.marks:
                if self.assessments.get(assessment_name) is None:
                    return False
        return True

    def __str__(self) -> str:
        if not self.name:
            return self.code
        return f"{self.code} ({self.name})"
