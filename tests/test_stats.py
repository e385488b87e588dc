"""
Unit tests for the class average.

Definition used here:
- unmarked students count as zero
- the denominator is always the full class size
"""

from __future__ import annotations

import unittest

from classbook.errors import NoStudentsError
from classbook.model import Student
from classbook.registry import StudentList
from classbook.stats import average_marks


def _students(*marks: float | None) -> StudentList:
    students = StudentList()
    for i, m in enumerate(marks, start=1):
        s = Student(f"A{i:04d}", f"Student {i}")
        if m is not None:
            s.set_marks("Midterms", m)
        students.add(s)
    return students


class TestAverageMarks(unittest.TestCase):
    def test_unmarked_student_counts_as_zero(self) -> None:
        result = average_marks(_students(20, 15, None), "Midterms")
        self.assertAlmostEqual(result.average, 35 / 3)
        self.assertEqual(result.class_size, 3)
        self.assertEqual(result.unmarked, 1)

    def test_average_times_class_size_is_sum_of_recorded_marks(self) -> None:
        cases = [
            (10, 20, 30),
            (None, None, 50),
            (None, None, None),
            (99.5, None, 0, 12.25),
        ]
        for marks in cases:
            with self.subTest(marks=marks):
                result = average_marks(_students(*marks), "Midterms")
                recorded = sum(m for m in marks if m is not None)
                self.assertAlmostEqual(result.average * len(marks), recorded)
                self.assertEqual(result.unmarked, sum(1 for m in marks if m is None))

    def test_other_assessments_are_ignored(self) -> None:
        students = _students(40, 60)
        first = students.get("A0001")
        assert first is not None
        first.set_marks("Finals", 100)
        self.assertAlmostEqual(average_marks(students, "Midterms").average, 50)

    def test_empty_class_is_rejected(self) -> None:
        with self.assertRaises(NoStudentsError) as ctx:
            average_marks(StudentList(), "Midterms")
        self.assertEqual(ctx.exception.message, "There are no students.")


if __name__ == "__main__":
    unittest.main()
