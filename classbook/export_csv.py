"""
CSV export of a module's marks.

One row per student, one column per assessment, so the sheet can be opened in:
- Excel / LibreOffice
- Google Sheets
"""

from __future__ import annotations

import csv
from pathlib import Path

from classbook.model import Module


def _format_mark(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:g}"


def export_marks_to_csv(module: Module, out_path: str | Path) -> int:
    """
    Export the module's marks to a .csv file. Returns number of student rows.
    Unmarked cells are left blank.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    assessment_names = [a.name for a in module.assessments]

    count = 0
    with out.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["student_id", "name", *assessment_names])
        for student in module.students:
            row = [student.student_id, student.name]
            row.extend(_format_mark(student.get_marks(name)) for name in assessment_names)
            writer.writerow(row)
            count += 1

    return count
