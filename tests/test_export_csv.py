import csv
import tempfile
import unittest
from pathlib import Path

from classbook.commands import parse_command
from classbook.errors import ExportError
from classbook.export_csv import export_marks_to_csv
from classbook.model import Assessment, Module, Student
from classbook.registry import ModuleList


class TestExportCSV(unittest.TestCase):
    def _module(self) -> Module:
        module = Module("CS2113T", "Software Engineering")
        module.assessments.add(Assessment("Midterms", 20))
        module.assessments.add(Assessment("Finals", 40))
        module.students.add(Student("A0001", "Alice Tan", {"Midterms": 18.5, "Finals": 30}))
        module.students.add(Student("A0002", "Bob Lim", {"Finals": 25}))
        return module

    def test_export_creates_file_with_blank_unmarked_cells(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "sub" / "marks.csv"
            n = export_marks_to_csv(self._module(), out)
            self.assertEqual(n, 2)
            with out.open(encoding="utf-8", newline="") as f:
                rows = list(csv.reader(f))
            self.assertEqual(rows[0], ["student_id", "name", "Midterms", "Finals"])
            self.assertEqual(rows[1], ["A0001", "Alice Tan", "18.5", "30"])
            self.assertEqual(rows[2], ["A0002", "Bob Lim", "", "25"])

    def test_export_command(self) -> None:
        modules = ModuleList()
        modules.add(self._module())
        messages: list[str] = []

        class _Ui:
            def print_message(self, text: str) -> None:
                messages.append(text)

        with tempfile.TemporaryDirectory() as d:
            out = Path(d) / "marks.csv"
            parse_command(f"export c/CS2113T f/{out}").execute(modules, _Ui(), None)
            self.assertTrue(out.exists())
        self.assertIn("Exported 2 student(s) of CS2113T", messages[-1])

    def test_export_into_unwritable_location_raises_export_error(self) -> None:
        modules = ModuleList()
        modules.add(self._module())

        class _Ui:
            def print_message(self, text: str) -> None:
                raise AssertionError(text)

        with tempfile.TemporaryDirectory() as d:
            blocker = Path(d) / "blocker"
            blocker.write_text("not a directory", encoding="utf-8")
            with self.assertRaises(ExportError):
                parse_command(f"export c/CS2113T f/{blocker / 'marks.csv'}").execute(modules, _Ui(), None)


if __name__ == "__main__":
    unittest.main()
