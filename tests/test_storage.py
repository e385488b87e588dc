"""
Unit tests for JSON storage of the module list.

Storage contract:
- Missing file -> empty ModuleList
- Malformed or unverifiable data -> InvalidStateError
- Write failures -> StorageError
- JSON schema: {"modules": [ ... ]}
"""

import json
import tempfile
import unittest
from pathlib import Path

from classbook.errors import InvalidStateError, StorageError
from classbook.model import Assessment, Module, Student
from classbook.registry import ModuleList
from classbook.storage import Storage


def _modules() -> ModuleList:
    modules = ModuleList()
    se = modules.add(Module("CS2113T", "Software Engineering"))
    se.assessments.add(Assessment("Midterms", 20))
    se.students.add(Student("A0001", "Alice Tan", {"Midterms": 18.5}))
    se.students.add(Student("A0002", "Bob Lim"))
    return modules


class TestStorage(unittest.TestCase):
    def test_load_missing_file_returns_empty(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            loaded = Storage(Path(d) / "missing.json").load()
            self.assertEqual(loaded.size, 0)

    def test_save_and_load_roundtrip(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "nested" / "classbook.json"
            storage = Storage(p)
            storage.save(_modules())

            data = json.loads(p.read_text(encoding="utf-8"))
            self.assertIn("modules", data)
            self.assertEqual(data["modules"][0]["code"], "CS2113T")

            loaded = storage.load()
            module = loaded.get("CS2113T")
            assert module is not None
            self.assertEqual(module.name, "Software Engineering")
            self.assertEqual([s.student_id for s in module.students], ["A0001", "A0002"])
            alice = module.students.get("A0001")
            assert alice is not None
            self.assertEqual(alice.get_marks("Midterms"), 18.5)
            midterms = module.assessments.get("Midterms")
            assert midterms is not None
            self.assertEqual(midterms.weightage, 20)

    def test_malformed_json_raises_invalid_state(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "classbook.json"
            p.write_text("{not json", encoding="utf-8")
            with self.assertRaises(InvalidStateError):
                Storage(p).load()

    def test_wrong_structure_raises_invalid_state(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "classbook.json"
            p.write_text(json.dumps({"modules": [{"name": "no code"}]}), encoding="utf-8")
            with self.assertRaises(InvalidStateError):
                Storage(p).load()

    def test_duplicate_keys_raise_invalid_state(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "classbook.json"
            module = {"code": "CS2113T", "name": "SE", "students": [], "assessments": []}
            p.write_text(json.dumps({"modules": [module, module]}), encoding="utf-8")
            with self.assertRaises(InvalidStateError):
                Storage(p).load()

    def test_failed_verification_raises_invalid_state(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "classbook.json"
            module = {
                "code": "CS2113T",
                "name": "SE",
                "students": [],
                "assessments": [{"name": "Midterms", "weightage": -5}],
            }
            p.write_text(json.dumps({"modules": [module]}), encoding="utf-8")
            with self.assertRaises(InvalidStateError):
                Storage(p).load()

    def test_save_into_unwritable_location_raises_storage_error(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            blocker = Path(d) / "blocker"
            blocker.write_text("not a directory", encoding="utf-8")
            with self.assertRaises(StorageError):
                Storage(blocker / "classbook.json").save(_modules())

    def test_move_aside_keeps_broken_file_as_backup(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            p = Path(d) / "classbook.json"
            p.write_text("{not json", encoding="utf-8")
            backup = Storage(p).move_aside()
            self.assertEqual(backup, Path(d) / "classbook.json.bak")
            self.assertEqual(backup.read_text(encoding="utf-8"), "{not json")
            self.assertFalse(p.exists())

    def test_move_aside_missing_file_raises_storage_error(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(StorageError):
                Storage(Path(d) / "missing.json").move_aside()


if __name__ == "__main__":
    unittest.main()
