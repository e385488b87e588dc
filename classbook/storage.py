"""
Persistent storage for the module list.

This module manages the file:

    data/classbook.json

JSON schema:

    {"modules": [{"code": ..., "name": ...,
                  "students": [{"id": ..., "name": ..., "marks": {...}}],
                  "assessments": [{"name": ..., "weightage": ...}]}]}

The in-memory ModuleList is the source of truth for a session.
Saving is best-effort in the interactive session, which reports a
StorageError and keeps going; a single `run` command fails instead.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from classbook.errors import ClassbookError, InvalidStateError, StorageError
from classbook.model import Assessment, Module, Student
from classbook.registry import ModuleList


def _default_data_path() -> Path:
    """
    Return the default path of classbook.json inside the package.

    Using a function instead of a constant makes testing easier,
    because tests can pass their own path to Storage.
    """
    base_dir = Path(__file__).resolve().parent
    return base_dir / "data" / "classbook.json"


def module_list_to_dict(module_list: ModuleList) -> dict[str, Any]:
    modules: list[dict[str, Any]] = []
    for module in module_list:
        modules.append(
            {
                "code": module.code,
                "name": module.name,
                "students": [
                    {"id": s.student_id, "name": s.name, "marks": dict(s.marks)} for s in module.students
                ],
                "assessments": [{"name": a.name, "weightage": a.weightage} for a in module.assessments],
            }
        )
    return {"modules": modules}


def module_list_from_dict(data: Any) -> ModuleList:
    """
    Rebuild a ModuleList from decoded JSON.
    Raises InvalidStateError if the structure does not match the schema.
    """
    if not isinstance(data, dict) or not isinstance(data.get("modules", []), list):
        raise InvalidStateError("Data file has an unexpected structure.")

    module_list = ModuleList()
    try:
        for raw in data.get("modules", []):
            module = Module(code=str(raw["code"]), name=str(raw["name"]))
            for a in raw.get("assessments", []):
                module.assessments.add(Assessment(name=str(a["name"]), weightage=float(a["weightage"])))
            for s in raw.get("students", []):
                marks = {str(k): float(v) for k, v in (s.get("marks") or {}).items()}
                module.students.add(Student(student_id=str(s["id"]), name=str(s["name"]), marks=marks))
            module_list.add(module)
    except ClassbookError as exc:
        raise InvalidStateError(f"Data file is inconsistent: {exc.message}") from exc
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidStateError(f"Data file has an unexpected structure: {exc}") from exc

    return module_list


class Storage:
    """
    JSON file storage for a ModuleList.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        # Use custom path if provided (mainly for tests),
        # otherwise fall back to the default package location
        self.path = Path(path) if path is not None else _default_data_path()

    def load(self) -> ModuleList:
        """
        Load the module list from disk.

        A missing file is a first run and yields an empty ModuleList.
        Unreadable, malformed or unverifiable data raises InvalidStateError.
        """
        if not self.path.exists():
            return ModuleList()

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidStateError(f"Could not read data file {self.path}: {exc}") from exc

        module_list = module_list_from_dict(data)
        if not module_list.verify():
            raise InvalidStateError(f"Data file {self.path} contains invalid entries.")
        return module_list

    def save(self, module_list: ModuleList) -> None:
        """
        Save the module list. Creates parent directories if needed.
        """
        payload = module_list_to_dict(module_list)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not save data to {self.path}: {exc}") from exc

    def move_aside(self) -> Path:
        """
        Rename the data file to <name>.bak so a later save cannot overwrite it.
        An existing backup is replaced. Returns the backup path.
        """
        backup = self.path.with_name(self.path.name + ".bak")
        try:
            self.path.replace(backup)
        except OSError as exc:
            raise StorageError(f"Could not move {self.path} to {backup}: {exc}") from exc
        return backup
