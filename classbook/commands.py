"""
Commands and the keyword dispatcher.

Each user operation is one Command class. A command:
- declares its keyword and its key/value arguments
- parses its own argument tail when constructed
- validates everything before touching the model
- mutates or queries the ModuleList, printing through the Ui

Mutating commands save through the Storage collaborator afterwards.
A failed save raises StorageError after the in-memory change is made;
the caller decides whether the change outlives the error.

Usage overview (see `help`):

    add_module c/<MODULE_CODE> n/<MODULE_NAME>
    add_student c/<MODULE_CODE> i/<STUDENT_ID> n/<STUDENT_NAME>
    add_assessment c/<MODULE_CODE> a/<ASSESSMENT_NAME> w/<WEIGHTAGE>
    set_mark c/<MODULE_CODE> i/<STUDENT_ID> a/<ASSESSMENT_NAME> m/<MARKS>
    average c/<MODULE_CODE> a/<ASSESSMENT_NAME>
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Dict, List, Mapping, Optional, Protocol, Tuple, Type

from classbook.errors import (
    DuplicateEntryError,
    ExportError,
    InvalidArgumentError,
    InvalidAssessmentNameError,
    MissingArgumentError,
    ModuleCodeNotFoundError,
    NoStudentsError,
    NotFoundError,
    StudentNotFoundError,
    UnknownCommandError,
    UsageError,
)
from classbook.export_csv import export_marks_to_csv
from classbook.model import MAX_MARKS, MAX_WEIGHTAGE, MIN_MARKS, Assessment, Module, Student
from classbook.parse import parse_arguments, parse_number, split_command
from classbook.registry import MAX_TOTAL_WEIGHTAGE, ModuleList
from classbook.stats import average_marks

KEY_MODULE_CODE = "c"
KEY_MODULE_NAME = "n"
KEY_STUDENT_ID = "i"
KEY_STUDENT_NAME = "n"
KEY_ASSESSMENT_NAME = "a"
KEY_WEIGHTAGE = "w"
KEY_MARKS = "m"
KEY_KEYWORD = "k"
KEY_FILE_PATH = "f"

ARG_MODULE_CODE = (KEY_MODULE_CODE, "MODULE_CODE")
ARG_MODULE_NAME = (KEY_MODULE_NAME, "MODULE_NAME")
ARG_STUDENT_ID = (KEY_STUDENT_ID, "STUDENT_ID")
ARG_STUDENT_NAME = (KEY_STUDENT_NAME, "STUDENT_NAME")
ARG_ASSESSMENT_NAME = (KEY_ASSESSMENT_NAME, "ASSESSMENT_NAME")
ARG_WEIGHTAGE = (KEY_WEIGHTAGE, "WEIGHTAGE")
ARG_MARKS = (KEY_MARKS, "MARKS")

MESSAGE_FORMAT_AVERAGE_MARKS = "Average marks for {name} is {average:,.2f}"
MESSAGE_FORMAT_UNMARKED_NOTE = "Note that {count} student(s) have yet to be marked!"


class UiSink(Protocol):
    def print_message(self, text: str) -> None: ...


class StorageSink(Protocol):
    def save(self, module_list: ModuleList) -> None: ...


def _format_number(value: float) -> str:
    return f"{value:g}"


class Command(ABC):
    """
    Base class of all commands.

    Subclasses set `keyword`, `argument_keys` (key, placeholder pairs; all
    required) and `mutates`, and implement run().
    """

    keyword: ClassVar[str] = ""
    argument_keys: ClassVar[Tuple[Tuple[str, str], ...]] = ()
    mutates: ClassVar[bool] = False
    is_exit: ClassVar[bool] = False

    def __init__(self, argument: str = "") -> None:
        self.argument = (argument or "").strip()
        self.argument_map: Mapping[str, str] = parse_arguments(
            self.argument, [key for key, _ in self.argument_keys]
        )

    @classmethod
    def usage(cls) -> str:
        tokens = [cls.keyword] + [f"{key}/<{placeholder}>" for key, placeholder in cls.argument_keys]
        return "Usage: " + " ".join(tokens)

    def get(self, key: str) -> str:
        return self.argument_map.get(key, "")

    def check_arguments(self) -> None:
        """
        Usage error for an empty tail, then missing-argument error for
        absent or blank keys.
        """
        if not self.argument_keys:
            return
        if not self.argument:
            raise UsageError(self.usage())
        missing = [key for key, _ in self.argument_keys if not self.get(key)]
        if missing:
            raise MissingArgumentError(missing, self.usage())

    def execute(self, module_list: ModuleList, ui: UiSink, storage: Optional[StorageSink]) -> None:
        self.check_arguments()
        self.run(module_list, ui)
        if self.mutates and storage is not None:
            storage.save(module_list)

    @abstractmethod
    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        """Resolve, validate and apply the command. Runs after check_arguments()."""

    # -- lookup helpers ----------------------------------------------------

    def resolve_module(self, module_list: ModuleList) -> Module:
        code = self.get(KEY_MODULE_CODE)
        module = module_list.get(code)
        if module is None:
            raise ModuleCodeNotFoundError(code)
        return module

    def resolve_student(self, module: Module) -> Student:
        student_id = self.get(KEY_STUDENT_ID)
        student = module.students.get(student_id)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    def resolve_assessment(self, module: Module) -> Assessment:
        name = self.get(KEY_ASSESSMENT_NAME)
        assessment = module.assessments.get(name)
        if assessment is None:
            raise InvalidAssessmentNameError(name)
        return assessment


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------


class AddModuleCommand(Command):
    keyword = "add_module"
    argument_keys = (ARG_MODULE_CODE, ARG_MODULE_NAME)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = module_list.add(Module(code=self.get(KEY_MODULE_CODE), name=self.get(KEY_MODULE_NAME)))
        ui.print_message(f"Added module: {module}")


class EditModuleCommand(Command):
    keyword = "edit_module"
    argument_keys = (ARG_MODULE_CODE, ARG_MODULE_NAME)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        module.name = self.get(KEY_MODULE_NAME)
        ui.print_message(f"Updated module: {module}")


class DeleteModuleCommand(Command):
    keyword = "delete_module"
    argument_keys = (ARG_MODULE_CODE,)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        module_list.remove(module.code)
        ui.print_message(f"Removed module: {module}")


class ListModulesCommand(Command):
    keyword = "list_modules"

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        if module_list.size == 0:
            ui.print_message("There are no modules.")
            return
        lines = [
            f"{i}. {m} | {m.students.size} student(s) | {m.assessments.size} assessment(s)"
            for i, m in enumerate(module_list, start=1)
        ]
        ui.print_message("\n".join(lines))


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------


class AddStudentCommand(Command):
    keyword = "add_student"
    argument_keys = (ARG_MODULE_CODE, ARG_STUDENT_ID, ARG_STUDENT_NAME)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        student = module.students.add(
            Student(student_id=self.get(KEY_STUDENT_ID), name=self.get(KEY_STUDENT_NAME))
        )
        ui.print_message(f"Added student to {module.code}: {student}")


class EditStudentCommand(Command):
    keyword = "edit_student"
    argument_keys = (ARG_MODULE_CODE, ARG_STUDENT_ID, ARG_STUDENT_NAME)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        student = self.resolve_student(module)
        student.name = self.get(KEY_STUDENT_NAME)
        ui.print_message(f"Updated student in {module.code}: {student}")


class DeleteStudentCommand(Command):
    keyword = "delete_student"
    argument_keys = (ARG_MODULE_CODE, ARG_STUDENT_ID)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        student = self.resolve_student(module)
        module.students.remove(student.student_id)
        ui.print_message(f"Removed student from {module.code}: {student}")


def _numbered_students(students: List[Student]) -> str:
    return "\n".join(f"{i}. {s}" for i, s in enumerate(students, start=1))


class ListStudentsCommand(Command):
    keyword = "list_students"
    argument_keys = (ARG_MODULE_CODE,)

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        if module.students.size == 0:
            ui.print_message(f"There are no students in {module.code}.")
            return
        ui.print_message(f"Students in {module}:\n{_numbered_students(module.students.items())}")


class FindStudentCommand(Command):
    keyword = "find_student"
    argument_keys = (ARG_MODULE_CODE, (KEY_KEYWORD, "KEYWORD"))

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        matches = module.students.find(self.get(KEY_KEYWORD))
        if not matches:
            ui.print_message("No results.")
            return
        ui.print_message(f"Matching students in {module.code}:\n{_numbered_students(matches)}")


# ---------------------------------------------------------------------------
# Assessments
# ---------------------------------------------------------------------------


def _check_weightage(module: Module, weightage: float, replacing: Optional[Assessment] = None) -> None:
    if not (0 < weightage <= MAX_WEIGHTAGE):
        raise InvalidArgumentError(
            f"Invalid weightage: {_format_number(weightage)}. It must be above 0 and at most "
            f"{_format_number(MAX_WEIGHTAGE)}."
        )
    current = module.assessments.total_weightage()
    if replacing is not None:
        current -= replacing.weightage
    if current + weightage > MAX_TOTAL_WEIGHTAGE:
        raise InvalidArgumentError(
            f"Total weightage of {module.code} would exceed {_format_number(MAX_TOTAL_WEIGHTAGE)}% "
            f"(currently {_format_number(current)}% without this assessment)."
        )


class AddAssessmentCommand(Command):
    keyword = "add_assessment"
    argument_keys = (ARG_MODULE_CODE, ARG_ASSESSMENT_NAME, ARG_WEIGHTAGE)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        name = self.get(KEY_ASSESSMENT_NAME)
        weightage = parse_number(self.get(KEY_WEIGHTAGE), "weightage")
        if name in module.assessments:
            # checked before the weightage total
            raise DuplicateEntryError(f"Assessment already exists in {module.code}: {name}")
        _check_weightage(module, weightage)
        assessment = module.assessments.add(Assessment(name=name, weightage=weightage))
        ui.print_message(f"Added assessment to {module.code}: {assessment}")


class EditAssessmentCommand(Command):
    keyword = "edit_assessment"
    argument_keys = (ARG_MODULE_CODE, ARG_ASSESSMENT_NAME, ARG_WEIGHTAGE)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        assessment = self.resolve_assessment(module)
        weightage = parse_number(self.get(KEY_WEIGHTAGE), "weightage")
        _check_weightage(module, weightage, replacing=assessment)
        assessment.weightage = weightage
        ui.print_message(f"Updated assessment in {module.code}: {assessment}")


class DeleteAssessmentCommand(Command):
    keyword = "delete_assessment"
    argument_keys = (ARG_MODULE_CODE, ARG_ASSESSMENT_NAME)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        assessment = self.resolve_assessment(module)
        module.assessments.remove(assessment.name)
        cleared = sum(1 for s in module.students if s.delete_marks(assessment.name))
        ui.print_message(f"Removed assessment from {module.code}: {assessment} ({cleared} mark(s) cleared)")


class ListAssessmentsCommand(Command):
    keyword = "list_assessments"
    argument_keys = (ARG_MODULE_CODE,)

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        if module.assessments.size == 0:
            ui.print_message(f"There are no assessments in {module.code}.")
            return
        lines = [f"{i}. {a}" for i, a in enumerate(module.assessments, start=1)]
        lines.append(f"Total weightage: {_format_number(module.assessments.total_weightage())}%")
        ui.print_message(f"Assessments in {module}:\n" + "\n".join(lines))


# ---------------------------------------------------------------------------
# Marks
# ---------------------------------------------------------------------------


class SetMarkCommand(Command):
    keyword = "set_mark"
    argument_keys = (ARG_MODULE_CODE, ARG_STUDENT_ID, ARG_ASSESSMENT_NAME, ARG_MARKS)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        student = self.resolve_student(module)
        assessment = self.resolve_assessment(module)
        marks = parse_number(self.get(KEY_MARKS), "marks")
        if not (MIN_MARKS <= marks <= MAX_MARKS):
            raise InvalidArgumentError(
                f"Invalid marks: {_format_number(marks)}. It must be between "
                f"{_format_number(MIN_MARKS)} and {_format_number(MAX_MARKS)}."
            )
        student.set_marks(assessment.name, marks)
        ui.print_message(f"Marks for {student} in {assessment.name} set to {_format_number(marks)}")


class DeleteMarkCommand(Command):
    keyword = "delete_mark"
    argument_keys = (ARG_MODULE_CODE, ARG_STUDENT_ID, ARG_ASSESSMENT_NAME)
    mutates = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        student = self.resolve_student(module)
        assessment = self.resolve_assessment(module)
        if not student.marks_exist(assessment.name):
            raise NotFoundError(f"No marks recorded for {student} in {assessment.name}.")
        student.delete_marks(assessment.name)
        ui.print_message(f"Removed marks for {student} in {assessment.name}")


class ListMarksCommand(Command):
    keyword = "list_marks"
    argument_keys = (ARG_MODULE_CODE, ARG_ASSESSMENT_NAME)

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        assessment = self.resolve_assessment(module)
        if module.students.size == 0:
            ui.print_message(f"There are no students in {module.code}.")
            return
        lines = []
        for i, student in enumerate(module.students, start=1):
            marks = student.get_marks(assessment.name)
            shown = "unmarked" if marks is None else _format_number(marks)
            lines.append(f"{i}. {student}: {shown}")
        ui.print_message(f"Marks for {assessment.name} in {module.code}:\n" + "\n".join(lines))


class AverageMarksCommand(Command):
    """
    Prints the class average of one assessment.

    Checks run in this order, first failure wins:
    usage, missing argument, module, empty class, assessment name.
    """

    keyword = "average"
    argument_keys = (ARG_MODULE_CODE, ARG_ASSESSMENT_NAME)

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        if module.students.size <= 0:
            raise NoStudentsError(module.code)
        assessment = self.resolve_assessment(module)

        result = average_marks(module.students, assessment.name)
        message = MESSAGE_FORMAT_AVERAGE_MARKS.format(name=assessment.name, average=result.average)
        if result.unmarked > 0:
            message += "\n" + MESSAGE_FORMAT_UNMARKED_NOTE.format(count=result.unmarked)
        ui.print_message(message)


class ExportCommand(Command):
    keyword = "export"
    argument_keys = (ARG_MODULE_CODE, (KEY_FILE_PATH, "FILE_PATH"))

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        module = self.resolve_module(module_list)
        out_path = self.get(KEY_FILE_PATH)
        try:
            n = export_marks_to_csv(module, out_path)
        except OSError as exc:
            raise ExportError(f"Could not export to {out_path}: {exc}") from exc
        ui.print_message(f"Exported {n} student(s) of {module.code} to: {out_path}")


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class HelpCommand(Command):
    keyword = "help"

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        ui.print_message("Commands:\n" + "\n".join(cls.usage() for cls in COMMANDS.values()))


class ExitCommand(Command):
    keyword = "exit"
    is_exit = True

    def run(self, module_list: ModuleList, ui: UiSink) -> None:
        return None


COMMANDS: Dict[str, Type[Command]] = {
    cls.keyword: cls
    for cls in (
        AddModuleCommand,
        EditModuleCommand,
        DeleteModuleCommand,
        ListModulesCommand,
        AddStudentCommand,
        EditStudentCommand,
        DeleteStudentCommand,
        ListStudentsCommand,
        FindStudentCommand,
        AddAssessmentCommand,
        EditAssessmentCommand,
        DeleteAssessmentCommand,
        ListAssessmentsCommand,
        SetMarkCommand,
        DeleteMarkCommand,
        ListMarksCommand,
        AverageMarksCommand,
        ExportCommand,
        HelpCommand,
        ExitCommand,
    )
}


def parse_command(line: str) -> Command:
    """
    Map the first word of `line` to its Command class and hand it the tail.
    """
    keyword, tail = split_command(line)
    command_cls = COMMANDS.get(keyword)
    if command_cls is None:
        raise UnknownCommandError(keyword)
    return command_cls(tail)
