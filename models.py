# This application uses in-memory storage owned by a SchoolState object
# stored in app.config. Nothing survives a restart.

import threading
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional


@dataclass(frozen=True)
class Student:
    first_name: str
    last_name: str
    age: int
    gender: str


@dataclass
class SchoolClass:
    name: str
    field: str
    level: str
    student_count: int = 0
    students: List[Student] = field(default_factory=list)


def default_class() -> SchoolClass:
    """The class every fresh application starts with."""
    students = [
        Student(first_name="Jean", last_name="Dupont", age=20, gender="Masculin"),
        Student(first_name="Marie", last_name="Martin", age=19, gender="Féminin"),
        Student(first_name="Pierre", last_name="Gustav", age=21, gender="Masculin"),
    ]
    return SchoolClass(
        name="B1 Informatique",
        field="Informatique",
        level="Bachelor 1",
        student_count=len(students),
        students=students,
    )


class SchoolState:
    """
    Process-wide roster and view counter.

    Every mutation goes through ``self.lock``. ``find_index`` and
    ``remove_at`` do not take the lock themselves so that they can be
    composed into a single check-then-act sequence by the caller.
    """

    def __init__(self, school_class: Optional[SchoolClass] = None):
        self.logger = logging.getLogger(__name__)
        self.lock = threading.Lock()
        self.school_class = school_class if school_class is not None else default_class()
        self.school_class.student_count = len(self.school_class.students)
        self.view_count = 0

    def append(self, student: Student) -> None:
        with self.lock:
            self._append(student)

    def _append(self, student: Student) -> None:
        self.school_class.students.append(student)
        self.school_class.student_count += 1

    def find_index(self, first_name: str, last_name: str) -> int:
        for i, student in enumerate(self.school_class.students):
            if student.first_name == first_name and student.last_name == last_name:
                return i
        return -1

    def remove_at(self, index: int) -> Student:
        removed = self.school_class.students.pop(index)
        self.school_class.student_count -= 1
        return removed

    def replace_or_append(self, student: Student,
                          previous_first_name: Optional[str] = None,
                          previous_last_name: Optional[str] = None) -> bool:
        """
        Append ``student``, first removing the entry registered under the
        previous names if there is one.

        Returns True when an existing entry was replaced.
        """
        replaced = False
        with self.lock:
            if previous_first_name is not None and previous_last_name is not None:
                index = self.find_index(previous_first_name, previous_last_name)
                if index != -1:
                    self.remove_at(index)
                    replaced = True
            self._append(student)
        if replaced:
            self.logger.info(f"Replaced {previous_first_name} {previous_last_name} with "
                             f"{student.first_name} {student.last_name}")
        return replaced

    def snapshot(self) -> SchoolClass:
        with self.lock:
            return replace(self.school_class, students=list(self.school_class.students))

    def increment_views(self) -> int:
        with self.lock:
            self.view_count += 1
            return self.view_count
