"""Static academic catalog: departments, courses and levels offered."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class Department:
    dept_id: str
    name: str


@dataclass(frozen=True)
class Course:
    course_id: str
    code: str
    name: str
    dept_id: str

    @property
    def label(self) -> str:
        return f"{self.code} - {self.name}"


DEPARTMENTS: tuple[Department, ...] = (
    Department("cpe", "Computer Engineering"),
    Department("ele", "Electrical Engineering"),
    Department("mec", "Mechanical Engineering"),
    Department("civ", "Civil Engineering"),
    Department("che", "Chemical Engineering"),
)

COURSES: tuple[Course, ...] = (
    Course("cpe301", "CPE 301", "Digital Logic Design", "cpe"),
    Course("cpe305", "CPE 305", "Computer Architecture", "cpe"),
    Course("ele201", "ELE 201", "Circuit Theory I", "ele"),
    Course("ele401", "ELE 401", "Control Engineering", "ele"),
    Course("mec201", "MEC 201", "Engineering Thermodynamics", "mec"),
    Course("civ301", "CIV 301", "Structural Analysis", "civ"),
)

LEVELS: tuple[str, ...] = ("100", "200", "300", "400", "500")


def find_course(course_id: str) -> Optional[Course]:
    return next((c for c in COURSES if c.course_id == course_id), None)


def find_department(dept_id: str) -> Optional[Department]:
    return next((d for d in DEPARTMENTS if d.dept_id == dept_id), None)


def courses_for_department(dept_id: str) -> Sequence[Course]:
    return [c for c in COURSES if c.dept_id == dept_id]
