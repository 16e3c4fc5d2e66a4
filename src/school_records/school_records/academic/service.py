from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..common.validators import require_fields, to_amount
from ..core.constants import (
    ACADEMIC_RESULTS,
    COURSE_CLASS_ASSIGNMENTS,
    COURSE_STUDENT_ASSIGNMENTS,
    END_TERM_REMARKS,
    MAX_MARKS_PER_RESULT,
    REPORT_FOOTNOTES,
    STUDENT_PROMOTIONS,
)
from ..core.exceptions import ConflictError, ValidationError
from ..store.entity_store import EntityStore, Record
from .model import StudentReport


def _in_period(record: Record, academic_year: Optional[str], term: Optional[str]) -> bool:
    if academic_year and record.get("academicYear") != academic_year:
        return False
    if term and record.get("term") != term:
        return False
    return True


class AcademicService:
    """Use case: results, promotions, remarks, footnotes and course assignments."""

    def __init__(self, store: EntityStore):
        self._store = store

    # Results

    def get_all_results(self) -> list[Record]:
        return self._store.get_all(ACADEMIC_RESULTS)

    def get_result_by_id(self, result_id: str) -> Record:
        return self._store.get_by_id(ACADEMIC_RESULTS, result_id)

    def create_result(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "studentId", "subject", "examType", message="Student ID, subject, and exam type are required")
        return self._store.create(ACADEMIC_RESULTS, data)

    def update_result(self, result_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(ACADEMIC_RESULTS, result_id, data)

    def delete_result(self, result_id: str) -> None:
        self._store.delete(ACADEMIC_RESULTS, result_id)

    def get_results_by_student(self, student_id: str) -> list[Record]:
        return self._store.query(ACADEMIC_RESULTS, lambda r: r.get("studentId") == student_id)

    def get_results_by_class(self, class_name: str, academic_year: Optional[str] = None, term: Optional[str] = None) -> list[Record]:
        return self._store.query(
            ACADEMIC_RESULTS,
            lambda r: r.get("class") == class_name and _in_period(r, academic_year, term),
        )

    def get_results_by_subject(self, subject: str, academic_year: Optional[str] = None, term: Optional[str] = None) -> list[Record]:
        return self._store.query(
            ACADEMIC_RESULTS,
            lambda r: r.get("subject") == subject and _in_period(r, academic_year, term),
        )

    def submit_bulk_results(self, results: Iterable[Mapping[str, Any]]) -> list[Record]:
        """Create results one by one; stops at the first invalid entry.

        Entries created before the failure are kept.
        """
        return [self.create_result(r) for r in results]

    # Promotions

    def get_all_promotions(self) -> list[Record]:
        return self._store.get_all(STUDENT_PROMOTIONS)

    def promote_students(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "fromClass", "toClass", message="From class and to class are required")
        if not data.get("studentIds"):
            raise ValidationError("At least one student must be selected")
        return self._store.create(STUDENT_PROMOTIONS, data)

    def get_promotions_by_academic_year(self, academic_year: str) -> list[Record]:
        return self._store.query(STUDENT_PROMOTIONS, lambda p: p.get("academicYear") == academic_year)

    # End of term remarks

    def get_all_remarks(self) -> list[Record]:
        return self._store.get_all(END_TERM_REMARKS)

    def create_remark(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "studentId", message="Student ID is required")
        return self._store.create(END_TERM_REMARKS, data)

    def update_remark(self, remark_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(END_TERM_REMARKS, remark_id, data)

    def get_remarks_by_student(self, student_id: str) -> list[Record]:
        return self._store.query(END_TERM_REMARKS, lambda r: r.get("studentId") == student_id)

    def get_remarks_by_class(self, class_name: str, academic_year: Optional[str] = None, term: Optional[str] = None) -> list[Record]:
        return self._store.query(
            END_TERM_REMARKS,
            lambda r: r.get("class") == class_name and _in_period(r, academic_year, term),
        )

    def submit_bulk_remarks(self, remarks: Iterable[Mapping[str, Any]]) -> list[Record]:
        return [self.create_remark(r) for r in remarks]

    # Report footnotes

    def get_all_footnotes(self) -> list[Record]:
        return self._store.get_all(REPORT_FOOTNOTES)

    def get_footnote_by_id(self, footnote_id: str) -> Record:
        return self._store.get_by_id(REPORT_FOOTNOTES, footnote_id)

    def create_footnote(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "symbol", "text", message="Symbol and text are required")
        return self._store.create(REPORT_FOOTNOTES, data)

    def update_footnote(self, footnote_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(REPORT_FOOTNOTES, footnote_id, data)

    def delete_footnote(self, footnote_id: str) -> None:
        self._store.delete(REPORT_FOOTNOTES, footnote_id)

    # Course assignments

    def _assign_course(self, collection: str, owner_field: str, data: Mapping[str, Any], duplicate_message: str) -> Record:
        def _same(a: Record) -> bool:
            return (
                a.get(owner_field) == data.get(owner_field)
                and a.get("courseId") == data.get("courseId")
                and a.get("academicYear") == data.get("academicYear")
                and a.get("term") == data.get("term")
            )

        with self._store.locked(collection):
            if self._store.find_one(collection, _same):
                raise ConflictError(duplicate_message)
            return self._store.create(collection, data)

    def get_all_course_class_assignments(self) -> list[Record]:
        return self._store.get_all(COURSE_CLASS_ASSIGNMENTS)

    def assign_course_to_class(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "className", "courseId", message="Class name and course ID are required")
        return self._assign_course(COURSE_CLASS_ASSIGNMENTS, "className", data, "Course is already assigned to this class")

    def get_courses_by_class(self, class_name: str, academic_year: Optional[str] = None, term: Optional[str] = None) -> list[Record]:
        return self._store.query(
            COURSE_CLASS_ASSIGNMENTS,
            lambda a: a.get("className") == class_name and _in_period(a, academic_year, term),
        )

    def delete_course_class_assignment(self, assignment_id: str) -> None:
        self._store.delete(COURSE_CLASS_ASSIGNMENTS, assignment_id)

    def get_all_course_student_assignments(self) -> list[Record]:
        return self._store.get_all(COURSE_STUDENT_ASSIGNMENTS)

    def assign_course_to_student(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "studentId", "courseId", message="Student ID and course ID are required")
        return self._assign_course(COURSE_STUDENT_ASSIGNMENTS, "studentId", data, "Course is already assigned to this student")

    def get_courses_by_student(self, student_id: str, academic_year: Optional[str] = None, term: Optional[str] = None) -> list[Record]:
        return self._store.query(
            COURSE_STUDENT_ASSIGNMENTS,
            lambda a: a.get("studentId") == student_id and _in_period(a, academic_year, term),
        )

    def delete_course_student_assignment(self, assignment_id: str) -> None:
        self._store.delete(COURSE_STUDENT_ASSIGNMENTS, assignment_id)

    # Reports

    def generate_student_report(self, student_id: str, academic_year: Optional[str] = None, term: Optional[str] = None) -> StudentReport:
        results = [r for r in self.get_results_by_student(student_id) if _in_period(r, academic_year, term)]
        remarks = [r for r in self.get_remarks_by_student(student_id) if _in_period(r, academic_year, term)]
        courses = self.get_courses_by_student(student_id, academic_year, term)

        total_marks = sum(to_amount(r.get("score")) for r in results)
        max_marks = len(results) * MAX_MARKS_PER_RESULT
        percentage = (total_marks / max_marks) * 100 if max_marks > 0 else 0.0

        return StudentReport(
            student_id=student_id,
            academic_year=academic_year,
            term=term,
            courses=courses,
            results=results,
            remarks=remarks,
            total_marks=total_marks,
            max_marks=max_marks,
            percentage=f"{percentage:.2f}",
        )
