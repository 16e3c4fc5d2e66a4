from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.search import person_matches
from ..common.validators import require_fields
from ..core.constants import DEFAULT_FRESH_DAYS, STUDENTS
from ..core.enums import RecordStatus
from ..store.entity_store import EntityStore, Predicate, Record


class StudentService:
    """Use case: maintain the student register."""

    def __init__(self, store: EntityStore):
        self._store = store

    def get_all(self) -> list[Record]:
        return self._store.get_all(STUDENTS)

    def get_by_id(self, student_id: str) -> Record:
        return self._store.get_by_id(STUDENTS, student_id)

    def create(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "firstName", "surname", message="First name and surname are required")
        student = dict(data)

        with self._store.locked(STUDENTS):
            if not student.get("studentId"):
                student["studentId"] = f"STU{self._store.count(STUDENTS) + 1:04d}"
            if not student.get("status"):
                student["status"] = RecordStatus.ACTIVE.value
            return self._store.create(STUDENTS, student)

    def update(self, student_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(STUDENTS, student_id, data)

    def delete(self, student_id: str) -> None:
        self._store.delete(STUDENTS, student_id)

    def get_active(self) -> list[Record]:
        return self._store.query(STUDENTS, lambda s: s.get("status") == RecordStatus.ACTIVE.value)

    def get_inactive(self) -> list[Record]:
        return self._store.query(STUDENTS, lambda s: s.get("status") == RecordStatus.INACTIVE.value)

    def get_by_class(self, class_name: str) -> list[Record]:
        return self._store.query(STUDENTS, lambda s: s.get("class") == class_name)

    def search(self, term: str) -> list[Record]:
        return self._store.query(STUDENTS, lambda s: person_matches(s, term, "studentId", "email", "contact"))

    def get_fresh(self, *, days: int = DEFAULT_FRESH_DAYS, today: Optional[date] = None) -> list[Record]:
        """Active students admitted within the last `days` days."""
        cutoff = (today or date.today()) - timedelta(days=days)

        def _is_fresh(s: Record) -> bool:
            admitted = parse_iso_date(s.get("admissionDate"))
            return admitted is not None and admitted >= cutoff and s.get("status") == RecordStatus.ACTIVE.value

        return self._store.query(STUDENTS, _is_fresh)

    def get_by_parent(self, parent_id: str) -> list[Record]:
        return self._store.query(STUDENTS, lambda s: s.get("parentId") == parent_id or s.get("parent") == parent_id)

    def update_status(self, student_id: str, status: RecordStatus | str) -> Record:
        return self.update(student_id, {"status": RecordStatus(status).value})

    def count(self, predicate: Optional[Predicate] = None) -> int:
        return self._store.count(STUDENTS, predicate)
