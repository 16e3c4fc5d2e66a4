from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.search import person_matches
from ..common.validators import require_fields
from ..core.constants import DEFAULT_FRESH_DAYS, STAFF
from ..core.enums import RecordStatus, UserType
from ..store.entity_store import EntityStore, Predicate, Record


def user_type_for_category(category: Optional[str]) -> UserType:
    normalized = (category or "").strip().lower()
    if normalized in {"admin", "administrator"}:
        return UserType.ADMINISTRATOR
    # Teachers, support staff, security, ...
    return UserType.STAFF


class StaffService:
    """Use case: maintain staff records (no login handling here)."""

    def __init__(self, store: EntityStore):
        self._store = store

    def get_all(self) -> list[Record]:
        return self._store.get_all(STAFF)

    def get_by_id(self, staff_id: str) -> Record:
        return self._store.get_by_id(STAFF, staff_id)

    def create(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "firstName", "surname", message="First name and surname are required")
        staff = dict(data)

        if not staff.get("userType"):
            staff["userType"] = user_type_for_category(staff.get("category")).value
        if not staff.get("status"):
            staff["status"] = RecordStatus.ACTIVE.value

        with self._store.locked(STAFF):
            if not staff.get("staffId"):
                staff["staffId"] = f"STAFF{self._store.count(STAFF) + 1:04d}"
            return self._store.create(STAFF, staff)

    def update(self, staff_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(STAFF, staff_id, data)

    def delete(self, staff_id: str) -> None:
        self._store.delete(STAFF, staff_id)

    def get_active(self) -> list[Record]:
        return self._store.query(STAFF, lambda s: s.get("status") == RecordStatus.ACTIVE.value)

    def get_inactive(self) -> list[Record]:
        return self._store.query(STAFF, lambda s: s.get("status") == RecordStatus.INACTIVE.value)

    def get_new(self, *, days: int = DEFAULT_FRESH_DAYS, today: Optional[date] = None) -> list[Record]:
        cutoff = (today or date.today()) - timedelta(days=days)

        def _is_new(s: Record) -> bool:
            employed = parse_iso_date(s.get("employmentDate"))
            return employed is not None and employed >= cutoff and s.get("status") == RecordStatus.ACTIVE.value

        return self._store.query(STAFF, _is_new)

    def search(self, term: str) -> list[Record]:
        return self._store.query(STAFF, lambda s: person_matches(s, term, "staffId", "email", "contact", "position"))

    def get_by_position(self, position: str) -> list[Record]:
        return self._store.query(STAFF, lambda s: s.get("position") == position)

    def get_by_department(self, department: str) -> list[Record]:
        return self._store.query(STAFF, lambda s: s.get("department") == department)

    def update_status(self, staff_id: str, status: RecordStatus | str) -> Record:
        return self.update(staff_id, {"status": RecordStatus(status).value})

    def count(self, predicate: Optional[Predicate] = None) -> int:
        return self._store.count(STAFF, predicate)
