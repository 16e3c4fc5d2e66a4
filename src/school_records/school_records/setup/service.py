from __future__ import annotations

from typing import Any, Mapping, Optional

from ..common.validators import require_fields, require_positive_amount
from ..core.constants import (
    ACADEMIC_SETTINGS,
    BILL_ITEMS,
    CLASSES,
    ITEM_SETUP,
    SCHOOL_INFO,
    SUBJECTS,
    SYSTEM_SETTINGS,
)
from ..core.exceptions import ConflictError
from ..store.entity_store import EntityStore, Record


class SetupService:
    """Use case: school configuration and reference data (classes, subjects, bill items)."""

    def __init__(self, store: EntityStore):
        self._store = store

    # Single-document settings: the first record of the collection is the document.

    def _get_document(self, collection: str) -> Optional[Record]:
        records = self._store.get_all(collection)
        return records[0] if records else None

    def _upsert_document(self, collection: str, data: Mapping[str, Any]) -> Record:
        with self._store.locked(collection):
            existing = self._get_document(collection)
            if existing:
                return self._store.update(collection, existing["id"], data)
            return self._store.create(collection, data)

    def get_school_info(self) -> Optional[Record]:
        return self._get_document(SCHOOL_INFO)

    def update_school_info(self, data: Mapping[str, Any]) -> Record:
        return self._upsert_document(SCHOOL_INFO, data)

    def get_system_settings(self) -> Optional[Record]:
        return self._get_document(SYSTEM_SETTINGS)

    def update_system_settings(self, data: Mapping[str, Any]) -> Record:
        return self._upsert_document(SYSTEM_SETTINGS, data)

    def get_academic_settings(self) -> Optional[Record]:
        return self._get_document(ACADEMIC_SETTINGS)

    def update_academic_settings(self, data: Mapping[str, Any]) -> Record:
        return self._upsert_document(ACADEMIC_SETTINGS, data)

    # Coded reference data

    def _create_coded(self, collection: str, data: Mapping[str, Any], label: str) -> Record:
        require_fields(data, "name", "code", message=f"{label} name and code are required")
        with self._store.locked(collection):
            if self._store.find_one(collection, lambda r: r.get("code") == data.get("code")):
                raise ConflictError(f"{label} with this code already exists")
            return self._store.create(collection, data)

    def get_all_classes(self) -> list[Record]:
        return self._store.get_all(CLASSES)

    def get_class_by_id(self, class_id: str) -> Record:
        return self._store.get_by_id(CLASSES, class_id)

    def create_class(self, data: Mapping[str, Any]) -> Record:
        return self._create_coded(CLASSES, data, "Class")

    def update_class(self, class_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(CLASSES, class_id, data)

    def delete_class(self, class_id: str) -> None:
        self._store.delete(CLASSES, class_id)

    def get_all_subjects(self) -> list[Record]:
        return self._store.get_all(SUBJECTS)

    def get_subject_by_id(self, subject_id: str) -> Record:
        return self._store.get_by_id(SUBJECTS, subject_id)

    def create_subject(self, data: Mapping[str, Any]) -> Record:
        return self._create_coded(SUBJECTS, data, "Subject")

    def update_subject(self, subject_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(SUBJECTS, subject_id, data)

    def delete_subject(self, subject_id: str) -> None:
        self._store.delete(SUBJECTS, subject_id)

    # Bill items

    def get_all_bill_items(self) -> list[Record]:
        return self._store.get_all(BILL_ITEMS)

    def get_bill_item_by_id(self, item_id: str) -> Record:
        return self._store.get_by_id(BILL_ITEMS, item_id)

    def create_bill_item(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "name", message="Bill item name is required")
        require_positive_amount(data.get("amount"), "Bill item amount must be greater than zero")
        return self._store.create(BILL_ITEMS, data)

    def update_bill_item(self, item_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(BILL_ITEMS, item_id, data)

    def delete_bill_item(self, item_id: str) -> None:
        self._store.delete(BILL_ITEMS, item_id)

    # Item setup

    def get_all_item_setup(self) -> list[Record]:
        return self._store.get_all(ITEM_SETUP)

    def get_item_setup_by_id(self, item_id: str) -> Record:
        return self._store.get_by_id(ITEM_SETUP, item_id)

    def create_item_setup(self, data: Mapping[str, Any]) -> Record:
        require_fields(data, "name", message="Item name is required")
        return self._store.create(ITEM_SETUP, data)

    def update_item_setup(self, item_id: str, data: Mapping[str, Any]) -> Record:
        return self._store.update(ITEM_SETUP, item_id, data)

    def delete_item_setup(self, item_id: str) -> None:
        self._store.delete(ITEM_SETUP, item_id)
