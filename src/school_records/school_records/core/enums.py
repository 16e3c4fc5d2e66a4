from __future__ import annotations

from enum import Enum


class RecordStatus(str, Enum):
    """Active/inactive flag shared by students and staff."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class BillStatus(str, Enum):
    """Payment state of a bill, recomputed after every payment."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class UserType(str, Enum):
    ADMINISTRATOR = "administrator"
    STAFF = "staff"


class StorageBackendKind(str, Enum):
    MEMORY = "memory"
    JSON = "json"
    MYSQL = "mysql"


class IdStrategy(str, Enum):
    SEQUENCE = "sequence"
    TOKEN = "token"
