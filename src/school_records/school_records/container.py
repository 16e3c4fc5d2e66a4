from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .academic.service import AcademicService
from .billing.service import BillingService
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS, DEFAULT_MYSQL_TABLE, DEFAULT_STORAGE_PREFIX
from .core.enums import IdStrategy, StorageBackendKind
from .database.bootstrap import apply_schema
from .database.connection import DBConfig, DatabaseConnection
from .notifications.service import NotificationService
from .setup.service import SetupService
from .staff.service import StaffService
from .storage.backend import StorageBackend
from .storage.json_file_storage import JsonFileStorage
from .storage.memory_storage import MemoryStorage
from .storage.mysql_storage import MySQLStorage
from .store.entity_store import EntityStore
from .store.id_generators import IdGenerator, SequenceIdGenerator, TokenIdGenerator
from .students.service import StudentService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    storage: StorageBackend
    store: EntityStore

    student_service: StudentService
    staff_service: StaffService
    billing_service: BillingService
    academic_service: AcademicService
    setup_service: SetupService
    notification_service: NotificationService


def build_storage(
    *,
    backend: str = StorageBackendKind.JSON.value,
    data_dir: Optional[str] = None,
    prefix: str = DEFAULT_STORAGE_PREFIX,
    db_config: Optional[dict] = None,
    mysql_table: str = DEFAULT_MYSQL_TABLE,
    mysql_lock_timeout: int = DEFAULT_LOCK_TIMEOUT_SECONDS,
    auto_init_db: bool = False,
) -> StorageBackend:
    kind = StorageBackendKind(str(backend).lower())

    if kind == StorageBackendKind.MEMORY:
        return MemoryStorage()

    if kind == StorageBackendKind.JSON:
        directory = Path(data_dir or "data")
        logger.info("Using JSON file storage at %s", directory.resolve())
        return JsonFileStorage(directory, prefix=prefix)

    if not db_config:
        raise ValueError("DB_CONFIG is required for the mysql storage backend")
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    if auto_init_db:
        apply_schema(conn, table=mysql_table)
    logger.info("Using MySQL storage at %s (table=%s)", conn.config.describe(), mysql_table)
    return MySQLStorage(conn, table=mysql_table, lock_timeout=mysql_lock_timeout)


def build_id_generator(storage: StorageBackend, strategy: str = IdStrategy.SEQUENCE.value) -> IdGenerator:
    if IdStrategy(str(strategy).lower()) == IdStrategy.TOKEN:
        return TokenIdGenerator()
    return SequenceIdGenerator(storage)


def build_container(
    *,
    storage: Optional[StorageBackend] = None,
    id_strategy: str = IdStrategy.SEQUENCE.value,
    timestamps: bool = True,
    **storage_options,
) -> Container:
    storage = storage or build_storage(**storage_options)
    store = EntityStore(storage, id_generator=build_id_generator(storage, id_strategy), timestamps=timestamps)

    setup_service = SetupService(store)

    return Container(
        storage=storage,
        store=store,
        student_service=StudentService(store),
        staff_service=StaffService(store),
        billing_service=BillingService(store),
        academic_service=AcademicService(store),
        setup_service=setup_service,
        notification_service=NotificationService(setup_service),
    )
