from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from .container import Container, build_container
from .core.logging_config import setup_logging
from .demo_data import seed_all

logger = logging.getLogger(__name__)


def bootstrap() -> Container:
    """Load .env + settings, configure logging and wire every service."""
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))
    logger.info("settings=%s backend=%s", settings_module, getattr(settings, "STORAGE_BACKEND", "json"))

    container = build_container(
        backend=getattr(settings, "STORAGE_BACKEND", "json"),
        data_dir=getattr(settings, "DATA_DIR", None),
        prefix=getattr(settings, "STORAGE_PREFIX", "sms_"),
        db_config=getattr(settings, "DB_CONFIG", None),
        mysql_table=getattr(settings, "MYSQL_TABLE", "entity_collections"),
        mysql_lock_timeout=int(getattr(settings, "MYSQL_LOCK_TIMEOUT", 10)),
        auto_init_db=bool(getattr(settings, "AUTO_INIT_DB", False)),
        id_strategy=getattr(settings, "ID_STRATEGY", "sequence"),
        timestamps=bool(getattr(settings, "RECORD_TIMESTAMPS", True)),
    )

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        seed_all(container)

    return container
