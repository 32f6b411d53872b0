from slotboard.core import config
from slotboard.storage.base import Storage
from slotboard.storage.file import build_file_storage
from slotboard.storage.memory import build_memory_storage
from slotboard.storage.sql import build_sql_storage


def build_storage(
    backend: str | None = None,
    *,
    database_url: str | None = None,
    data_dir: str | None = None,
) -> Storage:
    backend = (backend or config.STORAGE_BACKEND).strip().lower()

    if backend == 'memory':
        return build_memory_storage()
    if backend == 'file':
        return build_file_storage(data_dir or config.DATA_DIR)
    if backend == 'sql':
        database_url = database_url or config.DATABASE_URL
        if not database_url:
            raise RuntimeError("DATABASE_URL must be set when STORAGE_BACKEND is 'sql'.")
        return build_sql_storage(database_url)

    raise RuntimeError(f"Unknown STORAGE_BACKEND '{backend}'.")
