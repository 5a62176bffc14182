from .base import Storage
from .database import DatabaseStorage
from .memory import MemoryStorage


def build_storage(config) -> Storage:
    """Storage backend selected by config.storage_backend."""
    if config.storage_backend == "memory":
        return MemoryStorage()
    from ..db.session import create_db_engine, init_db, make_session_scope

    engine = create_db_engine(config.database_url)
    init_db(engine)
    storage = DatabaseStorage(make_session_scope(engine))
    storage.seed_demo_products()
    return storage


__all__ = ["Storage", "DatabaseStorage", "MemoryStorage", "build_storage"]
