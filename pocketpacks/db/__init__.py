from pocketpacks.db.database import init_db
from pocketpacks.db.operations import (
    delete_save_document,
    get_save_document,
    upsert_save_document,
)

__all__ = [
    "delete_save_document",
    "get_save_document",
    "init_db",
    "upsert_save_document",
]
