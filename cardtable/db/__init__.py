from cardtable.db.database import get_session, init_db
from cardtable.db.operations import (
    delete_table_preference,
    get_table_preference,
    save_table_preference,
)

__all__ = [
    "delete_table_preference",
    "get_session",
    "get_table_preference",
    "init_db",
    "save_table_preference",
]
