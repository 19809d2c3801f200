from cardtable.api.export import router as export_router
from cardtable.api.health import router as health_router
from cardtable.api.table_preferences import router as table_preferences_router

__all__ = [
    "export_router",
    "health_router",
    "table_preferences_router",
]
