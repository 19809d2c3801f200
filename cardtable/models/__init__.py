from cardtable.models.card import (
    CardBase,
    CardColor,
    CardKind,
    CardRecord,
    CatalogCard,
    CollectionCard,
    Player,
    PlayerTeam,
    Series,
    Team,
)
from cardtable.models.columns import (
    CARD_TABLE_COLUMNS,
    COLLECTION_TABLE_COLUMNS,
    ColumnDef,
    TableName,
    get_always_visible_columns,
    get_default_visible_columns,
    get_mobile_visible_columns,
    get_table_columns,
    sanitize_visible_columns,
)
from cardtable.models.failure import (
    ActionNotAvailableError,
    CardFetchError,
    ExportError,
    FailureDetail,
    FailureKind,
    KnownError,
)

__all__ = [
    "ActionNotAvailableError",
    "CardFetchError",
    "CARD_TABLE_COLUMNS",
    "COLLECTION_TABLE_COLUMNS",
    "CardBase",
    "CardColor",
    "CardKind",
    "CardRecord",
    "CatalogCard",
    "CollectionCard",
    "ColumnDef",
    "ExportError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "Player",
    "PlayerTeam",
    "Series",
    "TableName",
    "Team",
    "get_always_visible_columns",
    "get_default_visible_columns",
    "get_mobile_visible_columns",
    "get_table_columns",
    "sanitize_visible_columns",
]
