from cardtable.parsers.card_records import (
    infer_card_kind,
    parse_card_record,
    parse_card_records,
)

__all__ = [
    "infer_card_kind",
    "parse_card_record",
    "parse_card_records",
]
