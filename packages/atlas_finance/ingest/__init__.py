from .adapters.ledger_csv import EMPTY_INPUT_MESSAGE, EmptyOrHeaderOnlyInput
from .columns import ColumnMap, detect_columns
from .utils import ImportVariant, load_transactions_from_csv, parse_transactions_csv

__all__ = [
    "EMPTY_INPUT_MESSAGE",
    "ColumnMap",
    "EmptyOrHeaderOnlyInput",
    "ImportVariant",
    "detect_columns",
    "load_transactions_from_csv",
    "parse_transactions_csv",
]
