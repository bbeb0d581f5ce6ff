"""Database layer for cadsync application."""

from cadsync.database.base import PointOfSaleSource, CadastralSource, LedgerSource
from cadsync.database.factories import (
    create_point_of_sale_source,
    create_cadastral_source,
    create_ledger_source,
    create_sqlite_sources,
)

__all__ = [
    "PointOfSaleSource",
    "CadastralSource",
    "LedgerSource",
    "create_point_of_sale_source",
    "create_cadastral_source",
    "create_ledger_source",
    "create_sqlite_sources",
]
