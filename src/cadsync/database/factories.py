"""Database factory functions for creating data source instances."""

import os
from pathlib import Path
from typing import Optional

from cadsync.database.sqlalchemy_db import (
    SQLAlchemyPointOfSaleSource,
    SQLAlchemyCadastralSource,
    SQLAlchemyLedgerSource,
)

POS_URL_ENV = "CADSYNC_POS_URL"
CADASTRAL_URL_ENV = "CADSYNC_CADASTRAL_URL"
LEDGER_URL_ENV = "CADSYNC_LEDGER_URL"


def _resolve_url(database_url: Optional[str], env_var: str, default_name: str) -> str:
    """Pick the explicit URL, then the environment variable, then a local SQLite file."""
    if database_url is None:
        database_url = os.environ.get(env_var)

    if database_url is None:
        # Default to ~/.cadsync/<name>.db
        db_dir = Path.home() / ".cadsync"
        db_dir.mkdir(exist_ok=True)
        database_url = f"sqlite:///{db_dir / default_name}"

    return database_url


def create_point_of_sale_source(database_url: Optional[str] = None) -> SQLAlchemyPointOfSaleSource:
    """Create the point-of-sale source.

    Args:
        database_url: SQLAlchemy URL. If None, checks CADSYNC_POS_URL, then
            defaults to ~/.cadsync/point_of_sale.db

    Returns:
        SQLAlchemyPointOfSaleSource instance
    """
    return SQLAlchemyPointOfSaleSource(_resolve_url(database_url, POS_URL_ENV, "point_of_sale.db"))


def create_cadastral_source(database_url: Optional[str] = None) -> SQLAlchemyCadastralSource:
    """Create the cadastral registry source (CADSYNC_CADASTRAL_URL)."""
    return SQLAlchemyCadastralSource(_resolve_url(database_url, CADASTRAL_URL_ENV, "cadastral.db"))


def create_ledger_source(database_url: Optional[str] = None) -> SQLAlchemyLedgerSource:
    """Create the revenue ledger source (CADSYNC_LEDGER_URL)."""
    return SQLAlchemyLedgerSource(_resolve_url(database_url, LEDGER_URL_ENV, "ledger.db"))


def create_sqlite_sources(directory: str) -> tuple[
    SQLAlchemyPointOfSaleSource, SQLAlchemyCadastralSource, SQLAlchemyLedgerSource
]:
    """Create all three sources as SQLite files inside one directory."""
    base = Path(directory)
    return (
        SQLAlchemyPointOfSaleSource(f"sqlite:///{base / 'point_of_sale.db'}"),
        SQLAlchemyCadastralSource(f"sqlite:///{base / 'cadastral.db'}"),
        SQLAlchemyLedgerSource(f"sqlite:///{base / 'ledger.db'}"),
    )
