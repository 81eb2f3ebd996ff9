"""SQL dialect selection and database connections."""

from __future__ import annotations

import enum
import sqlite3


class Dialect(enum.Enum):
    """SQL dialects understood by the migration tool."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE3 = "sqlite3"
    SQLSERVER = "sqlserver"
    REDSHIFT = "redshift"
    TIDB = "tidb"
    CLICKHOUSE = "clickhouse"
    VERTICA = "vertica"


_DIALECT_NAMES = {
    "postgres": Dialect.POSTGRES,
    "pgx": Dialect.POSTGRES,
    "mysql": Dialect.MYSQL,
    "sqlite3": Dialect.SQLITE3,
    "sqlite": Dialect.SQLITE3,
    "mssql": Dialect.SQLSERVER,
    "azuresql": Dialect.SQLSERVER,
    "sqlserver": Dialect.SQLSERVER,
    "redshift": Dialect.REDSHIFT,
    "tidb": Dialect.TIDB,
    "clickhouse": Dialect.CLICKHOUSE,
    "vertica": Dialect.VERTICA,
}

_DRIVER_ALIASES = {
    "mssql": "sqlserver",
    "redshift": "postgres",
    "tidb": "mysql",
}

_SUPPORTED_DRIVERS = frozenset(
    {"postgres", "pgx", "sqlite3", "sqlite", "mysql", "sqlserver", "clickhouse", "vertica", "azuresql"}
)

_SQLITE_DRIVERS = frozenset({"sqlite3", "sqlite"})

_current = Dialect.POSTGRES


def resolve_dialect(name: str) -> Dialect:
    """Return the dialect for a dialect or driver name."""
    try:
        return _DIALECT_NAMES[name]
    except KeyError:
        raise ValueError(f'"{name}": unknown dialect') from None


def set_dialect(name: str) -> Dialect:
    """Select the dialect used from now on and return it."""
    global _current
    _current = resolve_dialect(name)
    return _current


def current_dialect() -> Dialect:
    """Return the dialect currently selected."""
    return _current


def open_db_with_driver(driver: str, dbstring: str):
    """Select the dialect for ``driver`` and open a connection to ``dbstring``."""
    set_dialect(driver)
    driver = _DRIVER_ALIASES.get(driver, driver)
    if driver not in _SUPPORTED_DRIVERS:
        raise ValueError(f"unsupported driver {driver}")
    if driver in _SQLITE_DRIVERS:
        return sqlite3.connect(dbstring)
    raise LookupError(f"no database driver available for {driver}")