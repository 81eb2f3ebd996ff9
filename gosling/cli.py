"""Command-line entry point for creating, renumbering and running migrations."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from importlib.metadata import PackageNotFoundError, version as _dist_version
from pathlib import Path

from .dialect import open_db_with_driver
from .scaffold import CODE_MIGRATION_TYPE, create, create_with_template, fix, set_sequential

log = logging.getLogger(__name__)

DEFAULT_MIGRATION_DIR = "."
DEFAULT_TABLE = "goose_db_version"
ENV_NAMES = ("GOOSE_DRIVER", "GOOSE_DBSTRING", "GOOSE_MIGRATION_DIR", "GOOSE_NOCOLOR")

_DRIVER_RENAMES = {"sqlite3": "sqlite", "postgres": "pgx"}

USAGE = """Usage: gosling [OPTIONS] DRIVER DBSTRING COMMAND

or

Set environment key
GOOSE_DRIVER=DRIVER
GOOSE_DBSTRING=DBSTRING

Usage: gosling [OPTIONS] COMMAND

Drivers:
    postgres
    mysql
    sqlite3
    mssql
    redshift
    tidb
    clickhouse
    vertica

Examples:
    gosling sqlite3 ./foo.db create init sql
    gosling sqlite3 ./foo.db create add_some_column sql
    gosling -s -dir=migrations create fetch_user_data py
    gosling -dir=migrations fix

    GOOSE_DRIVER=sqlite3 GOOSE_DBSTRING=./foo.db gosling create init sql

Options:
  -dir string            directory with migration files (default ".")
  -table string          migrations table name (default "goose_db_version")
  -v                     enable verbose mode
  -h                     print help
  -version               print version
  -certfile string       file path to root CA's certificates in pem format (only support on mysql)
  -s                     use sequential numbering for new migrations
  -allow-missing         applies missing (out-of-order) migrations
  -ssl-cert string       file path to SSL certificates in pem format (only support on mysql)
  -ssl-key string        file path to SSL key in pem format (only support on mysql)
  -no-versioning         apply migration commands with no versioning, in file order
  -no-color              disable color output (NO_COLOR env variable supported)

Commands:
    init                 Create a migrations directory with an initial SQL migration
    create NAME [sql|py] Creates new migration file with the current timestamp
    fix                  Apply sequential ordering to migrations
    env                  Print the environment variables the tool reads
"""

INIT_TEMPLATE = """-- Thank you for giving gosling a try!
--
-- This file was automatically created running gosling init. If you're familiar with gosling
-- feel free to remove/rename this file, write some SQL and migrate up.
--
-- A single .sql migration file holds both Up and Down migrations.
--
-- All .sql migration files are expected to have a -- +goose Up annotation.
-- The -- +goose Down annotation is optional, but recommended, and must come after the Up annotation.
--
-- The -- +goose NO TRANSACTION annotation may be added to the top of the file to run statements
-- outside a transaction. Both Up and Down migrations within this file will be run without a transaction.
--
-- More complex statements that have semicolons within them must be annotated with
-- the -- +goose StatementBegin and -- +goose StatementEnd annotations to be properly recognized.

-- +goose Up
SELECT 'up SQL query';

-- +goose Down
SELECT 'down SQL query';
"""


def run(command: str, directory, args: Sequence[str] = ()):
    """Run a file-level migration command in ``directory``.

    ``create`` returns the path of the new file, ``fix`` the renamed paths.
    """
    args = list(args)
    if command == "create":
        if not args:
            raise ValueError(
                "create must be of form: gosling [OPTIONS] DRIVER DBSTRING create NAME [py|sql]"
            )
        migration_type = args[1] if len(args) == 2 else CODE_MIGRATION_TYPE
        return create(directory, args[0], migration_type)
    if command == "fix":
        return fix(directory)
    raise ValueError(f'"{command}": no such command')


def merge_args(args: Sequence[str], environ: Mapping[str, str]) -> list[str]:
    """Insert the driver and connection string taken from ``environ`` into ``args``."""
    args = list(args)
    if not args:
        return args
    driver = environ.get("GOOSE_DRIVER", "")
    if driver:
        args = [driver, *args]
    dbstring = environ.get("GOOSE_DBSTRING", "")
    if dbstring:
        args = [args[0], dbstring, *args[1:]]
    return args


def init_directory(directory) -> Path:
    """Create a migrations directory holding an initial SQL migration."""
    directory = str(directory) if directory is not None else ""
    if directory in ("", DEFAULT_MIGRATION_DIR):
        directory = "migrations"
    path = Path(directory)
    if path.exists():
        raise FileExistsError(f"directory already exists: {directory}")
    path.mkdir(parents=True)
    return create_with_template(path, INIT_TEMPLATE, "initial", "sql")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gosling", add_help=False, allow_abbrev=False)
    parser.add_argument("-dir", "--dir", dest="dir", default=DEFAULT_MIGRATION_DIR)
    parser.add_argument("-table", "--table", dest="table", default=DEFAULT_TABLE)
    parser.add_argument("-v", dest="verbose", action="store_true")
    parser.add_argument("-h", "-help", "--help", dest="help", action="store_true")
    parser.add_argument("-version", "--version", dest="version", action="store_true")
    parser.add_argument("-certfile", "--certfile", dest="certfile", default="")
    parser.add_argument("-s", dest="sequential", action="store_true")
    parser.add_argument("-allow-missing", "--allow-missing", dest="allow_missing", action="store_true")
    parser.add_argument("-ssl-cert", "--ssl-cert", dest="ssl_cert", default="")
    parser.add_argument("-ssl-key", "--ssl-key", dest="ssl_key", default="")
    parser.add_argument("-no-versioning", "--no-versioning", dest="no_versioning", action="store_true")
    parser.add_argument("-no-color", "--no-color", dest="no_color", action="store_true")
    parser.add_argument("args", nargs=argparse.REMAINDER)
    return parser


def _package_version() -> str:
    try:
        return _dist_version("gosling")
    except PackageNotFoundError:
        return ""


def _fail(prefix: str, exc: BaseException) -> int:
    print(f"{prefix}: {exc}", file=sys.stderr)
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Parse ``argv`` and run the requested command; return the exit status."""
    options = _build_parser().parse_args(sys.argv[1:] if argv is None else list(argv))
    environ = os.environ

    if options.version:
        print(f"gosling version:{_package_version()}")
        return 0

    logging.basicConfig(format="%(message)s", level=logging.DEBUG if options.verbose else logging.INFO)
    set_sequential(options.sequential)

    args = list(options.args)
    if options.help:
        print(USAGE)
        return 0
    if not args:
        print(USAGE)
        return 1

    directory = options.dir
    env_dir = environ.get("GOOSE_MIGRATION_DIR", "")
    if directory == DEFAULT_MIGRATION_DIR and env_dir:
        directory = env_dir

    head = args[0]
    if head == "init":
        try:
            init_directory(directory)
        except (OSError, ValueError) as exc:
            return _fail("gosling run", exc)
        return 0
    if head in ("create", "fix"):
        try:
            run(head, directory, args[1:])
        except (OSError, ValueError) as exc:
            return _fail("gosling run", exc)
        return 0
    if head == "env":
        for name in ENV_NAMES:
            print(f"{name}={json.dumps(environ.get(name, ''))}")
        return 0

    args = merge_args(args, environ)
    if len(args) < 3:
        print(USAGE)
        return 1

    driver, dbstring, command = args[0], args[1], args[2]
    driver = _DRIVER_RENAMES.get(driver, driver)
    try:
        db = open_db_with_driver(driver, dbstring)
    except (LookupError, ValueError, OSError) as exc:
        return _fail(f"-dbstring={json.dumps(dbstring)}", exc)

    try:
        run(command, directory, args[3:])
    except (OSError, ValueError) as exc:
        return _fail("gosling run", exc)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())