"""Creating new migration files and renumbering timestamped ones."""

from __future__ import annotations

import datetime as dt
import logging
import re
import string
from dataclasses import dataclass
from operator import attrgetter
from pathlib import Path

from .naming import camel_case, snake_case

log = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
MIGRATION_EXTENSIONS = (".sql", ".py")
CODE_MIGRATION_TYPE = "py"

_MAX_VERSION = (1 << 63) - 1
_VERSION_PREFIX = re.compile(r"[+-]?[0-9]+")
_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)

SQL_MIGRATION_TEMPLATE = string.Template(
    """-- +goose Up
-- +goose StatementBegin
SELECT 'up SQL query';
-- +goose StatementEnd

-- +goose Down
-- +goose StatementBegin
SELECT 'down SQL query';
-- +goose StatementEnd
"""
)

CODE_MIGRATION_TEMPLATE = string.Template(
    '''"""Migration ${version}: ${camel_name}."""


def up(tx):
    """Run when the migration is applied."""


def down(tx):
    """Run when the migration is rolled back."""
'''
)

_sequential = False


@dataclass(frozen=True)
class MigrationSource:
    """A migration file found on disk and the version its name carries."""

    version: int
    path: Path


def set_sequential(value: bool) -> None:
    """Choose sequential numbering instead of timestamps for new migrations."""
    global _sequential
    _sequential = bool(value)


def _sequential_version(number: int) -> str:
    return f"{number:05d}"


def _numeric_component(name: str) -> int | None:
    prefix, separator, _ = name.partition("_")
    if not separator or not _VERSION_PREFIX.fullmatch(prefix):
        return None
    version = int(prefix)
    if version < 1 or version > _MAX_VERSION:
        return None
    return version


def collect_migration_sources(directory) -> list[MigrationSource]:
    """Return the migration files in ``directory`` ordered by version."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"{directory} directory does not exist")
    found: dict[int, MigrationSource] = {}
    for path in sorted(directory.iterdir()):
        if path.suffix not in MIGRATION_EXTENSIONS or not path.is_file():
            continue
        version = _numeric_component(path.name)
        if version is None:
            if path.suffix == ".sql":
                raise ValueError(f"could not parse SQL migration file {path}")
            continue
        if version in found:
            raise ValueError(
                f"duplicate version {version} detected:\n\t{found[version].path}\n\t{path}"
            )
        found[version] = MigrationSource(version, path)
    return sorted(found.values(), key=attrgetter("version"))


def _as_timestamp(version: int) -> dt.datetime | None:
    text = str(version)
    if len(text) != 14:
        return None
    try:
        return dt.datetime.strptime(text, TIMESTAMP_FORMAT).replace(tzinfo=dt.timezone.utc)
    except ValueError:
        return None


def _versioned(sources: list[MigrationSource]) -> list[MigrationSource]:
    result = []
    for source in sources:
        stamp = _as_timestamp(source.version)
        if stamp is None or stamp < _EPOCH:
            result.append(source)
    return result


def _timestamped(sources: list[MigrationSource]) -> list[MigrationSource]:
    result = []
    for source in sources:
        stamp = _as_timestamp(source.version)
        if stamp is not None and stamp > _EPOCH:
            result.append(source)
    return result


def _next_version(directory: Path) -> str:
    versioned = _versioned(collect_migration_sources(directory))
    return _sequential_version(versioned[-1].version + 1 if versioned else 1)


def create_with_template(directory, template, name: str, migration_type: str) -> Path:
    """Write a new migration file rendered from ``template`` and return its path.

    ``template`` may be a :class:`string.Template`, a template string or
    ``None`` for the default one; it sees ``version`` and ``camel_name``.
    """
    directory = Path(directory)
    if _sequential:
        version = _next_version(directory)
    else:
        version = dt.datetime.now().strftime(TIMESTAMP_FORMAT)

    if template is None:
        template = (
            CODE_MIGRATION_TEMPLATE if migration_type == CODE_MIGRATION_TYPE else SQL_MIGRATION_TEMPLATE
        )
    elif isinstance(template, str):
        template = string.Template(template)

    try:
        content = template.substitute(version=version, camel_name=camel_case(name))
    except (KeyError, ValueError) as exc:
        raise ValueError(f"failed to execute tmpl: {exc}") from exc

    path = directory / f"{version}_{snake_case(name)}.{migration_type}"
    try:
        with path.open("x", encoding="utf-8") as handle:
            handle.write(content)
    except FileExistsError as exc:
        raise FileExistsError(f"failed to create migration file: {path} already exists") from exc
    except OSError as exc:
        raise OSError(f"failed to create migration file: {exc}") from exc

    log.info("Created new file: %s", path)
    return path


def create(directory, name: str, migration_type: str) -> Path:
    """Write a new migration file from the default template for its type."""
    return create_with_template(directory, None, name, migration_type)


def fix(directory) -> list[Path]:
    """Renumber timestamped migrations sequentially after the versioned ones.

    Returns the new paths in the order they were renamed.
    """
    sources = collect_migration_sources(directory)
    versioned = _versioned(sources)
    number = versioned[-1].version + 1 if versioned else 1

    renamed = []
    for source in _timestamped(sources):
        new_name = source.path.name.replace(str(source.version), _sequential_version(number), 1)
        new_path = source.path.with_name(new_name)
        source.path.rename(new_path)
        log.info("RENAMED %s => %s", source.path.name, new_path.name)
        renamed.append(new_path)
        number += 1
    return renamed