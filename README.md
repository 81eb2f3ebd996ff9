# gosling

Tools for keeping a directory of database migration files in order. It
creates new migration files from templates, names them consistently and
renumbers timestamped files into a sequential series.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Command line

The package installs a `gosling` command.

Start a new migrations directory. It is created as `migrations` unless
another directory is given with `-dir`. The command fails if the directory
already exists. The new directory holds one SQL migration named `initial`:

```
gosling init
```

Create a new migration. Its file name starts with the current timestamp
(`YYYYMMDDhhmmss`), followed by the name in snake case and the type as its
extension. The type is `sql` or `py`; it defaults to `py`:

```
gosling -dir migrations create add_users_table sql
```

Number new migrations sequentially (`00001`, `00002`, ...) instead of by
timestamp. The new number is one past the highest sequential version
already in the directory:

```
gosling -s -dir migrations create add_users_table sql
```

Give every timestamped migration the next sequential number, in the order
of the timestamps:

```
gosling -dir migrations fix
```

Print the environment variables the command reads:

```
gosling env
```

Print the installed version:

```
gosling -version
```

If `-dir` is left out, the directory named by the `GOOSE_MIGRATION_DIR`
environment variable is used when it is set.

The command also takes the form `gosling [OPTIONS] DRIVER DBSTRING COMMAND`,
where `GOOSE_DRIVER` and `GOOSE_DBSTRING` may stand in for the driver and
connection string. The connection is opened before the command runs; only
the `sqlite3` and `sqlite` drivers can open one (a SQLite file at
`DBSTRING`). The other known drivers (`postgres`, `mysql`, `mssql`,
`redshift`, `tidb`, `clickhouse`, `vertica`) are recognised but fail with a
message that no driver is available. `COMMAND` may be `create` or `fix`:

```
gosling sqlite3 ./foo.db create init sql
```

`-v` turns on debug logging. `-h` prints the usage text. The options
`-table`, `-certfile`, `-ssl-cert`, `-ssl-key`, `-allow-missing`,
`-no-versioning` and `-no-color` are accepted but change nothing.

Errors are printed to standard error and the command exits with status 1.

## Migration files

Migration files are `.sql` and `.py` files whose names start with a
version number followed by an underscore, such as `00001_add_users.sql` or
`20240101120000_add_users.sql`. A `.sql` file without such a prefix is an
error; a `.py` file without one is ignored. Two files with the same version
are an error.

A new SQL migration looks like this:

```sql
-- +goose Up
-- +goose StatementBegin
SELECT 'up SQL query';
-- +goose StatementEnd

-- +goose Down
-- +goose StatementBegin
SELECT 'down SQL query';
-- +goose StatementEnd
```

A new `py` migration holds empty `up(tx)` and `down(tx)` functions.

## Library use

```python
from gosling.naming import camel_case, snake_case
from gosling.scaffold import (
    collect_migration_sources,
    create,
    create_with_template,
    fix,
    set_sequential,
)
from gosling.dialect import Dialect, current_dialect, open_db_with_driver, set_dialect

snake_case("Add updated_at to users table")  # 'add_updated_at_to_users_table'
camel_case("Add updated_at to users table")  # 'AddUpdatedAtToUsersTable'

set_sequential(True)
path = create("migrations", "add users", "sql")  # Path('migrations/00001_add_users.sql')
create_with_template("migrations", "-- $version $camel_name\n", "seed data", "sql")
for source in collect_migration_sources("migrations"):
    print(source.version, source.path)
renamed = fix("migrations")                      # list of new paths

set_dialect("sqlite3")                            # Dialect.SQLITE3
current_dialect()
connection = open_db_with_driver("sqlite3", "foo.db")
```

`create_with_template` takes a `string.Template`, a template string or
`None`; the template sees `version` and `camel_name`. The CLI entry point
is `gosling.cli.main`, and `gosling.cli.run`, `merge_args` and
`init_directory` are available for use from code.

Unknown dialect names, unsupported drivers, malformed commands and
existing target files raise exceptions rather than returning error values.

## What it does not do

gosling only works with migration files. It does not apply or roll back
migrations, keep a version table in a database, or report migration status:
there are no `up`, `down`, `redo`, `reset`, `status` or `version` commands.
Of the database drivers, only SQLite connections can be opened.