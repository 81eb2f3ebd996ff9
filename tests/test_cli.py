import os

import pytest

from gosling.cli import init_directory, main, merge_args, run
from gosling.scaffold import set_sequential


@pytest.fixture(autouse=True)
def _reset_sequential():
    yield
    set_sequential(False)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("GOOSE_DRIVER", "GOOSE_DBSTRING", "GOOSE_MIGRATION_DIR", "GOOSE_NOCOLOR"):
        monkeypatch.delenv(name, raising=False)


def _assert_in_order(directory):
    names = sorted(os.listdir(directory))
    for index, name in enumerate(names, start=1):
        assert name.startswith(f"{index:05d}"), name
    return names


def test_sequential_create(tmp_path):
    for name in ("create_table", "add_users", "add_indices", "update_users"):
        assert main(["-s", f"-dir={tmp_path}", "create", name]) == 0
    names = _assert_in_order(tmp_path)
    assert names == [
        "00001_create_table.py",
        "00002_add_users.py",
        "00003_add_indices.py",
        "00004_update_users.py",
    ]


def _write_timestamped(directory, stamps_and_names):
    for stamp, name in stamps_and_names:
        (directory / f"{stamp}_{name}.sql").write_text("-- +goose Up\n", encoding="utf-8")


def test_fix_orders_migrations(tmp_path):
    _write_timestamped(
        tmp_path,
        [
            ("20230101000001", "create_table"),
            ("20230101000002", "add_users"),
            ("20230101000003", "add_indices"),
            ("20230101000004", "update_users"),
        ],
    )
    assert main([f"-dir={tmp_path}", "fix"]) == 0
    names = _assert_in_order(tmp_path)
    assert len(names) == 4
    assert names[0] == "00001_create_table.sql"

    _write_timestamped(
        tmp_path,
        [("20230101000005", "remove_column"), ("20230101000006", "create_books_table")],
    )
    assert main([f"-dir={tmp_path}", "fix"]) == 0
    names = _assert_in_order(tmp_path)
    assert names[-2:] == ["00005_remove_column.sql", "00006_create_books_table.sql"]


def test_run_create_then_fix(tmp_path):
    created = run("create", tmp_path, ["test", "sql"])
    assert created.name.endswith("_test.sql")
    run("fix", tmp_path, [])
    assert (tmp_path / "00001_test.sql").is_file()


def test_run_create_defaults_to_code_type(tmp_path):
    created = run("create", tmp_path, ["add thing"])
    assert created.suffix == ".py"
    assert created.name.endswith("_add_thing.py")


def test_run_create_requires_name(tmp_path):
    with pytest.raises(ValueError, match="create must be of form"):
        run("create", tmp_path, [])


def test_run_unknown_command(tmp_path):
    with pytest.raises(ValueError, match='"bogus": no such command'):
        run("bogus", tmp_path, [])


def test_merge_args_inserts_driver_and_dbstring():
    environ = {"GOOSE_DRIVER": "sqlite3", "GOOSE_DBSTRING": "./foo.db"}
    assert merge_args(["status"], environ) == ["sqlite3", "./foo.db", "status"]


def test_merge_args_only_dbstring():
    environ = {"GOOSE_DBSTRING": "./foo.db"}
    assert merge_args(["sqlite3", "status"], environ) == ["sqlite3", "./foo.db", "status"]


def test_merge_args_empty_and_unset():
    assert merge_args([], {"GOOSE_DRIVER": "sqlite3"}) == []
    assert merge_args(["a", "b", "c"], {}) == ["a", "b", "c"]


def test_init_directory_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = init_directory(".")
    assert path.parent.name == "migrations"
    assert path.name.endswith("_initial.sql")
    content = path.read_text(encoding="utf-8")
    assert "-- +goose Up" in content
    assert "-- +goose Down" in content


def test_init_directory_existing(tmp_path):
    target = tmp_path / "existing"
    target.mkdir()
    with pytest.raises(FileExistsError, match="directory already exists"):
        init_directory(target)


def test_main_init_twice_fails(tmp_path):
    target = tmp_path / "db"
    assert main([f"-dir={target}", "init"]) == 0
    assert len(list(target.iterdir())) == 1
    assert main([f"-dir={target}", "init"]) == 1


def test_main_no_args_prints_usage(capsys):
    assert main([]) == 1
    assert "Usage: gosling" in capsys.readouterr().out


def test_main_help(capsys):
    assert main(["-h"]) == 0
    assert "Commands:" in capsys.readouterr().out


def test_main_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("gosling version:")


def test_main_env(monkeypatch, capsys):
    monkeypatch.setenv("GOOSE_DRIVER", "sqlite3")
    assert main(["env"]) == 0
    out = capsys.readouterr().out
    assert 'GOOSE_DRIVER="sqlite3"' in out
    assert 'GOOSE_DBSTRING=""' in out


def test_main_env_migration_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("GOOSE_MIGRATION_DIR", str(tmp_path))
    assert main(["-s", "create", "from_env", "sql"]) == 0
    assert os.listdir(tmp_path) == ["00001_from_env.sql"]


def test_main_driver_path_runs_command(tmp_path):
    db_path = tmp_path / "test.db"
    migrations = tmp_path / "migrations"
    migrations.mkdir()
    assert main(["-s", f"-dir={migrations}", "sqlite3", str(db_path), "create", "first", "sql"]) == 0
    assert os.listdir(migrations) == ["00001_first.sql"]


def test_main_driver_path_unknown_command(tmp_path, capsys):
    db_path = tmp_path / "test.db"
    assert main([f"-dir={tmp_path}", "sqlite3", str(db_path), "bogus"]) == 1
    assert "no such command" in capsys.readouterr().err


def test_main_unknown_driver(tmp_path, capsys):
    assert main([f"-dir={tmp_path}", "nosuchdb", "x", "fix"]) == 1
    assert "unknown dialect" in capsys.readouterr().err


def test_main_too_few_args(capsys):
    assert main(["sqlite3", "foo.db"]) == 1
    assert "Usage: gosling" in capsys.readouterr().out