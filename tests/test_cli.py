"""CLI tests."""

import sqlite3

from click.testing import CliRunner

from todoapi import __version__
from todoapi.cli.main import main


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_db_creates_tables(tmp_path, monkeypatch):
    db_path = tmp_path / "cli.db"
    monkeypatch.setenv("TODOAPI_DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")

    result = CliRunner().invoke(main, ["init-db"])
    assert result.exit_code == 0, result.output
    assert "Tables ready." in result.output

    with sqlite3.connect(db_path) as conn:
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
    assert {"users", "todos"} <= tables
