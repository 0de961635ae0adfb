import asyncio

import pytest

from core import db
from tests.support.fakes import FakeConnection, FakePool


@pytest.mark.unit
def test_transaction_commits_and_returns_result():
    conn = FakeConnection()
    pool = FakePool(conn)

    async def work(c):
        assert c is conn
        return 42

    assert asyncio.run(db.run_in_transaction(pool, work)) == 42
    assert conn.log == ["begin", "commit"]
    assert pool.acquired == 1


@pytest.mark.unit
def test_transaction_rolls_back_and_reraises_same_error():
    conn = FakeConnection()
    boom = ValueError("boom")

    async def work(c):
        raise boom

    with pytest.raises(ValueError) as info:
        asyncio.run(db.run_in_transaction(FakePool(conn), work))
    assert info.value is boom
    assert conn.log == ["begin", "rollback"]


@pytest.mark.unit
def test_transaction_rolls_back_on_cancellation():
    conn = FakeConnection()

    async def work(c):
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(db.run_in_transaction(FakePool(conn), work))
    assert conn.log == ["begin", "rollback"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "status, expected",
    [("DELETE 1", 1), ("UPDATE 0", 0), ("INSERT 0 1", 1), ("", 0), ("SELECT", 0)],
)
def test_rows_affected(status, expected):
    assert db.rows_affected(status) == expected


@pytest.mark.unit
def test_database_url_prefers_dsn_and_strips_sslmode(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/songs?sslmode=disable&application_name=x")
    assert db.database_url() == "postgresql://u:p@db:5432/songs?application_name=x"


@pytest.mark.unit
def test_database_url_from_parts(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DB_HOST", "pg")
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("DB_USER", "songs")
    monkeypatch.setenv("DB_PASSWORD", "p@ss/word")
    monkeypatch.setenv("DB_NAME", "library")
    assert db.database_url() == "postgresql://songs:p%40ss%2Fword@pg:6543/library"


@pytest.mark.unit
def test_database_url_defaults_host_and_port(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    for name in ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DB_NAME", "library")
    assert db.database_url() == "postgresql://localhost:5432/library"


@pytest.mark.unit
def test_database_url_requires_configuration(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_NAME", raising=False)
    with pytest.raises(RuntimeError):
        db.database_url()
