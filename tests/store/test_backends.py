"""Tests for the SQLite and JSON file persistence backends."""

import json
import sqlite3
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from fintrack.domain.models import Amount, CategoryName, Description, Settings, Transaction, TransactionId
from fintrack.store import JsonFileBackend, PersistenceError, SqliteBackend, TransactionStore, create_backend
from fintrack.store.schema import init_database

STAMP = datetime(2025, 6, 15, 12, 30, tzinfo=timezone.utc)


def make_txn(txn_id: str, amount: str, txn_date: str = "2025-06-14") -> Transaction:
    return Transaction(
        id=TransactionId(txn_id),
        description=Description(f"Item {txn_id}"),
        amount=Amount(Decimal(amount)),
        category=CategoryName("Food"),
        date=txn_date,
        created_at=STAMP,
        updated_at=STAMP,
    )


@pytest.fixture(params=["sqlite", "json"])
def any_backend(request: pytest.FixtureRequest, tmp_path: Path) -> SqliteBackend | JsonFileBackend:
    if request.param == "sqlite":
        return SqliteBackend(tmp_path / "data" / "fintrack.db")
    return JsonFileBackend(tmp_path / "data" / "fintrack.json")


class TestBackendContract:
    """Behaviour shared by every backend."""

    def test_missing_storage_loads_empty(self, any_backend: SqliteBackend | JsonFileBackend) -> None:
        """Should return no transactions and default settings."""
        assert any_backend.load_transactions() == []
        assert any_backend.load_settings() == Settings()

    def test_transactions_round_trip(self, any_backend: SqliteBackend | JsonFileBackend) -> None:
        """Should load exactly what was saved, in order."""
        transactions = [make_txn("b", "-0.10"), make_txn("a", "1234.5678", "2024-02-29"), make_txn("c", "7")]

        assert any_backend.save_transactions(transactions) is True

        assert any_backend.load_transactions() == transactions

    def test_save_replaces_previous_set(self, any_backend: SqliteBackend | JsonFileBackend) -> None:
        """Should not keep records dropped from the new set."""
        any_backend.save_transactions([make_txn("a", "1"), make_txn("b", "2")])
        any_backend.save_transactions([make_txn("b", "2")])

        assert [t.id for t in any_backend.load_transactions()] == ["b"]

    def test_settings_round_trip(self, any_backend: SqliteBackend | JsonFileBackend) -> None:
        """Should load exactly the settings saved."""
        settings = Settings(budget_cap=Amount(Decimal("500.25")), currency_rates={"USD": Decimal("1.1")})

        assert any_backend.save_settings(settings) is True

        assert any_backend.load_settings() == settings

    def test_settings_and_transactions_are_independent(self, any_backend: SqliteBackend | JsonFileBackend) -> None:
        """Should not overwrite one kind of data when saving the other."""
        any_backend.save_transactions([make_txn("a", "1")])
        any_backend.save_settings(Settings(budget_cap=Amount(Decimal("10"))))

        assert len(any_backend.load_transactions()) == 1
        assert any_backend.load_settings().budget_cap == Decimal("10")

    def test_works_with_store(self, any_backend: SqliteBackend | JsonFileBackend) -> None:
        """Should support a full store session and reload."""
        store = TransactionStore(any_backend)
        store.initialize()
        kept = store.add_transaction({"description": "Bus", "amount": "-2.40", "category": "Transport", "date": "2025-06-01"})
        dropped = store.add_transaction({"description": "Tea", "amount": "-1", "category": "Food", "date": "2025-06-02"})
        store.delete_transaction(dropped.id)

        reloaded = TransactionStore(any_backend)
        reloaded.initialize()

        assert reloaded.get_all_transactions() == [kept]


class TestSqliteBackend:
    """SQLite-specific behaviour."""

    def test_corrupt_file_loads_empty(self, tmp_path: Path) -> None:
        """Should not crash on a file that is not a database."""
        db_path = tmp_path / "fintrack.db"
        db_path.write_bytes(b"definitely not sqlite" * 100)
        backend = SqliteBackend(db_path)

        assert backend.load_transactions() == []
        assert backend.load_settings() == Settings()

    def test_save_failure_returns_false(self, tmp_path: Path) -> None:
        """Should report a save failure instead of raising."""
        db_path = tmp_path / "fintrack.db"
        db_path.write_bytes(b"definitely not sqlite" * 100)
        backend = SqliteBackend(db_path)

        assert backend.save_transactions([make_txn("a", "1")]) is False
        assert backend.save_settings(Settings()) is False

    def test_unwritable_directory_returns_false(self, tmp_path: Path) -> None:
        """Should report a failed save when the data directory cannot be created."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        backend = SqliteBackend(blocker / "fintrack.db")

        assert backend.save_transactions([make_txn("a", "1")]) is False
        assert backend.save_settings(Settings()) is False

    def test_unwritable_directory_marks_store_dirty(self, tmp_path: Path) -> None:
        """Should surface a filesystem failure as a PersistenceError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        store = TransactionStore(SqliteBackend(blocker / "fintrack.db"))
        store.initialize()

        with pytest.raises(PersistenceError):
            store.add_transaction({"description": "Bus", "amount": "-2", "category": "Transport", "date": "2025-06-01"})

        assert store.is_dirty
        assert len(store.get_all_transactions()) == 1

    def test_connections_are_closed(self, tmp_path: Path) -> None:
        """Should close every connection it opens."""
        opened: list[sqlite3.Connection] = []

        class RecordingBackend(SqliteBackend):
            def _connect(self) -> sqlite3.Connection:
                conn = super()._connect()
                opened.append(conn)
                return conn

        backend = RecordingBackend(tmp_path / "fintrack.db")
        backend.save_transactions([make_txn("a", "1")])
        backend.save_settings(Settings())
        backend.load_transactions()
        backend.load_settings()

        assert len(opened) == 4
        for conn in opened:
            with pytest.raises(sqlite3.ProgrammingError):
                conn.execute("SELECT 1")

    def test_skips_corrupt_rows(self, tmp_path: Path) -> None:
        """Should drop rows that cannot be decoded and keep the rest."""
        db_path = tmp_path / "fintrack.db"
        backend = SqliteBackend(db_path)
        backend.save_transactions([make_txn("good", "5")])

        with sqlite3.connect(db_path) as conn:
            conn.execute(
                "INSERT INTO transactions VALUES ('bad', 1, 'Broken', 'abc', 'Food', '2025-06-01', ?, ?)",
                (STAMP.isoformat(), STAMP.isoformat()),
            )
            conn.commit()

        assert [t.id for t in backend.load_transactions()] == ["good"]

    def test_init_database_is_idempotent(self, tmp_path: Path) -> None:
        """Should create the schema and tolerate running twice."""
        db_path = tmp_path / "nested" / "fintrack.db"

        init_database(db_path)
        init_database(db_path)

        with sqlite3.connect(db_path) as conn:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        assert {"transactions", "settings"} <= tables


class TestJsonFileBackend:
    """JSON-file-specific behaviour."""

    def test_corrupt_file_loads_empty(self, tmp_path: Path) -> None:
        """Should not crash on invalid JSON."""
        path = tmp_path / "fintrack.json"
        path.write_text("{not json", encoding="utf-8")
        backend = JsonFileBackend(path)

        assert backend.load_transactions() == []
        assert backend.load_settings() == Settings()

    def test_skips_corrupt_records(self, tmp_path: Path) -> None:
        """Should drop records that cannot be decoded and keep the rest."""
        path = tmp_path / "fintrack.json"
        backend = JsonFileBackend(path)
        backend.save_transactions([make_txn("good", "5")])

        document = json.loads(path.read_text(encoding="utf-8"))
        document["transactions"].append({"id": "bad", "amount": "NaN"})
        document["transactions"].append("not an object")
        path.write_text(json.dumps(document), encoding="utf-8")

        assert [t.id for t in backend.load_transactions()] == ["good"]

    def test_repeated_record_loads_once(self, tmp_path: Path) -> None:
        """Should keep a single copy of a record listed twice."""
        path = tmp_path / "fintrack.json"
        backend = JsonFileBackend(path)
        backend.save_transactions([make_txn("a", "5")])

        document = json.loads(path.read_text(encoding="utf-8"))
        document["transactions"].append(document["transactions"][0])
        path.write_text(json.dumps(document), encoding="utf-8")

        store = TransactionStore(backend)
        store.initialize()

        assert [t.id for t in store.get_all_transactions()] == ["a"]
        store.delete_transaction("a")
        assert store.get_all_transactions() == []

    def test_wrong_top_level_type(self, tmp_path: Path) -> None:
        """Should treat a non-object document as empty."""
        path = tmp_path / "fintrack.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")

        assert JsonFileBackend(path).load_transactions() == []

    def test_amounts_stored_as_strings(self, tmp_path: Path) -> None:
        """Should store amounts as exact decimal strings."""
        path = tmp_path / "fintrack.json"
        JsonFileBackend(path).save_transactions([make_txn("a", "0.10")])

        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["transactions"][0]["amount"] == "0.10"


class TestCreateBackend:
    """Tests for create_backend."""

    def test_by_name(self, tmp_path: Path) -> None:
        """Should build the named backend."""
        assert isinstance(create_backend("sqlite", tmp_path / "a.db"), SqliteBackend)
        assert isinstance(create_backend("json", tmp_path / "a.json"), JsonFileBackend)

    def test_unknown(self, tmp_path: Path) -> None:
        """Should reject unknown backend names."""
        with pytest.raises(ValueError):
            create_backend("postgres", tmp_path / "a")
