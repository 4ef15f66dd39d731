import logging
import sqlite3
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from recordspec.data_dictionary import StaticMetadataProvider
from recordspec.parameters import AccessMode

here = Path(__file__).parent
root_path = here.parent


class RecordingStore:
    """In-memory record store that records every call it receives."""

    def __init__(self, records: "list[dict[str, Any]] | None" = None, error: "Exception | None" = None) -> None:
        self.records = records if records is not None else []
        self.error = error
        self.calls: list[tuple[Any, ...]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def query(self, text: str) -> "list[dict[str, Any]]":
        self.calls.append(("query", text))
        return self._result()

    def query_with_bindings(
        self, text: str, bindings: "dict[str, Any]", access_mode: AccessMode
    ) -> "list[dict[str, Any]]":
        self.calls.append(("query_with_bindings", text, bindings, access_mode))
        return self._result()

    def _result(self) -> "list[dict[str, Any]]":
        if self.error is not None:
            raise self.error
        return [dict(record) for record in self.records]


@pytest.fixture
def metadata() -> StaticMetadataProvider:
    return StaticMetadataProvider.from_mapping(
        {
            "Account": {
                "fields": ["Id", "Name", "Industry", "OwnerId"],
                "field_sets": {"Summary": ["Id", "Name"], "Routing": ["Id", "OwnerId"]},
            },
            "Contact": {"fields": ["Id", "LastName", "AccountId"]},
        }
    )


@pytest.fixture
def account_records() -> "list[dict[str, Any]]":
    return [
        {"Id": 1, "Name": "Acme", "Industry": "Manufacturing"},
        {"Id": 2, "Name": "Globex", "Industry": "Energy"},
    ]


@pytest.fixture
def store(account_records: "list[dict[str, Any]]") -> RecordingStore:
    return RecordingStore(account_records)


@pytest.fixture
def empty_store() -> RecordingStore:
    return RecordingStore([])


@pytest.fixture
def sqlite_connection() -> Generator[sqlite3.Connection, None, None]:
    """In-memory database holding a small Account/Contact schema."""
    connection = sqlite3.connect(":memory:")
    connection.executescript(
        """
        CREATE TABLE Account (Id INTEGER PRIMARY KEY, Name TEXT NOT NULL, Industry TEXT, AnnualRevenue REAL);
        CREATE TABLE Contact (Id INTEGER PRIMARY KEY, LastName TEXT NOT NULL, AccountId INTEGER);
        INSERT INTO Account (Id, Name, Industry, AnnualRevenue) VALUES
            (1, 'Acme', 'Manufacturing', 1200000.0),
            (2, 'Globex', 'Energy', 5400000.0),
            (3, 'Initech', 'Technology', 800000.0),
            (4, 'Umbrella', 'Technology', NULL);
        INSERT INTO Contact (Id, LastName, AccountId) VALUES (10, 'Smith', 1), (11, 'Jones', 3), (12, 'Brown', 3);
        """
    )
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture(autouse=True)
def reset_recordspec_logging() -> Generator[None, None, None]:
    """Undo handler changes made by tests that configure logging."""
    logger = logging.getLogger("recordspec")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
