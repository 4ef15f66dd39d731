"""SQLite adapter for RecordSpec."""

from recordspec.adapters.sqlite.data_dictionary import SqliteMetadataProvider
from recordspec.adapters.sqlite.store import SqliteCursor, SqliteRecordStore

__all__ = ("SqliteCursor", "SqliteMetadataProvider", "SqliteRecordStore")
