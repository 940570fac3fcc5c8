"""
Unit Tests for MongoRecordStore.

Test Aspects Covered:
    ✅ Business Logic: Query issued with batch size and stable sort
    ✅ Resource Handling: Driver cursor closed through RecordCursor
"""

from __future__ import annotations

from unittest.mock import MagicMock

from record_exporter.adapters.mongo_store import MongoRecordStore
from record_exporter.cursor.record_cursor import RecordCursor


class TestMongoRecordStore:
    """Test cases for MongoRecordStore."""

    def test_find_arguments(self) -> None:
        """
        SCENARIO: Cursor opened with default settings
        EXPECTED: find called with query, batch size and _id sort
        """
        # Arrange
        collection = MagicMock()
        store = MongoRecordStore(collection, batch_size=50)

        # Act
        store.open_cursor({"form": "5"})

        # Assert
        collection.find.assert_called_once_with(
            {"form": "5"},
            None,
            batch_size=50,
            sort=[("_id", 1)],
            no_cursor_timeout=False,
        )

    def test_driver_cursor_closed(self) -> None:
        """
        SCENARIO: Driver cursor wrapped in a RecordCursor and closed early
        EXPECTED: Driver close called once
        """
        # Arrange
        driver_cursor = MagicMock()
        driver_cursor.__iter__.return_value = iter([{"_id": "a"}, {"_id": "b"}])
        collection = MagicMock()
        collection.find.return_value = driver_cursor
        cursor = RecordCursor(MongoRecordStore(collection).open_cursor({}))

        # Act
        first = cursor.next()
        cursor.close()

        # Assert
        assert first == {"_id": "a"}
        driver_cursor.close.assert_called_once()
