"""
Mongo Record Store.

Adapts a pymongo-compatible collection to the RecordStore protocol. The
driver already pages results from the server (``batch_size`` documents per
round trip); this adapter only issues the query and makes sure the
server-side cursor is closed when the pipeline stops early.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, List, Optional, Tuple

from record_exporter.domain.value_objects import Query, Record

logger = logging.getLogger(__name__)


class MongoRecordStore:
    """Record store backed by a pymongo ``Collection``."""

    def __init__(
        self,
        collection: Any,
        batch_size: int = 500,
        sort: Optional[List[Tuple[str, int]]] = None,
        projection: Optional[dict] = None,
    ) -> None:
        """
        Initialize store.

        Args:
            collection: pymongo ``Collection`` (or compatible object)
            batch_size: Documents per server round trip
            sort: Sort specification; a stable order keeps exports repeatable
            projection: Optional field projection
        """
        self.collection = collection
        self.batch_size = batch_size
        self.sort = sort or [("_id", 1)]
        self.projection = projection

    def open_cursor(self, query: Query) -> Iterator[Record]:
        """Issue ``query`` and return the driver cursor."""
        cursor = self.collection.find(
            query,
            self.projection,
            batch_size=self.batch_size,
            sort=self.sort,
            no_cursor_timeout=False,
        )
        logger.debug(
            f"Opened cursor on {getattr(self.collection, 'name', 'collection')} "
            f"(batch_size={self.batch_size})"
        )
        return cursor
