from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime
from itertools import islice
from typing import Any

import structlog
from sqlalchemy.engine import Connection

from search_indexer.services.errors import InputValidationError
from search_indexer.services.opensearch_service import BulkClient
from search_indexer.services.results import IndexResult
from search_indexer.services.sources import RecordSource

logger = structlog.get_logger(__name__)


def _check_batch_size(batch_size: int) -> int:
    if batch_size <= 0:
        raise InputValidationError("-batch-size", "must be greater than zero")
    return batch_size


def _chunked(documents: Iterable[dict[str, Any]], size: int) -> Iterator[list[dict[str, Any]]]:
    it = iter(documents)
    while True:
        chunk = list(islice(it, size))
        if not chunk:
            return
        yield chunk


class Indexer:
    """Pages records of one entity type out of the database into one physical index."""

    def __init__(self, bulk_client: BulkClient, source: RecordSource, index_name: str, conn: Connection) -> None:
        self.bulk_client = bulk_client
        self.source = source
        self.index_name = index_name
        self.conn = conn

    def _index_batches(self, result: IndexResult, documents: Iterable[dict[str, Any]], batch_size: int) -> None:
        for chunk in _chunked(documents, batch_size):
            result.add_batch(self.bulk_client.index_documents(self.index_name, chunk))
            logger.debug(
                "indexing_batch_sent",
                index=self.index_name,
                batch=len(chunk),
                successful=result.successful,
                failed=result.failed,
            )

    def by_id(self, from_id: int, to_id: int, batch_size: int) -> IndexResult:
        size = _check_batch_size(batch_size)
        result = IndexResult()
        for start in range(from_id, to_id, size):
            end = min(start + size, to_id)
            self._index_batches(result, self.source.fetch_by_id(self.conn, start, end), size)
        return result

    def all(self, batch_size: int) -> IndexResult:
        _check_batch_size(batch_size)
        bounds = self.source.id_bounds(self.conn)
        if bounds is None:
            return IndexResult()
        min_id, max_id = bounds
        return self.by_id(min_id, max_id + 1, batch_size)

    def from_date(self, since: datetime, batch_size: int) -> IndexResult:
        size = _check_batch_size(batch_size)
        result = IndexResult()
        self._index_batches(result, self.source.fetch_from_date(self.conn, since), size)
        return result
