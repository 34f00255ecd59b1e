from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from search_indexer.services.opensearch_service import BulkResult

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class IndexResult:
    successful: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def add_batch(self, batch: BulkResult) -> None:
        self.successful += batch.successful
        self.failed += batch.failed
        self.errors.extend(batch.errors)


def report_result(entity_type: str, result: IndexResult) -> None:
    logger.info(
        "indexing_done",
        entity_type=entity_type,
        successful=result.successful,
        failed=result.failed,
    )
    for error in result.errors:
        logger.error("indexing_error", entity_type=entity_type, error=error)
