from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager

import structlog
from sqlalchemy.engine import Connection

from search_indexer.core.config import Settings, get_settings
from search_indexer.db.session import open_connection
from search_indexer.services.batch_strategy import EntityIndexer, build_batch_request, run_batch_strategy
from search_indexer.services.credentials import DatabaseCredentials, resolve_credentials
from search_indexer.services.index_config import FIRM_ALIAS, PERSON_ALIAS, IndexConfig
from search_indexer.services.indexer import Indexer
from search_indexer.services.opensearch_service import BulkClient
from search_indexer.services.results import IndexResult
from search_indexer.services.secrets import SecretsProvider
from search_indexer.services.selection import select_indexers
from search_indexer.services.sources import source_for

logger = structlog.get_logger(__name__)

Connector = Callable[..., AbstractContextManager[Connection]]
IndexerFactory = Callable[[str, str, Connection], EntityIndexer]


def add_index_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-all", "--all", dest="all_records", action="store_true",
                        help="index all records for chosen indices")
    parser.add_argument("-firm", "--firm", dest="firm", action="store_true",
                        help="index records to the firm index")
    parser.add_argument("-person", "--person", dest="person", action="store_true",
                        help="index records to the person index")
    parser.add_argument("-from", "--from", dest="from_id", type=int, default=0,
                        help="index an id range starting from (use with -to)")
    parser.add_argument("-to", "--to", dest="to_id", type=int, default=100,
                        help="index an id range ending at, exclusive (use with -from)")
    parser.add_argument("-batch-size", "--batch-size", dest="batch_size", type=int, default=10000,
                        help="batch size to read from db")
    parser.add_argument("-from-date", "--from-date", dest="from_date", default="",
                        help="index records updated from this RFC3339 date")


def requested_types(args: argparse.Namespace) -> list[str]:
    types: list[str] = []
    if args.firm:
        types.append(FIRM_ALIAS)
    if args.person:
        types.append(PERSON_ALIAS)
    return types


def _default_indexer_factory(bulk_client: BulkClient) -> IndexerFactory:
    def factory(entity_type: str, index_name: str, conn: Connection) -> EntityIndexer:
        return Indexer(bulk_client, source_for(entity_type), index_name, conn)

    return factory


class IndexCommand:
    name = "index"
    description = "index records"

    def __init__(
        self,
        bulk_client: BulkClient,
        secrets: SecretsProvider,
        index_configs: Sequence[IndexConfig],
        *,
        settings: Settings | None = None,
        connector: Connector = open_connection,
        indexer_factory: IndexerFactory | None = None,
    ) -> None:
        self.bulk_client = bulk_client
        self.secrets = secrets
        self.settings = settings or get_settings()
        self.current_index_names: tuple[str, ...] = tuple(cfg.name for cfg in index_configs)
        self._connector = connector
        self._indexer_factory = indexer_factory or _default_indexer_factory(bulk_client)

    def _connect(self, credentials: DatabaseCredentials) -> AbstractContextManager[Connection]:
        return self._connector(credentials, connect_timeout=self.settings.db_connect_timeout_seconds)

    def run(self, args: argparse.Namespace) -> dict[str, IndexResult]:
        request = build_batch_request(
            from_date=args.from_date,
            all_records=args.all_records,
            from_id=args.from_id,
            to_id=args.to_id,
            batch_size=args.batch_size,
        )
        credentials = resolve_credentials(self.settings, self.secrets)

        with self._connect(credentials) as conn:
            indexers = select_indexers(
                requested_types(args),
                self.current_index_names,
                lambda entity_type, index_name: self._indexer_factory(entity_type, index_name, conn),
            )
            if not indexers:
                logger.info("indexing_nothing_selected", deployed=list(self.current_index_names))
                return {}
            return run_batch_strategy(indexers, request)
