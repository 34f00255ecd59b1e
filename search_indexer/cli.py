from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

import structlog

from search_indexer.core.config import get_settings
from search_indexer.core.logging import configure_logging
from search_indexer.services.index_command import IndexCommand, add_index_arguments
from search_indexer.services.index_config import default_index_configs
from search_indexer.services.opensearch_service import OpenSearchBulkClient
from search_indexer.services.secrets import AwsSecretsManager

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="search-indexer", description="Reindex search records from the database")
    subparsers = parser.add_subparsers(dest="command", required=True)
    index_parser = subparsers.add_parser(
        IndexCommand.name,
        help=IndexCommand.description,
        description=IndexCommand.description,
        allow_abbrev=False,
    )
    add_index_arguments(index_parser)
    return parser


def build_index_command() -> IndexCommand:
    settings = get_settings()
    return IndexCommand(
        OpenSearchBulkClient(settings),
        AwsSecretsManager(settings.secrets_region),
        default_index_configs(),
        settings=settings,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level, service=settings.app_name)

    try:
        build_index_command().run(args)
    except Exception as exc:  # noqa: BLE001
        logger.error("index_command_failed", command=args.command, error=str(exc))
        print(f"{args.command}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
