from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

import structlog

from search_indexer.services.index_config import FIRM_ALIAS, PERSON_ALIAS

logger = structlog.get_logger(__name__)

KNOWN_ENTITY_TYPES: tuple[str, ...] = (FIRM_ALIAS, PERSON_ALIAS)

T = TypeVar("T")


def find_deployed_index(alias: str, deployed_names: Sequence[str]) -> str | None:
    prefix = f"{alias}_"
    for name in deployed_names:
        if name.startswith(prefix):
            return name
    return None


def select_indexers(
    requested_types: Iterable[str],
    deployed_names: Sequence[str],
    factory: Callable[[str, str], T],
) -> dict[str, T]:
    """Map each requested entity type to an indexer for its live physical index.

    No requested types means every known type. A type whose alias has no
    deployed index is left out of the mapping.
    """
    requested = set(requested_types)
    unknown = requested - set(KNOWN_ENTITY_TYPES)
    if unknown:
        raise ValueError(f"unknown entity types: {', '.join(sorted(unknown))}")

    selected = [t for t in KNOWN_ENTITY_TYPES if not requested or t in requested]
    indexers: dict[str, T] = {}
    for entity_type in selected:
        name = find_deployed_index(entity_type, deployed_names)
        if name is None:
            logger.debug("index_not_deployed", entity_type=entity_type)
            continue
        indexers[entity_type] = factory(entity_type, name)
    return indexers
