from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol

import structlog

from search_indexer.services.errors import InputValidationError
from search_indexer.services.results import IndexResult, report_result

logger = structlog.get_logger(__name__)

_RFC3339 = re.compile(
    r"^(?P<y>\d{4})-(?P<m>\d{2})-(?P<d>\d{2})"
    r"T(?P<hh>\d{2}):(?P<mm>\d{2}):(?P<ss>\d{2})(?:\.(?P<frac>\d+))?"
    r"(?P<tz>Z|(?P<sign>[+-])(?P<tzh>\d{2}):(?P<tzm>\d{2}))$"
)


class EntityIndexer(Protocol):
    def from_date(self, since: datetime, batch_size: int) -> IndexResult: ...

    def all(self, batch_size: int) -> IndexResult: ...

    def by_id(self, from_id: int, to_id: int, batch_size: int) -> IndexResult: ...


@dataclass(frozen=True, slots=True)
class FromDateRequest:
    since: datetime
    batch_size: int


@dataclass(frozen=True, slots=True)
class AllRequest:
    batch_size: int


@dataclass(frozen=True, slots=True)
class ByIDRequest:
    from_id: int
    to_id: int
    batch_size: int


BatchRequest = FromDateRequest | AllRequest | ByIDRequest


def _parse_offset(match: re.Match[str]) -> timezone:
    if match.group("tz") == "Z":
        return timezone.utc
    minutes = int(match.group("tzm"))
    if minutes > 59:
        raise ValueError(f"offset minute out of range: {minutes}")
    offset = timedelta(hours=int(match.group("tzh")), minutes=minutes)
    return timezone(-offset if match.group("sign") == "-" else offset)


def parse_from_date(value: str | None) -> datetime | None:
    if not value:
        return None

    match = _RFC3339.match(value)
    if not match:
        raise InputValidationError("-from-date", f"cannot parse {value!r} as RFC3339 date-time")

    micros = int((match.group("frac") or "0")[:6].ljust(6, "0"))
    try:
        tz = _parse_offset(match)
        return datetime(
            int(match.group("y")),
            int(match.group("m")),
            int(match.group("d")),
            int(match.group("hh")),
            int(match.group("mm")),
            int(match.group("ss")),
            micros,
            tzinfo=tz,
        )
    except ValueError as exc:
        raise InputValidationError("-from-date", str(exc)) from exc


def build_batch_request(
    *,
    from_date: str | None,
    all_records: bool,
    from_id: int,
    to_id: int,
    batch_size: int,
) -> BatchRequest:
    since = parse_from_date(from_date)
    if since is not None:
        return FromDateRequest(since=since, batch_size=batch_size)
    if all_records:
        return AllRequest(batch_size=batch_size)
    return ByIDRequest(from_id=from_id, to_id=to_id, batch_size=batch_size)


def _run_one(entity_type: str, indexer: EntityIndexer, request: BatchRequest) -> IndexResult:
    if isinstance(request, FromDateRequest):
        logger.info(
            "indexing_by_date",
            entity_type=entity_type,
            since=request.since.isoformat(),
            batch_size=request.batch_size,
        )
        return indexer.from_date(request.since, request.batch_size)
    if isinstance(request, AllRequest):
        logger.info("indexing_all", entity_type=entity_type, batch_size=request.batch_size)
        return indexer.all(request.batch_size)
    logger.info(
        "indexing_by_id",
        entity_type=entity_type,
        from_id=request.from_id,
        to_id=request.to_id,
        batch_size=request.batch_size,
    )
    return indexer.by_id(request.from_id, request.to_id, request.batch_size)


def run_batch_strategy(indexers: Mapping[str, EntityIndexer], request: BatchRequest) -> dict[str, IndexResult]:
    """Run one strategy over every selected indexer, in mapping order.

    The first exception stops the run; indexers after it are not invoked.
    """
    results: dict[str, IndexResult] = {}
    for entity_type, indexer in indexers.items():
        result = _run_one(entity_type, indexer, request)
        report_result(entity_type, result)
        results[entity_type] = result
    return results
