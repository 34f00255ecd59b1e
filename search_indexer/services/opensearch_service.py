from __future__ import annotations

import json
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx
import structlog

from search_indexer.core.config import Settings, get_settings
from search_indexer.services.errors import OpenSearchError
from search_indexer.services.retry_policy import bulk_retry_delay, has_attempts_left, is_retryable_status

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class BulkResult:
    successful: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


class BulkClient(Protocol):
    def index_documents(self, index_name: str, documents: Sequence[dict[str, Any]]) -> BulkResult: ...


def _opensearch_error(response: httpx.Response) -> OpenSearchError:
    detail = ""
    try:
        payload = response.json()
        error = payload.get("error")
        if isinstance(error, dict):
            detail = error.get("reason") or error.get("type") or ""
        elif error:
            detail = str(error)
    except Exception:  # noqa: BLE001
        detail = response.text
    msg = f"opensearch bulk request failed ({response.status_code})"
    if detail:
        msg = f"{msg}: {detail}"
    return OpenSearchError(msg, status_code=response.status_code)


def _decode_bulk_response(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as exc:
        raise OpenSearchError(
            f"opensearch bulk response is not JSON ({response.status_code})", status_code=response.status_code
        ) from exc
    if not isinstance(body, dict):
        raise OpenSearchError(
            f"opensearch bulk response has unexpected shape ({response.status_code})",
            status_code=response.status_code,
        )
    return body


def build_bulk_body(index_name: str, documents: Sequence[dict[str, Any]]) -> str:
    lines: list[str] = []
    for doc in documents:
        lines.append(json.dumps({"index": {"_index": index_name, "_id": str(doc["id"])}}))
        lines.append(json.dumps(doc, ensure_ascii=False, default=str))
    return "\n".join(lines) + "\n"


def parse_bulk_response(body: dict[str, Any]) -> BulkResult:
    result = BulkResult()
    for item in body.get("items", []):
        action = next(iter(item.values()), {})
        error = action.get("error")
        status = int(action.get("status") or 0)
        if error is None and status < 300:
            result.successful += 1
            continue
        result.failed += 1
        if isinstance(error, dict):
            reason = f"{error.get('type', 'error')}: {error.get('reason', '')}".rstrip(": ")
        else:
            reason = str(error or f"status {status}")
        result.errors.append(f"{action.get('_id')}: {reason}")
    return result


class OpenSearchBulkClient:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport
        self._sleep = sleep

    def _post_bulk(self, body: str) -> httpx.Response:
        cfg = self._settings
        with httpx.Client(
            base_url=cfg.opensearch_url.rstrip("/"),
            headers={"Content-Type": "application/x-ndjson"},
            timeout=cfg.opensearch_timeout_seconds,
            transport=self._transport,
        ) as client:
            return client.post("/_bulk", content=body.encode("utf-8"))

    def index_documents(self, index_name: str, documents: Sequence[dict[str, Any]]) -> BulkResult:
        if not documents:
            return BulkResult()

        cfg = self._settings
        body = build_bulk_body(index_name, documents)
        attempt = 0
        while True:
            attempt += 1
            try:
                response = self._post_bulk(body)
            except httpx.TransportError as exc:
                if not has_attempts_left(attempt, cfg.opensearch_max_attempts):
                    raise OpenSearchError(f"opensearch bulk request failed: {exc}") from exc
                reason = str(exc)
            else:
                if response.status_code < 400:
                    return parse_bulk_response(_decode_bulk_response(response))
                error = _opensearch_error(response)
                if not is_retryable_status(response.status_code) or not has_attempts_left(
                    attempt, cfg.opensearch_max_attempts
                ):
                    raise error
                reason = str(error)

            delay = bulk_retry_delay(
                attempt, cfg.opensearch_retry_base_seconds, cfg.opensearch_retry_max_seconds
            )
            logger.warning(
                "bulk_request_retry",
                index=index_name,
                attempt=attempt,
                delay_seconds=delay,
                error=reason,
            )
            self._sleep(delay)
