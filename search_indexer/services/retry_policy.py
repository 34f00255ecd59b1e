RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


def has_attempts_left(attempt: int, max_attempts: int) -> bool:
    """`attempt` is the 1-based number of the request that just failed."""
    return 0 < attempt < max_attempts


def is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES


def bulk_retry_delay(attempt: int, base_seconds: float, max_seconds: float) -> float:
    # doubles per failed attempt, capped at max_seconds
    base = max(0.0, float(base_seconds))
    delay = base * 2.0 ** (max(1, attempt) - 1)
    return min(delay, max(base, float(max_seconds)))
