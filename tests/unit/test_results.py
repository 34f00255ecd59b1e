from structlog.testing import capture_logs

from search_indexer.services.opensearch_service import BulkResult
from search_indexer.services.results import IndexResult, report_result


def test_report_result_logs_summary_then_errors_in_order():
    result = IndexResult(successful=7, failed=2, errors=["e1", "e2"])
    with capture_logs() as logs:
        report_result("firm", result)

    assert len(logs) == 3
    assert logs[0]["event"] == "indexing_done"
    assert logs[0]["successful"] == 7
    assert logs[0]["failed"] == 2
    assert [entry["error"] for entry in logs[1:]] == ["e1", "e2"]
    assert all(entry["log_level"] == "error" for entry in logs[1:])


def test_report_result_without_errors_logs_summary_only():
    with capture_logs() as logs:
        report_result("person", IndexResult(successful=3))
    assert [entry["event"] for entry in logs] == ["indexing_done"]


def test_add_batch_accumulates_counts_and_errors():
    result = IndexResult()
    result.add_batch(BulkResult(successful=2, failed=1, errors=["1: boom"]))
    result.add_batch(BulkResult(successful=3, failed=1, errors=["9: bang"]))
    assert result == IndexResult(successful=5, failed=2, errors=["1: boom", "9: bang"])
