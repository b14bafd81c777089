"""Unit tests for cursor pagination over shipment jobs."""

from __future__ import annotations

import pytest

from loop_fakes import FakeLoopClient, make_page, make_shipment

from loop_integration.client import LoopApiError
from loop_integration.pager import PaginationStalledError, fetch_all


def _batch(prefix: str, n: int):
    return [make_shipment(f"{prefix}{i}") for i in range(n)]


def test_stops_at_limit() -> None:
    """Pages of four with a limit of ten stop at exactly ten records."""
    client = FakeLoopClient(
        pages=[
            make_page(_batch("a", 4), True, "c1"),
            make_page(_batch("b", 4), True, "c2"),
            make_page(_batch("c", 4), False, None),
        ]
    )

    shipments = fetch_all(client, "2024-02-01", "2024-04-30", limit=10)

    assert len(shipments) == 10
    requested = [call[3] for call in client.calls]
    cursors = [call[4] for call in client.calls]
    assert requested == [10, 6, 2]
    assert cursors == [None, "c1", "c2"]


def test_stops_after_final_page() -> None:
    client = FakeLoopClient(
        pages=[
            make_page(_batch("a", 4), True, "c1"),
            make_page(_batch("b", 3), False, "c2"),
        ]
    )

    shipments = fetch_all(client, "2024-02-01", "2024-04-30", limit=10)

    assert [s["qid"] for s in shipments] == ["a0", "a1", "a2", "a3", "b0", "b1", "b2"]
    assert client.count("get_shipment_jobs") == 2


def test_never_exceeds_limit_when_page_over_delivers() -> None:
    client = FakeLoopClient(pages=[make_page(_batch("a", 8), True, "c1")])

    shipments = fetch_all(client, "2024-02-01", "2024-04-30", limit=5)

    assert len(shipments) == 5


def test_empty_page_with_next_page_raises() -> None:
    """An empty page that still reports hasNextPage fails instead of looping."""
    client = FakeLoopClient(
        pages=[
            make_page(_batch("a", 2), True, "c1"),
            make_page([], True, "c1"),
        ]
    )

    with pytest.raises(PaginationStalledError):
        fetch_all(client, "2024-02-01", "2024-04-30", limit=10)


def test_empty_final_page_returns_accumulated() -> None:
    client = FakeLoopClient(pages=[make_page([], False, None)])

    assert fetch_all(client, "2024-02-01", "2024-04-30") == []


def test_page_failure_propagates() -> None:
    class FailingClient(FakeLoopClient):
        def get_shipment_jobs(self, *args, **kwargs):
            raise LoopApiError("Loop GET /shipment-jobs 401: unauthorized", 401)

    with pytest.raises(LoopApiError, match="401"):
        fetch_all(FailingClient(), "2024-02-01", "2024-04-30")


def test_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        fetch_all(FakeLoopClient(), "2024-02-01", "2024-04-30", limit=0)


@pytest.mark.parametrize("next_cursor", [None, "", "c1"])
def test_cursor_that_does_not_advance_raises(next_cursor) -> None:
    """hasNextPage with a missing or repeated endCursor would refetch the same page."""
    client = FakeLoopClient(
        pages=[
            make_page(_batch("a", 2), True, "c1"),
            make_page(_batch("b", 2), True, next_cursor),
            make_page(_batch("a", 2), False, None),
        ]
    )

    with pytest.raises(PaginationStalledError, match="endCursor"):
        fetch_all(client, "2024-02-01", "2024-04-30", limit=10)

    assert client.count("get_shipment_jobs") == 2


def test_first_page_without_cursor_raises() -> None:
    client = FakeLoopClient(pages=[make_page(_batch("a", 2), True, None)])

    with pytest.raises(PaginationStalledError):
        fetch_all(client, "2024-02-01", "2024-04-30", limit=10)


def test_missing_cursor_is_fine_once_limit_is_reached() -> None:
    client = FakeLoopClient(pages=[make_page(_batch("a", 3), True, None)])

    assert len(fetch_all(client, "2024-02-01", "2024-04-30", limit=3)) == 3
