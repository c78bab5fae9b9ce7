"""Tests for assembling complete pages from partial response windows."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from presentation_client.models.paging import PagedResult, PagingWindow
from presentation_client.paging import assemble_paged_response

ITEMS = ["item1", "item2", "item3", "item4", "item5"]


def capped_getter(items: list[str], cap: int) -> AsyncMock:
    """Fake server returning at most `cap` items per call."""

    async def get_window(window: PagingWindow) -> PagedResult[str]:
        end = len(items) if window.size == 0 else window.start + window.size
        end = min(end, window.start + cap)
        return PagedResult(total=len(items), items=items[window.start : end])

    return AsyncMock(side_effect=get_window)


def calls_of(getter: AsyncMock) -> list[tuple[int, int]]:
    return [(c.args[0].start, c.args[0].size) for c in getter.call_args_list]


class TestFirstCall:
    """The first call always uses the caller's window."""

    @pytest.mark.parametrize("window", [None, PagingWindow()])
    async def test_missing_and_empty_window_probe_from_zero(self, window: PagingWindow | None) -> None:
        """None and an empty window are equivalent: one call with {0, 0}."""
        getter = AsyncMock(return_value=PagedResult(total=0, items=[]))

        result = await assemble_paged_response(window, getter)

        assert calls_of(getter) == [(0, 0)]
        assert result.total == 0
        assert result.items == []

    async def test_complete_first_window_needs_one_call(self) -> None:
        getter = capped_getter(ITEMS, cap=100)

        result = await assemble_paged_response(PagingWindow(start=0, size=2), getter)

        assert calls_of(getter) == [(0, 2)]
        assert result.items == ["item1", "item2"]
        assert result.total == 5


class TestPartialWindows:
    """Windows smaller than requested are stitched together."""

    async def test_bounded_window_with_one_item_per_call(self) -> None:
        """{start: 1, size: 3} against a 1-item cap takes three sequential calls."""
        getter = capped_getter(ITEMS, cap=1)

        result = await assemble_paged_response(PagingWindow(start=1, size=3), getter)

        assert calls_of(getter) == [(1, 3), (2, 2), (3, 1)]
        assert result.total == 5
        assert result.items == ["item2", "item3", "item4"]

    async def test_unbounded_window_keeps_probing_with_size_zero(self) -> None:
        """{start: 1} advances start by the items received until total is reached."""
        getter = capped_getter(ITEMS, cap=2)

        result = await assemble_paged_response(PagingWindow(start=1), getter)

        assert calls_of(getter) == [(1, 0), (3, 0)]
        assert result.items == ["item2", "item3", "item4", "item5"]

    async def test_bounded_window_past_the_end_stops_at_total(self) -> None:
        getter = capped_getter(ITEMS, cap=1)

        result = await assemble_paged_response(PagingWindow(start=3, size=10), getter)

        assert calls_of(getter) == [(3, 10), (4, 9)]
        assert result.items == ["item4", "item5"]

    @pytest.mark.parametrize("cap", [1, 2, 3, 5])
    async def test_result_does_not_depend_on_cap(self, cap: int) -> None:
        """Stitched result is the same however many calls were needed."""
        getter = capped_getter(ITEMS, cap=cap)

        result = await assemble_paged_response(PagingWindow(start=1, size=3), getter)

        assert result.items == ["item2", "item3", "item4"]
        assert len(result.items) == min(3, 5 - 1)

    async def test_total_of_first_call_is_kept(self) -> None:
        getter = AsyncMock(
            side_effect=[
                PagedResult(total=3, items=["a"]),
                PagedResult(total=99, items=["b", "c"]),
            ]
        )

        result = await assemble_paged_response(PagingWindow(), getter)

        assert result.total == 3
        assert result.items == ["a", "b", "c"]


class TestStalledBackend:
    """An empty window ends assembly."""

    async def test_stops_on_empty_window_and_logs(self) -> None:
        getter = AsyncMock(
            side_effect=[
                PagedResult(total=5, items=["a"]),
                PagedResult(total=5, items=[]),
            ]
        )

        with patch("presentation_client.paging._logger") as mock_logger:
            result = await assemble_paged_response(PagingWindow(start=0, size=4), getter)

        assert getter.await_count == 2
        assert result.items == ["a"]
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0]["event"] == "paged_response_stalled"

    async def test_empty_collection_does_not_log(self) -> None:
        getter = AsyncMock(return_value=PagedResult(total=0, items=[]))

        with patch("presentation_client.paging._logger") as mock_logger:
            await assemble_paged_response(None, getter)

        mock_logger.warning.assert_not_called()

    async def test_getter_errors_propagate(self) -> None:
        getter = AsyncMock(side_effect=[PagedResult(total=5, items=["a"]), RuntimeError("boom")])

        with pytest.raises(RuntimeError, match="boom"):
            await assemble_paged_response(PagingWindow(start=0, size=3), getter)
