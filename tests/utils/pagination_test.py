from __future__ import annotations

import pytest

from utils.pagination import CursorPage, fetch_cursor_page, iter_cursor_pages


class _StubCursorApi:
    """Serves a fixed chain of pages linked by cursors c1, c2, ..."""

    def __init__(self, page_count: int) -> None:
        self.pages = [
            CursorPage(
                data=[{"page": index + 1}],
                next_cursor=f"c{index + 1}" if index + 1 < page_count else None,
            )
            for index in range(page_count)
        ]
        self.cursors: list[str | None] = []

    def fetch(self, cursor: str | None) -> CursorPage:
        self.cursors.append(cursor)
        if cursor is None:
            return self.pages[0]
        return self.pages[int(cursor[1:])]


def test_fetch_first_page_issues_single_call_without_cursor() -> None:
    api = _StubCursorApi(page_count=3)

    page = fetch_cursor_page(api.fetch, 1)

    assert page.data == [{"page": 1}]
    assert api.cursors == [None]


def test_fetch_page_n_follows_cursor_chain() -> None:
    api = _StubCursorApi(page_count=5)

    page = fetch_cursor_page(api.fetch, 3)

    assert page.data == [{"page": 3}]
    assert api.cursors == [None, "c1", "c2"]


def test_fetch_past_last_page_returns_last_available_page() -> None:
    api = _StubCursorApi(page_count=2)

    page = fetch_cursor_page(api.fetch, 10)

    assert page.data == [{"page": 2}]
    assert page.next_cursor is None
    assert api.cursors == [None, "c1"]


def test_empty_string_cursor_is_treated_as_exhausted() -> None:
    calls: list[str | None] = []

    def fetch(cursor: str | None) -> CursorPage:
        calls.append(cursor)
        return CursorPage(data=[{"id": 1}], next_cursor="")

    page = fetch_cursor_page(fetch, 4)

    assert page.data == [{"id": 1}]
    assert calls == [None]


@pytest.mark.parametrize("page", [0, -1])
def test_fetch_rejects_non_positive_page(page: int) -> None:
    api = _StubCursorApi(page_count=1)

    with pytest.raises(ValueError):
        fetch_cursor_page(api.fetch, page)
    assert api.cursors == []


def test_iter_cursor_pages_yields_every_page_once() -> None:
    api = _StubCursorApi(page_count=3)

    pages = list(iter_cursor_pages(api.fetch))

    assert [page.data[0]["page"] for page in pages] == [1, 2, 3]
    assert api.cursors == [None, "c1", "c2"]
