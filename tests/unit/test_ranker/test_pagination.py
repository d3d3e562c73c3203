"""Unit tests for cursors and paging."""

import pytest

from matchrank.errors import PaginationError
from matchrank.ranker import decode_cursor, encode_cursor
from matchrank.ranker.pagination import paginate, validate_page_size


class TestCursor:
    """Tests for opaque cursor encoding."""

    def test_none_is_first_page(self) -> None:
        assert decode_cursor(None) == 0

    def test_round_trip(self) -> None:
        assert decode_cursor(encode_cursor(40)) == 40

    def test_cursor_is_opaque(self) -> None:
        assert "40" not in encode_cursor(40)

    @pytest.mark.parametrize("cursor", ["!!!", "", "aGVsbG8", "b2Zmc2V0Oi0x", "é"])
    def test_malformed(self, cursor: str) -> None:
        """Garbage, wrong prefix ('hello'), and negative offsets are rejected."""
        with pytest.raises(PaginationError):
            decode_cursor(cursor)


class TestPageSize:
    """Tests for page size validation."""

    @pytest.mark.parametrize("size", [0, -1, 101, True, 2.5])
    def test_invalid(self, size: object) -> None:
        with pytest.raises(PaginationError):
            validate_page_size(size)  # type: ignore[arg-type]

    def test_valid(self) -> None:
        assert validate_page_size(1) == 1
        assert validate_page_size(100) == 100


class TestPaginate:
    """Tests for slicing."""

    def test_pages_concatenate_to_whole(self) -> None:
        items = list(range(7))
        pages = []
        cursor = None
        while True:
            page = paginate(items, 3, cursor)
            pages.append(page)
            if not page.has_more:
                break
            cursor = page.next_cursor

        assert [p.items for p in pages] == [[0, 1, 2], [3, 4, 5], [6]]
        assert [p.has_more for p in pages] == [True, True, False]
        assert pages[-1].next_cursor is None
        assert all(p.total == 7 for p in pages)

    def test_exact_multiple(self) -> None:
        page = paginate(list(range(6)), 3, encode_cursor(3))
        assert page.items == [3, 4, 5]
        assert page.has_more is False

    def test_offset_past_end(self) -> None:
        page = paginate([1, 2], 5, encode_cursor(10))
        assert page.items == []
        assert page.has_more is False
