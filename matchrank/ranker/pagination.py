"""Opaque offset cursors for paging through a ranked sequence."""

import base64
import binascii
from dataclasses import dataclass
from typing import Generic, TypeVar

from matchrank.errors import PaginationError


T = TypeVar("T")

DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100

_CURSOR_PREFIX = "offset:"


def encode_cursor(offset: int) -> str:
    """Encode an offset as an opaque URL-safe cursor."""
    if offset < 0:
        msg = f"offset must be >= 0, got {offset}"
        raise ValueError(msg)
    raw = f"{_CURSOR_PREFIX}{offset}".encode("ascii")
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_cursor(cursor: str | None) -> int:
    """Decode a cursor back to an offset; None means the first page.

    Raises:
        PaginationError: If the cursor is malformed.
    """
    if cursor is None:
        return 0
    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii")).decode("ascii")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise PaginationError(f"Malformed cursor: {cursor!r}") from e

    if not raw.startswith(_CURSOR_PREFIX):
        raise PaginationError(f"Malformed cursor: {cursor!r}")
    value = raw[len(_CURSOR_PREFIX) :]
    if not value.isdigit():
        raise PaginationError(f"Malformed cursor: {cursor!r}")
    return int(value)


def validate_page_size(page_size: int, max_page_size: int = MAX_PAGE_SIZE) -> int:
    """Check a requested page size.

    Raises:
        PaginationError: If the size is outside [1, max_page_size].
    """
    if isinstance(page_size, bool) or not isinstance(page_size, int):
        raise PaginationError(f"page_size must be an integer, got {page_size!r}")
    if page_size < 1 or page_size > max_page_size:
        raise PaginationError(
            f"page_size must be between 1 and {max_page_size}, got {page_size}"
        )
    return page_size


@dataclass(frozen=True)
class Page(Generic[T]):
    """A slice of a sequence plus the cursor for the next slice."""

    items: list[T]
    offset: int
    next_cursor: str | None
    has_more: bool
    total: int


def paginate(items: list[T], page_size: int, cursor: str | None = None) -> Page[T]:
    """Slice one page out of a fully ordered sequence.

    Args:
        items: The whole ordered sequence.
        page_size: Items per page.
        cursor: Cursor from a previous page, or None for the first page.

    Returns:
        The page; an offset past the end yields an empty final page.

    Raises:
        PaginationError: If the cursor or page size is invalid.
    """
    validate_page_size(page_size)
    offset = decode_cursor(cursor)
    total = len(items)
    end = offset + page_size
    has_more = end < total
    return Page(
        items=items[offset:end],
        offset=offset,
        next_cursor=encode_cursor(end) if has_more else None,
        has_more=has_more,
        total=total,
    )
