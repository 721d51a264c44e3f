"""Page request normalization and page metadata."""
import math
import sys
from dataclasses import dataclass
from typing import Generic, TypeVar

from xtrack.schemas import PaginationMeta

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
# Keeps OFFSET within a signed 64-bit integer.
MAX_PAGE = sys.maxsize // MAX_PAGE_SIZE

T = TypeVar("T")


def _to_int(value: int | str | None) -> int | None:
    if value is None or isinstance(value, int):
        return value
    try:
        return int(value.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class PageRequest:
    """A normalized (page, page_size) pair.

    Out-of-range or unparsable input falls back to the defaults instead of
    failing: page < 1 or absurdly large -> 1; page_size outside [1, 100] -> 20.
    """

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def of(cls, page: int | str | None = None, page_size: int | str | None = None) -> "PageRequest":
        parsed_page = _to_int(page)
        parsed_size = _to_int(page_size)
        if parsed_page is None or not 1 <= parsed_page <= MAX_PAGE:
            parsed_page = DEFAULT_PAGE
        if parsed_size is None or parsed_size < 1 or parsed_size > MAX_PAGE_SIZE:
            parsed_size = DEFAULT_PAGE_SIZE
        return cls(page=parsed_page, page_size=parsed_size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def meta(self, total_items: int) -> PaginationMeta:
        return PaginationMeta(
            page=self.page,
            page_size=self.page_size,
            total_items=total_items,
            total_pages=math.ceil(total_items / self.page_size),
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results with its metadata."""

    items: list[T]
    pagination: PaginationMeta
