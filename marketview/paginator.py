"""
PAGINATOR

Fixed-size page slices over a ranked sequence.

total_pages is 0 for an empty sequence (not "1 empty page").
Requested page numbers are clamped to [1, max(1, total_pages)], never rejected.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .models import MarketEntry

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class Page:
    """One page of results plus what the pager needs to render."""
    items: Tuple[MarketEntry, ...]
    page_number: int
    page_size: int
    total_pages: int
    total_results: int

    @property
    def first_index(self) -> int:
        """1-based index of the first item shown, 0 when empty."""
        if not self.total_results:
            return 0
        return (self.page_number - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        return min(self.page_number * self.page_size, self.total_results)

    @property
    def display_range(self) -> Tuple[int, int]:
        return (self.first_index, self.last_index)

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    def summary(self) -> str:
        return f"Showing {self.first_index} - {self.last_index} of {self.total_results} tokens"


class Paginator:
    """Slices sequences into pages of page_size items."""

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.page_size = page_size

    def total_pages(self, total_results: int) -> int:
        return math.ceil(total_results / self.page_size)

    def clamp(self, page_number: int, total_results: int) -> int:
        return clamp_page(page_number, self.total_pages(total_results))

    def page(self, sequence: Sequence[MarketEntry], page_number: int) -> Page:
        total_results = len(sequence)
        total_pages = self.total_pages(total_results)
        page_number = clamp_page(page_number, total_pages)

        start = (page_number - 1) * self.page_size
        end = min(start + self.page_size, total_results)

        return Page(
            items=tuple(sequence[start:end]),
            page_number=page_number,
            page_size=self.page_size,
            total_pages=total_pages,
            total_results=total_results,
        )


def clamp_page(page_number: int, total_pages: int) -> int:
    try:
        page_number = int(page_number)
    except OverflowError:
        # +inf goes to the last page, -inf to the first
        page_number = total_pages if page_number > 0 else 1
    except (TypeError, ValueError):
        page_number = 1
    return max(1, min(page_number, max(1, total_pages)))


def page_window(current: int, total_pages: int) -> Tuple[Optional[int], ...]:
    """
    Page buttons to render: first, last and current +/- 1.

    None marks an ellipsis, placed at slot 2 when current > 3 and at slot
    total_pages - 1 when current < total_pages - 2.
        page_window(5, 10) -> (1, None, 4, 5, 6, None, 10)
    """
    if total_pages < 1:
        return ()
    current = clamp_page(current, total_pages)

    window: List[Optional[int]] = []
    for number in range(1, total_pages + 1):
        if number == 1 or number == total_pages or current - 1 <= number <= current + 1:
            window.append(number)
        elif (number == 2 and current > 3) or (number == total_pages - 1 and current < total_pages - 2):
            window.append(None)
    return tuple(window)
