"""Pagination parameter parsing and page arithmetic"""

import math
from dataclasses import dataclass, field
from typing import Any, Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 25
MAX_LIMIT = 1000

# Largest OFFSET the record store drivers accept (signed 64-bit)
MAX_OFFSET = 2**63 - 1


def parse_positive_int(value: Any, default: int) -> int:
    """Parse ``value`` as a positive integer, falling back to ``default``.

    Absent, non-numeric, zero and negative inputs all yield the default.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def parse_page_params(page: Any, limit: Any) -> tuple[int, int]:
    """Parse raw ``page`` and ``limit`` into values safe to hand to the store.

    ``limit`` is capped at MAX_LIMIT. A page whose offset would not fit in a
    signed 64-bit integer falls back to the first page.
    """
    limit = min(parse_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT)
    page = parse_positive_int(page, DEFAULT_PAGE)
    if page_offset(page, limit) > MAX_OFFSET:
        page = DEFAULT_PAGE
    return page, limit


def total_pages(total_records: int, limit: int) -> int:
    return math.ceil(total_records / limit)


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


@dataclass
class RegistrationPage:
    current_page: int
    limit: int
    total_records: int
    registrations: list = field(default_factory=list)
    total_pages: Optional[int] = None

    def __post_init__(self):
        if self.total_pages is None:
            self.total_pages = total_pages(self.total_records, self.limit)
