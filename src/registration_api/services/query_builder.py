"""Filter query construction for registration listings.

Two policies share the same predicate builder:

- lenient: case-insensitive substring search (configurable), unknown
  session values are ignored, an empty filter set matches everything
- strict: case-sensitive exact search, unknown session values and empty
  filter sets are rejected

Location is always an exact, case-sensitive match. Dates are calendar days
in server-local time.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from datetime import date, datetime, time, timezone
from typing import Optional

from sqlalchemy import or_
from sqlmodel import col

from registration_api.errors import InvalidArgumentError
from registration_api.models.registration import Registration, SessionMode

LIKE_ESCAPE = "\\"

END_OF_DAY = time(23, 59, 59, 999000)


class SearchMode(str, enum.Enum):
    CONTAINS = "contains"
    EXACT = "exact"

    @classmethod
    def parse(cls, value: str) -> "SearchMode":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid search mode '{value}'. Use one of: "
                + ", ".join(m.value for m in cls)
            )


@dataclass
class FilterRequest:
    """Optional filters supplied by a client.

    Values are stripped of surrounding whitespace; blank values count as absent.
    """

    search: Optional[str] = None
    session: Optional[str] = None
    date: Optional[str] = None
    location: Optional[str] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                setattr(self, f.name, value.strip() or None)

    def is_empty(self) -> bool:
        return not self.applied_filters()

    def applied_filters(self) -> dict[str, str]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters so the value matches literally"""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def parse_filter_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidArgumentError(f"Invalid date '{value}'. Use YYYY-MM-DD")


def local_day_bounds(day: date) -> tuple[datetime, datetime]:
    """First and last millisecond of ``day`` in server-local time, as UTC.

    Raises ValueError or OverflowError when the local day does not map onto a
    representable UTC range (e.g. 0001-01-01 east of UTC).
    """
    start = datetime.combine(day, time.min).astimezone()
    end = datetime.combine(day, END_OF_DAY).astimezone()
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def filter_day_bounds(value: str) -> tuple[datetime, datetime]:
    """Parse a filter date and return its UTC window"""
    day = parse_filter_date(value)
    try:
        return local_day_bounds(day)
    except (ValueError, OverflowError):
        raise InvalidArgumentError(
            f"Invalid date '{value}'. Date is out of the supported range"
        )


def _search_condition(search: str, mode: SearchMode):
    columns = (
        col(Registration.first_name),
        col(Registration.last_name),
        col(Registration.email),
    )
    if mode == SearchMode.EXACT:
        return or_(*(column == search for column in columns))

    pattern = f"%{escape_like(search)}%"
    return or_(*(column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns))


def build_filter_conditions(
    filters: FilterRequest,
    search_mode: SearchMode = SearchMode.CONTAINS,
    reject_unknown_session: bool = False,
) -> list:
    """
    Translate a filter request into SQLAlchemy predicates.

    Args:
        filters: Client supplied filters
        search_mode: How ``search`` is matched against name and email
        reject_unknown_session: Raise instead of ignoring a session value
            outside the allowed set

    Returns:
        List of predicates to AND together (empty when no filters apply)

    Raises:
        InvalidArgumentError: On a malformed date, or an unknown session
            when ``reject_unknown_session`` is set
    """
    conditions = []

    if filters.search is not None:
        conditions.append(_search_condition(filters.search, search_mode))

    if filters.session is not None:
        if filters.session in SessionMode.values():
            conditions.append(
                col(Registration.selected_session) == SessionMode(filters.session)
            )
        elif reject_unknown_session:
            raise InvalidArgumentError(
                f"Invalid session. Use one of: {', '.join(SessionMode.values())}"
            )

    if filters.date is not None:
        start, end = filter_day_bounds(filters.date)
        conditions.append(col(Registration.created_at) >= start)
        conditions.append(col(Registration.created_at) <= end)

    if filters.location is not None:
        conditions.append(col(Registration.location) == filters.location)

    return conditions
