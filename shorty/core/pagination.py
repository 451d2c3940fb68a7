"""
Range Pagination Helpers

Collections are paged with a range specifier: a JSON array "[from,to]"
sent either as the `range` query parameter or as the `Range` header.
The page length is `to - from`, so "[0,10]" returns at most ten rows.

The response carries a Content-Range header:
- "<resource> <first>-<last>/<total>" when rows were returned
- "<resource> */<total>" when the page is empty
"""

import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Sequence

from shorty.core.exceptions import InvalidRequestError

# Ids and offsets are stored as signed 64-bit integers
MAX_INT64 = 2**63 - 1


@dataclass(frozen=True)
class RangeSpec:
    """A parsed [from,to] window."""

    start: int
    end: int

    @property
    def offset(self) -> int:
        return self.start

    @property
    def limit(self) -> int:
        return self.end - self.start

    def is_empty_for(self, total: int) -> bool:
        return self.limit == 0 or self.start >= total


@dataclass
class Page:
    """One window of a collection plus its Content-Range header value."""

    items: Sequence[Any] = field(default_factory=list)
    content_range: str = ""


def parse_range(raw: Optional[str]) -> Optional[RangeSpec]:
    """
    Parse a range specifier.

    Returns:
        None when no range was given (missing or blank), otherwise a RangeSpec

    Raises:
        InvalidRequestError: If the value is not a [from,to] pair of
            non-negative 64-bit integers with to >= from
    """
    if raw is None or not raw.strip():
        return None

    try:
        value = json.loads(raw)
    except ValueError:
        raise InvalidRequestError("invalid range")

    if not isinstance(value, list) or len(value) != 2:
        raise InvalidRequestError("invalid range")

    # bool is an int subclass; "[true,false]" is not a range
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in value):
        raise InvalidRequestError("invalid range")

    start, end = value
    if start < 0 or end < start or end > MAX_INT64:
        raise InvalidRequestError("invalid range")

    return RangeSpec(start=start, end=end)


def content_range(resource: str, start: int, count: int, total: int) -> str:
    """Build the Content-Range header for `count` rows starting at `start`."""
    if count <= 0:
        return f"{resource} */{total}"
    return f"{resource} {start}-{start + count - 1}/{total}"


async def paginate(
    resource: str,
    range_spec: Optional[RangeSpec],
    count: Callable[[], Awaitable[int]],
    fetch_all: Callable[[], Awaitable[Sequence[Any]]],
    fetch_range: Callable[[int, int], Awaitable[Sequence[Any]]],
) -> Page:
    """
    Load one page of a collection.

    Without a range every row is returned. With a range, windows that are
    empty or start past the end skip the query entirely.

    Args:
        resource: Name used in the Content-Range header
        range_spec: Parsed range, or None for the whole collection
        count: Returns the collection size
        fetch_all: Returns every row ordered by id
        fetch_range: Returns `limit` rows from `offset`, called as (offset, limit)
    """
    total = await count()

    if range_spec is None:
        items = await fetch_all()
        return Page(items=items, content_range=content_range(resource, 0, len(items), total))

    if range_spec.is_empty_for(total):
        return Page(items=[], content_range=content_range(resource, range_spec.start, 0, total))

    items = await fetch_range(range_spec.offset, range_spec.limit)
    return Page(
        items=items,
        content_range=content_range(resource, range_spec.start, len(items), total),
    )
