"""Tests for range parsing, Content-Range formatting and page loading."""

import pytest

from shorty.core.exceptions import InvalidRequestError
from shorty.core.pagination import RangeSpec, content_range, paginate, parse_range


class TestParseRange:
    """Test the [from,to] range specifier parser."""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_range_means_everything(self, raw):
        assert parse_range(raw) is None

    def test_valid_range(self):
        spec = parse_range("[5,15]")
        assert spec == RangeSpec(start=5, end=15)
        assert spec.offset == 5
        assert spec.limit == 10

    def test_whitespace_is_allowed(self):
        assert parse_range(" [ 0 , 10 ] ") == RangeSpec(start=0, end=10)

    @pytest.mark.parametrize(
        "raw",
        [
            "0-10",
            "[0]",
            "[0,1,2]",
            "{\"from\": 0}",
            "[-1,5]",
            "[0,-5]",
            "[10,5]",
            "[0.5,3]",
            "[\"0\",\"3\"]",
            "[true,false]",
            "[0,10",
        ],
    )
    def test_invalid_ranges_are_rejected(self, raw):
        with pytest.raises(InvalidRequestError) as exc_info:
            parse_range(raw)
        assert exc_info.value.status_code == 400
        assert exc_info.value.to_payload() == {"error": "invalid range"}

    def test_empty_window(self):
        spec = parse_range("[3,3]")
        assert spec.limit == 0
        assert spec.is_empty_for(total=10)

    def test_window_past_the_end(self):
        spec = parse_range("[10,20]")
        assert spec.is_empty_for(total=10)
        assert not spec.is_empty_for(total=11)

    def test_largest_64_bit_bound_is_accepted(self):
        spec = parse_range(f"[0,{2**63 - 1}]")
        assert spec.end == 2**63 - 1

    @pytest.mark.parametrize("raw", [f"[0,{2**63}]", "[0,99999999999999999999]", f"[{2**64},{2**64}]"])
    def test_bounds_beyond_64_bits_are_rejected(self, raw):
        with pytest.raises(InvalidRequestError) as exc_info:
            parse_range(raw)
        assert exc_info.value.to_payload() == {"error": "invalid range"}


class TestContentRange:
    """Test Content-Range header formatting."""

    def test_non_empty_page(self):
        assert content_range("links", 0, 10, 12) == "links 0-9/12"
        assert content_range("links", 10, 2, 12) == "links 10-11/12"

    def test_single_row(self):
        assert content_range("link_visits", 0, 1, 1) == "link_visits 0-0/1"

    def test_empty_page(self):
        assert content_range("links", 0, 0, 0) == "links */0"
        assert content_range("links", 20, 0, 12) == "links */12"


class _FakeCollection:
    def __init__(self, size: int):
        self.rows = list(range(size))
        self.calls = []

    async def count(self):
        return len(self.rows)

    async def fetch_all(self):
        self.calls.append("all")
        return list(self.rows)

    async def fetch_range(self, offset, limit):
        self.calls.append(("range", offset, limit))
        return self.rows[offset:offset + limit]


class TestPaginate:
    """Test page loading against an in-memory collection."""

    async def _page(self, collection, range_spec):
        return await paginate(
            "items",
            range_spec,
            count=collection.count,
            fetch_all=collection.fetch_all,
            fetch_range=collection.fetch_range,
        )

    @pytest.mark.asyncio
    async def test_without_range_returns_everything(self):
        collection = _FakeCollection(3)
        page = await self._page(collection, None)
        assert list(page.items) == [0, 1, 2]
        assert page.content_range == "items 0-2/3"

    @pytest.mark.asyncio
    async def test_without_range_on_empty_collection(self):
        page = await self._page(_FakeCollection(0), None)
        assert list(page.items) == []
        assert page.content_range == "items */0"

    @pytest.mark.asyncio
    async def test_range_uses_to_minus_from_as_limit(self):
        collection = _FakeCollection(12)
        page = await self._page(collection, RangeSpec(start=0, end=10))
        assert len(page.items) == 10
        assert page.content_range == "items 0-9/12"
        assert collection.calls == [("range", 0, 10)]

    @pytest.mark.asyncio
    async def test_short_last_page(self):
        page = await self._page(_FakeCollection(12), RangeSpec(start=10, end=20))
        assert list(page.items) == [10, 11]
        assert page.content_range == "items 10-11/12"

    @pytest.mark.asyncio
    async def test_range_past_the_end_skips_the_query(self):
        collection = _FakeCollection(5)
        page = await self._page(collection, RangeSpec(start=5, end=10))
        assert list(page.items) == []
        assert page.content_range == "items */5"
        assert collection.calls == []

    @pytest.mark.asyncio
    async def test_zero_length_range_skips_the_query(self):
        collection = _FakeCollection(5)
        page = await self._page(collection, RangeSpec(start=2, end=2))
        assert list(page.items) == []
        assert page.content_range == "items */5"
        assert collection.calls == []
