import unittest

from pingbot.infrastructure.pagination import fetch_all_pages


class _PagedSource:
    def __init__(self, sizes) -> None:
        self.sizes = sizes
        self.requests = []

    async def fetch_page(self, page, per_page):
        self.requests.append((page, per_page))
        if page > len(self.sizes):
            raise AssertionError(f"unexpected request for page {page}")
        return [f"item-{page}-{i}" for i in range(self.sizes[page - 1])]


class TestFetchAllPages(unittest.IsolatedAsyncioTestCase):
    async def test_stops_on_short_page(self) -> None:
        source = _PagedSource([100, 100, 100, 42])

        items = await fetch_all_pages(source.fetch_page, 100)

        self.assertEqual(len(items), 342)
        self.assertEqual(len(source.requests), 4)

    async def test_exact_multiple_costs_one_empty_request(self) -> None:
        source = _PagedSource([100, 100, 100, 0])

        items = await fetch_all_pages(source.fetch_page, 100)

        self.assertEqual(len(items), 300)
        self.assertEqual(len(source.requests), 4)

    async def test_empty_listing_needs_one_request(self) -> None:
        source = _PagedSource([0])

        items = await fetch_all_pages(source.fetch_page, 100)

        self.assertEqual(items, [])
        self.assertEqual(source.requests, [(1, 100)])

    async def test_pages_are_requested_in_order_with_page_size(self) -> None:
        source = _PagedSource([2, 1])

        items = await fetch_all_pages(source.fetch_page, 2)

        self.assertEqual(source.requests, [(1, 2), (2, 2)])
        self.assertEqual(items, ["item-1-0", "item-1-1", "item-2-0"])

    async def test_error_discards_accumulated_pages(self) -> None:
        calls = []

        async def failing(page, per_page):
            calls.append(page)
            if page == 2:
                raise RuntimeError("boom")
            return list(range(per_page))

        with self.assertRaises(RuntimeError):
            await fetch_all_pages(failing, 10)
        self.assertEqual(calls, [1, 2])

    async def test_rejects_non_positive_page_size(self) -> None:
        source = _PagedSource([])

        with self.assertRaises(ValueError):
            await fetch_all_pages(source.fetch_page, 0)
