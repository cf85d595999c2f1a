"""
Property-based tests for the in-memory history store.

Covers capacity, ordering, identifier uniqueness, lookup/delete
consistency and clearing.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from hypothesis import given, strategies as st, settings

from api_relay.schemas.proxy import STANDARD_METHODS, ProxyRequest, ProxyResponse
from api_relay.services.history_store import HistoryStore


def make_request(index: int, method: str = "GET") -> ProxyRequest:
    """Build a request description whose URL identifies its insertion index."""
    return ProxyRequest(
        method=method,
        url=f"https://example.com/items/{index}",
        headers={"Accept": "application/json"},
        params={"page": str(index)},
    )


def make_response(status: int = 200) -> ProxyResponse:
    return ProxyResponse(
        status=status,
        status_text="OK",
        headers={"content-type": "application/json"},
        data={"ok": True},
        response_time=12,
        size=11,
    )


# Strategies
add_count_strategy = st.integers(min_value=0, max_value=250)

capacity_strategy = st.integers(min_value=1, max_value=20)

method_strategy = st.sampled_from(STANDARD_METHODS)


class TestCapacityInvariant:
    """
    After any number of insertions the store keeps at most ``capacity``
    records, and those are the most recent ones, newest first.
    """

    @given(add_count=add_count_strategy)
    @settings(max_examples=20, deadline=None)
    def test_default_store_keeps_last_hundred(self, add_count: int):
        store = HistoryStore()
        for i in range(add_count):
            store.add(make_request(i), make_response())

        records = store.list()

        assert len(records) == min(add_count, 100)
        expected_urls = [
            f"https://example.com/items/{i}"
            for i in reversed(range(max(0, add_count - 100), add_count))
        ]
        assert [r.url for r in records] == expected_urls

    @given(capacity=capacity_strategy, add_count=st.integers(min_value=0, max_value=60))
    @settings(max_examples=50, deadline=None)
    def test_custom_capacity_evicts_oldest(self, capacity: int, add_count: int):
        store = HistoryStore(capacity=capacity)
        added = [store.add(make_request(i)) for i in range(add_count)]

        records = store.list()

        assert len(records) == min(add_count, capacity)
        assert records == list(reversed(added))[:capacity]
        assert len(store) == len(records)

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            HistoryStore(capacity=0)


class TestIdentifierUniqueness:
    """Identifiers are never shared, including after deletes and clears."""

    @given(add_count=st.integers(min_value=1, max_value=120))
    @settings(max_examples=20, deadline=None)
    def test_listed_ids_are_unique(self, add_count: int):
        store = HistoryStore()
        for i in range(add_count):
            store.add(make_request(i))

        ids = [r.id for r in store.list()]
        assert len(ids) == len(set(ids))

    def test_ids_not_reused_after_delete_and_clear(self):
        store = HistoryStore()
        seen = set()
        for i in range(10):
            record = store.add(make_request(i))
            seen.add(record.id)
            store.delete_by_id(record.id)
        store.clear()
        for i in range(10):
            record = store.add(make_request(i))
            assert record.id not in seen
            seen.add(record.id)


class TestRecordContents:
    """Records copy the request description and embed the response."""

    @given(method=method_strategy, status=st.sampled_from([200, 201, 404, 500]))
    @settings(max_examples=20, deadline=None)
    def test_record_copies_request_and_response(self, method: str, status: int):
        store = HistoryStore()
        request = ProxyRequest(
            method=method,
            url="https://example.com/api",
            headers={"X-Trace": "abc"},
            params={"q": "cats"},
            body={"name": "Rex"},
        )
        response = make_response(status)

        record = store.add(request, response)

        assert record.method == method
        assert record.url == "https://example.com/api"
        assert record.headers == {"X-Trace": "abc"}
        assert record.params == {"q": "cats"}
        assert record.body == {"name": "Rex"}
        assert record.response == response
        assert record.timestamp.tzinfo is not None

    def test_record_unaffected_by_later_changes_to_request_body(self):
        store = HistoryStore()
        body = {"name": "Rex", "tags": ["good"]}
        request = ProxyRequest(method="POST", url="https://example.com/pets", body=body)

        record = store.add(request)
        body["name"] = "changed"
        body["tags"].append("bad")
        request.body["extra"] = True

        stored = store.get_by_id(record.id)
        assert stored.body == {"name": "Rex", "tags": ["good"]}

    def test_record_unaffected_by_later_changes_to_response(self):
        store = HistoryStore()
        response = ProxyResponse(
            status=200,
            status_text="OK",
            headers={"set-cookie": ["a=1"]},
            data={"items": [1, 2]},
            response_time=5,
            size=13,
        )

        record = store.add(make_request(1), response)
        response.data["items"].append(3)
        response.headers["set-cookie"].append("b=2")

        stored = store.get_by_id(record.id)
        assert stored.response.data == {"items": [1, 2]}
        assert stored.response.headers == {"set-cookie": ["a=1"]}

    def test_response_is_optional(self):
        store = HistoryStore()
        record = store.add(make_request(1))
        assert record.response is None


class TestLookupDeleteConsistency:
    """
    A record is retrievable by id until it is deleted or the store is
    cleared; deleting an unknown id changes nothing.
    """

    @given(add_count=st.integers(min_value=1, max_value=30), data=st.data())
    @settings(max_examples=50, deadline=None)
    def test_get_until_deleted(self, add_count: int, data):
        store = HistoryStore()
        added = [store.add(make_request(i)) for i in range(add_count)]
        target = data.draw(st.sampled_from(added))

        assert store.get_by_id(target.id) == target

        assert store.delete_by_id(target.id) is True
        assert store.get_by_id(target.id) is None
        assert len(store) == add_count - 1
        assert target not in store.list()

    @given(add_count=st.integers(min_value=0, max_value=30))
    @settings(max_examples=30, deadline=None)
    def test_delete_unknown_id_is_noop(self, add_count: int):
        store = HistoryStore()
        for i in range(add_count):
            store.add(make_request(i))
        before = store.list()

        assert store.delete_by_id("does-not-exist") is False
        assert store.list() == before

    def test_delete_twice_returns_false_second_time(self):
        store = HistoryStore()
        record = store.add(make_request(1))

        assert store.delete_by_id(record.id) is True
        assert store.delete_by_id(record.id) is False

    def test_evicted_record_is_not_found(self):
        store = HistoryStore(capacity=3)
        first = store.add(make_request(0))
        for i in range(1, 4):
            store.add(make_request(i))

        assert store.get_by_id(first.id) is None
        assert store.delete_by_id(first.id) is False


class TestClear:
    """Clearing empties the store and invalidates every id."""

    def test_clear_after_five_adds(self):
        store = HistoryStore()
        added = [store.add(make_request(i), make_response()) for i in range(5)]

        store.clear()

        assert store.list() == []
        for record in added:
            assert store.get_by_id(record.id) is None

    def test_clear_is_idempotent(self):
        store = HistoryStore()
        store.clear()
        store.clear()
        assert store.list() == []

    def test_list_is_a_snapshot(self):
        store = HistoryStore()
        store.add(make_request(1))
        snapshot = store.list()

        store.add(make_request(2))
        store.clear()

        assert len(snapshot) == 1
        assert snapshot[0].url == "https://example.com/items/1"


class TestConcurrentAccess:
    """Concurrent adds and deletes leave the store within capacity with unique ids."""

    def test_parallel_add_and_delete(self):
        store = HistoryStore(capacity=50)

        def worker(offset: int) -> None:
            for i in range(100):
                record = store.add(make_request(offset * 1000 + i))
                if i % 3 == 0:
                    store.delete_by_id(record.id)
                store.get_by_id(record.id)
                store.list()

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(worker, range(8)))

        records = store.list()
        ids = [r.id for r in records]
        assert len(records) <= 50
        assert len(ids) == len(set(ids))
