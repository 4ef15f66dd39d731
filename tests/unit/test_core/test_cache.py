"""Unit tests for the per-scope ResultCache."""

import threading
from typing import TYPE_CHECKING

import pytest

from recordspec.builder import SelectQuery
from recordspec.core.cache import CacheKey, CacheStats, ResultCache
from recordspec.exceptions import CacheScopeError, ExecutionError

if TYPE_CHECKING:
    from tests.conftest import RecordingStore


@pytest.fixture
def cache() -> ResultCache:
    return ResultCache("scope-1")


@pytest.fixture
def account_query(store: "RecordingStore") -> SelectQuery:
    return SelectQuery("Account", store=store).select_fields(["Id", "Name"])


def test_cache_key_equality_and_hash() -> None:
    assert CacheKey("Account") == CacheKey("Account", None)
    assert CacheKey("Account", "all") != CacheKey("Account", "by_owner")
    assert hash(CacheKey("Account", "all")) == hash(CacheKey("Account", "all"))
    assert CacheKey("Account") != "Account"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Account", CacheKey("Account")),
        (("Account", "all"), CacheKey("Account", "all")),
        (("Account", None), CacheKey("Account")),
        (CacheKey("Contact", "x"), CacheKey("Contact", "x")),
    ],
)
def test_cache_key_coerce(raw: object, expected: CacheKey) -> None:
    assert CacheKey.coerce(raw) == expected


@pytest.mark.parametrize("raw", [42, ("Account",), ("Account", "a", "b"), None])
def test_cache_key_coerce_rejects_other_shapes(raw: object) -> None:
    with pytest.raises(TypeError):
        CacheKey.coerce(raw)


def test_second_call_does_not_hit_store(store: "RecordingStore", cache: ResultCache) -> None:
    """A populated entry is returned without another store invocation."""
    store.records = [{"Id": 1, "Name": "Acme"}]
    query = SelectQuery("Account", store=store).select_fields(["Id", "Name"])

    first = cache.get_or_execute("Account", query, False)
    assert store.call_count == 1

    second = cache.get_or_execute("Account", query, False)

    assert store.call_count == 1
    assert len(second) == 1
    assert second[0] == {"Id": 1, "Name": "Acme"}
    assert second is first


def test_hit_ignores_the_query_passed(
    store: "RecordingStore", cache: ResultCache, account_query: SelectQuery
) -> None:
    cache.get_or_execute("Account", account_query)
    other_query = SelectQuery("Account", store=store).select_fields("Industry")

    records = cache.get_or_execute("Account", other_query)

    assert store.call_count == 1
    assert records[0]["Name"] == "Acme"


def test_force_refresh_always_executes(
    store: "RecordingStore", cache: ResultCache, account_query: SelectQuery
) -> None:
    cache.get_or_execute("Account", account_query)
    store.records = [{"Id": 3, "Name": "Initech"}]

    refreshed = cache.get_or_execute("Account", account_query, force_refresh=True)

    assert store.call_count == 2
    assert refreshed == [{"Id": 3, "Name": "Initech"}]
    assert cache.get_or_execute("Account", account_query) is refreshed
    assert store.call_count == 2


def test_force_refresh_on_empty_cache_executes_once(
    store: "RecordingStore", cache: ResultCache, account_query: SelectQuery
) -> None:
    cache.get_or_execute("Account", account_query, force_refresh=True)
    assert store.call_count == 1


def test_empty_result_is_cached(empty_store: "RecordingStore", cache: ResultCache) -> None:
    query = SelectQuery("Account", store=empty_store).select_fields("Id")

    assert cache.get_or_execute("Account", query) == []
    assert cache.get_or_execute("Account", query) == []
    assert empty_store.call_count == 1
    assert cache.is_populated("Account")


def test_failed_execution_leaves_entry_unpopulated(
    store: "RecordingStore", cache: ResultCache, account_query: SelectQuery
) -> None:
    store.error = RuntimeError("QUERY_TIMEOUT")

    with pytest.raises(ExecutionError):
        cache.get_or_execute("Account", account_query)

    assert not cache.is_populated("Account")
    assert cache.peek("Account") is None

    store.error = None
    records = cache.get_or_execute("Account", account_query)

    assert store.call_count == 2
    assert len(records) == 2
    assert cache.stats.failures == 1


def test_failed_refresh_discards_previous_records(
    store: "RecordingStore", cache: ResultCache, account_query: SelectQuery
) -> None:
    cache.get_or_execute("Account", account_query)
    store.error = RuntimeError("boom")

    with pytest.raises(ExecutionError):
        cache.get_or_execute("Account", account_query, force_refresh=True)

    assert cache.peek("Account") is None


def test_keys_are_independent(store: "RecordingStore", cache: ResultCache, account_query: SelectQuery) -> None:
    cache.get_or_execute(("Account", "all"), account_query)
    cache.get_or_execute(("Account", "tech"), account_query)
    cache.get_or_execute(("Account", "all"), account_query)

    assert store.call_count == 2
    assert set(cache.keys()) == {CacheKey("Account", "all"), CacheKey("Account", "tech")}
    assert len(cache) == 2


def test_get_or_execute_for_keys_by_entity_type(
    store: "RecordingStore", cache: ResultCache, account_query: SelectQuery
) -> None:
    cache.get_or_execute_for(account_query, "summary")
    assert CacheKey("Account", "summary") in cache
    assert cache.get_or_execute(("Account", "summary"), account_query) is cache.peek(("Account", "summary"))
    assert store.call_count == 1


def test_invalidate(store: "RecordingStore", cache: ResultCache, account_query: SelectQuery) -> None:
    cache.get_or_execute("Account", account_query)

    assert cache.invalidate("Account") is True
    assert cache.invalidate("Account") is False

    cache.get_or_execute("Account", account_query)
    assert store.call_count == 2


def test_invalidate_entity(store: "RecordingStore", cache: ResultCache, account_query: SelectQuery) -> None:
    contact_query = SelectQuery("Contact", store=store).select_fields("Id")
    cache.get_or_execute(("Account", "a"), account_query)
    cache.get_or_execute(("Account", "b"), account_query)
    cache.get_or_execute("Contact", contact_query)

    assert cache.invalidate_entity("Account") == 2
    assert cache.keys() == [CacheKey("Contact")]


def test_clear_keeps_statistics(cache: ResultCache, account_query: SelectQuery) -> None:
    cache.get_or_execute("Account", account_query)
    cache.get_or_execute("Account", account_query)
    cache.clear()

    assert len(cache) == 0
    assert cache.stats.hits == 1
    assert cache.stats.misses == 1


def test_statistics(cache: ResultCache, account_query: SelectQuery) -> None:
    cache.get_or_execute("Account", account_query)
    cache.get_or_execute("Account", account_query)
    cache.get_or_execute("Account", account_query, force_refresh=True)

    stats = cache.stats
    assert (stats.hits, stats.misses, stats.refreshes, stats.failures) == (1, 1, 1, 0)
    assert stats.executions == 2
    assert stats.as_dict()["hit_rate"] == pytest.approx(100 / 3)


def test_cache_stats_reset() -> None:
    stats = CacheStats()
    stats.record_hit()
    stats.record_miss()
    stats.reset()
    assert stats.as_dict() == {"hits": 0, "misses": 0, "refreshes": 0, "failures": 0, "hit_rate": 0.0}


def test_closed_cache_rejects_use(cache: ResultCache, account_query: SelectQuery) -> None:
    cache.get_or_execute("Account", account_query)
    cache.close()
    cache.close()

    assert cache.closed
    with pytest.raises(CacheScopeError, match="closed"):
        cache.get_or_execute("Account", account_query)
    with pytest.raises(CacheScopeError):
        cache.peek("Account")


def test_foreign_thread_is_rejected(cache: ResultCache, account_query: SelectQuery) -> None:
    errors: list[BaseException] = []

    def worker() -> None:
        try:
            cache.get_or_execute("Account", account_query)
        except CacheScopeError as exc:
            errors.append(exc)

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert len(errors) == 1
    assert "owning thread" in str(errors[0])


def test_owner_thread_check_can_be_disabled(store: "RecordingStore", account_query: SelectQuery) -> None:
    cache = ResultCache("scope-2", enforce_owner_thread=False)
    results: list[int] = []

    def worker() -> None:
        results.append(len(cache.get_or_execute("Account", account_query)))

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert results == [2]
