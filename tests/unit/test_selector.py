"""Unit tests for RecordSelector."""

from typing import TYPE_CHECKING

import pytest

from recordspec.config import RecordSpecConfig
from recordspec.core import CacheKey, ExecutionScope
from recordspec.data_dictionary import StaticMetadataProvider
from recordspec.exceptions import ImproperConfigurationError
from recordspec.parameters import AccessMode
from recordspec.selector import RecordSelector

if TYPE_CHECKING:
    from tests.conftest import RecordingStore


class AccountSelector(RecordSelector):
    entity_type = "Account"
    default_fields = ("Id", "Name", "Industry")
    default_order_by = "Name"


class ContactSelector(RecordSelector):
    entity_type = "Contact"


@pytest.fixture
def scope(store: "RecordingStore", metadata: StaticMetadataProvider) -> ExecutionScope:
    return ExecutionScope(store=store, metadata=metadata)


def test_selector_requires_entity_type(scope: ExecutionScope) -> None:
    with pytest.raises(ImproperConfigurationError, match="RecordSelector must define entity_type"):
        RecordSelector(scope)


def test_new_query_uses_default_fields_and_order(scope: ExecutionScope) -> None:
    assert AccountSelector(scope).new_query().render() == "SELECT Id, Name, Industry FROM Account ORDER BY Name"


def test_new_query_falls_back_to_all_fields(scope: ExecutionScope) -> None:
    assert ContactSelector(scope).new_query().render() == "SELECT Id, LastName, AccountId FROM Contact"


def test_new_query_falls_back_to_configured_field_set(
    store: "RecordingStore", metadata: StaticMetadataProvider
) -> None:
    class OwnerSelector(RecordSelector):
        entity_type = "Account"

    scope = ExecutionScope(store=store, metadata=metadata, config=RecordSpecConfig(default_field_set="routing"))
    assert OwnerSelector(scope).new_query().selected_fields == ("Id", "OwnerId")


def test_select_all_runs_once_per_scope(store: "RecordingStore", scope: ExecutionScope) -> None:
    selector = AccountSelector(scope)

    first = selector.select_all()
    second = AccountSelector(scope).select_all()

    assert first is second
    assert store.call_count == 1
    assert scope.cache.keys() == [
        CacheKey("Account", "all:SELECT Id, Name, Industry FROM Account ORDER BY Name")
    ]

    selector.select_all(force_refresh=True)
    assert store.call_count == 2


def test_select_by_ids(store: "RecordingStore", scope: ExecutionScope) -> None:
    selector = AccountSelector(scope)

    selector.select_by_ids([2, 1, 2])
    selector.select_by_ids([1, 2])

    assert store.call_count == 1
    method, text, bindings, access_mode = store.calls[0]
    assert method == "query_with_bindings"
    assert text == "SELECT Id, Name, Industry FROM Account WHERE Id IN :ids ORDER BY Name"
    assert bindings == {"ids": [2, 1]}
    assert access_mode is AccessMode.SYSTEM
    assert len(scope.cache) == 1


def test_select_by_ids_empty_skips_store(store: "RecordingStore", scope: ExecutionScope) -> None:
    assert AccountSelector(scope).select_by_ids([]) == []
    assert store.call_count == 0


def test_select_where_uncached_without_discriminator(store: "RecordingStore", scope: ExecutionScope) -> None:
    selector = AccountSelector(scope)

    selector.select_where("Industry = :industry", {"industry": "Energy"})
    selector.select_where("Industry = :industry", {"industry": "Energy"})

    assert store.call_count == 2
    assert len(scope.cache) == 0


def test_select_where_cached_with_discriminator(store: "RecordingStore", scope: ExecutionScope) -> None:
    selector = AccountSelector(scope)

    selector.select_where("Industry = :industry", {"industry": "Energy"}, discriminator="energy")
    selector.select_where("Industry = :industry", {"industry": "Energy"}, discriminator="energy")

    assert store.call_count == 1
    assert store.calls[0][2] == {"industry": "Energy"}


def test_select_first(store: "RecordingStore", empty_store: "RecordingStore", metadata: StaticMetadataProvider) -> None:
    scope = ExecutionScope(store=store, metadata=metadata)
    record = AccountSelector(scope).select_first("Industry = 'Energy'")

    assert record is not None
    assert store.calls == [
        ("query", "SELECT Id, Name, Industry FROM Account WHERE Industry = 'Energy' ORDER BY Name LIMIT 1")
    ]

    empty_scope = ExecutionScope(store=empty_store, metadata=metadata)
    assert AccountSelector(empty_scope).select_first("Industry = 'Retail'") is None


def test_select_by_ids_keys_keep_id_types_and_boundaries(store: "RecordingStore", scope: ExecutionScope) -> None:
    selector = AccountSelector(scope)

    selector.select_by_ids([1])
    selector.select_by_ids(["1"])
    selector.select_by_ids(["a,b"])
    selector.select_by_ids(["a", "b"])

    assert store.call_count == 4
    assert [call[2] for call in store.calls] == [{"ids": [1]}, {"ids": ["1"]}, {"ids": ["a,b"]}, {"ids": ["a", "b"]}]


def test_selectors_with_different_fields_do_not_share_entries(
    store: "RecordingStore", scope: ExecutionScope
) -> None:
    class AccountIndustrySelector(RecordSelector):
        entity_type = "Account"
        default_fields = ("Id", "Industry")

    AccountSelector(scope).select_all()
    AccountIndustrySelector(scope).select_all()
    AccountSelector(scope).select_by_ids([1])
    AccountIndustrySelector(scope).select_by_ids([1])

    assert store.call_count == 4
    assert store.calls[1] == ("query", "SELECT Id, Industry FROM Account")
    assert len(scope.cache) == 4
