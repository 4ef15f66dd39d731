from typing import Any

import pytest

from recordspec.exceptions import ImproperConfigurationError
from recordspec.triggers import NoOpTriggerHandler, TriggerContext, TriggerOperation, TriggerRegistry


class RecordingHandler(NoOpTriggerHandler):
    instances: "list[RecordingHandler]" = []

    def __init__(self) -> None:
        self.inserted: list[Any] = []
        RecordingHandler.instances.append(self)

    def before_insert(self, new_records: Any) -> None:
        self.inserted.extend(new_records)


@pytest.fixture(autouse=True)
def reset_instances() -> None:
    RecordingHandler.instances = []


@pytest.fixture
def registry() -> TriggerRegistry:
    registry = TriggerRegistry()
    registry.register("Account", RecordingHandler)
    return registry


def _insert(entity_type: "str | None" = "Account") -> TriggerContext:
    return TriggerContext(
        operation=TriggerOperation.BEFORE_INSERT, new_records=[{"Name": "Acme"}], entity_type=entity_type
    )


def test_dispatch_builds_fresh_handler_per_event(registry: TriggerRegistry) -> None:
    assert registry.dispatch(_insert()) is True
    assert registry.dispatch(_insert()) is True

    assert len(RecordingHandler.instances) == 2
    assert all(handler.inserted == [{"Name": "Acme"}] for handler in RecordingHandler.instances)


def test_entity_type_lookup_is_case_insensitive(registry: TriggerRegistry) -> None:
    assert registry.is_registered("account")
    assert registry.dispatch(_insert(entity_type=None), entity_type="ACCOUNT") is True


def test_unregistered_entity_raises(registry: TriggerRegistry) -> None:
    with pytest.raises(ImproperConfigurationError, match="Contact"):
        registry.dispatch(_insert("Contact"))


def test_context_without_entity_type_raises(registry: TriggerRegistry) -> None:
    with pytest.raises(ImproperConfigurationError):
        registry.dispatch(_insert(entity_type=None))


def test_unregister(registry: TriggerRegistry) -> None:
    registry.unregister("Account")
    registry.unregister("Account")
    assert not registry.is_registered("Account")


def test_bypass_suppresses_dispatch(registry: TriggerRegistry) -> None:
    registry.bypass("Account")

    assert registry.dispatch(_insert()) is False
    assert RecordingHandler.instances == []

    registry.clear_bypass("account")
    assert registry.dispatch(_insert()) is True


def test_clear_bypass_all(registry: TriggerRegistry) -> None:
    registry.bypass("Account")
    registry.bypass("Contact")
    registry.clear_bypass()
    assert not registry.is_bypassed("Account")
    assert not registry.is_bypassed("Contact")


def test_bypassed_context_restores_state(registry: TriggerRegistry) -> None:
    with registry.bypassed("Account"):
        assert registry.dispatch(_insert()) is False
    assert not registry.is_bypassed("Account")

    registry.bypass("Account")
    with registry.bypassed("Account"):
        pass
    assert registry.is_bypassed("Account")


def test_handler_for_builds_handler(registry: TriggerRegistry) -> None:
    assert isinstance(registry.handler_for("Account"), RecordingHandler)
    with pytest.raises(ImproperConfigurationError):
        registry.handler_for("Opportunity")
