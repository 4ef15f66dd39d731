"""RecordSpec: fluent record queries, per-scope result caching and trigger routing."""

from recordspec import builder, core, data_dictionary, exceptions, triggers, typing, utils
from recordspec.__metadata__ import __version__
from recordspec.base import RecordSpec
from recordspec.builder import SelectQuery
from recordspec.config import LoggingConfig, RecordSpecConfig
from recordspec.core import CacheKey, CacheStats, ExecutionScope, ResultCache
from recordspec.data_dictionary import EntityDescription, StaticMetadataProvider
from recordspec.exceptions import (
    CacheScopeError,
    ExecutionError,
    ImproperConfigurationError,
    MetadataError,
    RecordSpecError,
    UnknownTriggerOperationError,
    ValidationError,
)
from recordspec.parameters import AccessMode
from recordspec.protocols import MetadataProvider, RecordStore
from recordspec.selector import RecordSelector
from recordspec.triggers import (
    NoOpTriggerHandler,
    TriggerContext,
    TriggerDispatcher,
    TriggerHandler,
    TriggerOperation,
    TriggerRegistry,
)

__all__ = (
    "AccessMode",
    "CacheKey",
    "CacheScopeError",
    "CacheStats",
    "EntityDescription",
    "ExecutionError",
    "ExecutionScope",
    "ImproperConfigurationError",
    "LoggingConfig",
    "MetadataError",
    "MetadataProvider",
    "NoOpTriggerHandler",
    "RecordSelector",
    "RecordSpec",
    "RecordSpecConfig",
    "RecordSpecError",
    "RecordStore",
    "ResultCache",
    "SelectQuery",
    "StaticMetadataProvider",
    "TriggerContext",
    "TriggerDispatcher",
    "TriggerHandler",
    "TriggerOperation",
    "TriggerRegistry",
    "UnknownTriggerOperationError",
    "ValidationError",
    "__version__",
    "builder",
    "core",
    "data_dictionary",
    "exceptions",
    "triggers",
    "typing",
    "utils",
)
