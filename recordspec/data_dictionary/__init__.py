"""Entity metadata: descriptions, providers and field resolution."""

from recordspec.data_dictionary._helpers import all_fields, describe_entity, field_set
from recordspec.data_dictionary._static import StaticMetadataProvider
from recordspec.data_dictionary._types import EntityDescription

__all__ = ("EntityDescription", "StaticMetadataProvider", "all_fields", "describe_entity", "field_set")
