"""Catalog entities shared by templates and instances."""

from .enums import (
    AvailabilityType,
    IndicatorContext,
    IndicatorCriteria,
    IndicatorDimension,
    MetadataType,
    ScenarioMetadataType,
    SnapshotType,
    StaticProxyType,
    SubmissionStatus,
    TemplateStatus,
    TypeOfData,
    Visibility,
)
from .metadata import (
    METADATA_FIELDS,
    PERIOD_OF_REFERENCE,
    MetadataField,
    PeriodField,
    ProxyMetadata,
)

__all__ = [
    "AvailabilityType",
    "IndicatorContext",
    "IndicatorCriteria",
    "IndicatorDimension",
    "MetadataType",
    "ScenarioMetadataType",
    "SnapshotType",
    "StaticProxyType",
    "SubmissionStatus",
    "TemplateStatus",
    "TypeOfData",
    "Visibility",
    "METADATA_FIELDS",
    "PERIOD_OF_REFERENCE",
    "MetadataField",
    "PeriodField",
    "ProxyMetadata",
]
