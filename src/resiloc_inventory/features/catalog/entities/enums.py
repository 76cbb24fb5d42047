"""Enumerations shared by catalog templates and their instances.

Values are part of the wire contract and are stored as-is.
"""

from enum import Enum


class Visibility(str, Enum):
    """Who may see a record."""
    DRAFT = "draft"
    INTERNAL = "internal"
    COMMUNITY = "community"
    PUBLIC = "public"


class TemplateStatus(str, Enum):
    """Approval lifecycle of catalog templates."""
    REQUESTED = "requested"
    VERIFIED = "verified"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class SubmissionStatus(str, Enum):
    """Lifecycle of snapshots and scenario instances."""
    ON_HOLD = "on_hold"
    SUBMITTED = "submitted"


class StaticProxyType(str, Enum):
    """Scope a static proxy instance belongs to."""
    PROXY_OF_COMMUNITY = "proxy_of_community"
    PROXY_OF_INDICATOR = "proxy_of_indicator"
    PROXY_OF_SNAPSHOT = "proxy_of_snapshot"


class MetadataType(str, Enum):
    """How a descriptive metadata field behaves on instances."""
    REQUIRED = "required"
    STATIC = "static"
    DEFAULT = "default"


class AvailabilityType(str, Enum):
    MEASURED = "measured"
    DERIVED = "derived"
    NOT_AVAILABLE = "not_available"
    NOT_APPLICABLE = "not_applicable"


class TypeOfData(str, Enum):
    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    TEXT = "text"
    GEO_JSON = "geoJSON"


class IndicatorContext(str, Enum):
    FRAMEWORK = "framework"
    PROCESS = "process"
    RESOURCE = "resource"


class IndicatorCriteria(str, Enum):
    COHERENCE = "coherence"
    COMPLIANCE = "compliance"
    ADEQUACY = "adequacy"

    SUSTAINABILITY = "sustainability"
    INNOVATION = "innovation"
    INCLUSIVENESS = "inclusiveness"

    DIVERSITY = "diversity"
    REDUNDANCY = "redundancy"
    MODULARITY = "modularity"


class IndicatorDimension(str, Enum):
    COMMUNITY_STRUCTURE_AND_AGENCY = "community_structure_and_agency"
    SERVICES_AND_PRODUCTIVITY = "services_and_productivity"
    INSTITUTIONS_AND_POLICY = "institutions_and_policy"
    ENVIRONMENT_AND_ECOSYSTEMS = "environment_and_ecosystems"
    INFRASTRUCTURE_AND_NETWORKS = "infrastructure_and_networks"
    DRR_AND_EMERGENCY_MANAGEMENT = "drr_and_emergency_management"


class SnapshotType(str, Enum):
    SCENARIO = "scenario"
    ACTION = "action"
    EVOLUTION = "evolution"


class ScenarioMetadataType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
