"""Descriptive proxy metadata.

Every proxy template and instance carries the same eight descriptive fields.
Each field is tagged with a ``MetadataType`` that decides whether instances
may edit it; ``periodOfReference`` holds a ``from``/``to`` pair instead of a
single value.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from ....core.exceptions import BadRequestError
from .enums import MetadataType


PERIOD_OF_REFERENCE = "periodOfReference"

METADATA_FIELDS = (
    "certified",
    "dateOfData",
    PERIOD_OF_REFERENCE,
    "sourceType",
    "actualSource",
    "tooltip",
    "availability",
    "typeOfData",
)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _parse_type(raw: Any) -> Optional[MetadataType]:
    if raw is None or isinstance(raw, MetadataType):
        return raw
    try:
        return MetadataType(raw)
    except ValueError:
        raise BadRequestError(f"Unknown metadata type '{raw}'")


@dataclass
class MetadataField:
    """A single-valued metadata field."""

    type: Optional[MetadataType] = None
    value: Any = None

    def has_value(self) -> bool:
        return self.value is not None

    def is_empty(self) -> bool:
        return self.value is None

    def clear_value(self) -> None:
        self.value = None

    def merge_values(self, supplied: "MetadataField") -> None:
        """Take the supplied value unless it is blank."""
        if not _is_blank(supplied.value):
            self.value = supplied.value

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.type is not None:
            data["type"] = self.type.value
        if self.value is not None:
            data["value"] = self.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MetadataField":
        return cls(type=_parse_type(data.get("type")), value=data.get("value"))


@dataclass
class PeriodField:
    """A ``from``/``to`` metadata field."""

    type: Optional[MetadataType] = None
    start: Any = None
    end: Any = None

    def has_value(self) -> bool:
        return self.start is not None and self.end is not None

    def is_empty(self) -> bool:
        return self.start is None and self.end is None

    def clear_value(self) -> None:
        self.start = None
        self.end = None

    def merge_values(self, supplied: "PeriodField") -> None:
        if not _is_blank(supplied.start):
            self.start = supplied.start
        if not _is_blank(supplied.end):
            self.end = supplied.end

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.type is not None:
            data["type"] = self.type.value
        if self.start is not None:
            data["from"] = self.start
        if self.end is not None:
            data["to"] = self.end
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PeriodField":
        return cls(
            type=_parse_type(data.get("type")),
            start=data.get("from"),
            end=data.get("to"),
        )


AnyMetadataField = Union[MetadataField, PeriodField]


def _field_class(name: str):
    return PeriodField if name == PERIOD_OF_REFERENCE else MetadataField


@dataclass
class ProxyMetadata:
    """The eight descriptive fields of a proxy, keyed by wire name.

    A partial instance (for example the values a caller supplies for a
    snapshot) only holds the fields that were provided.
    """

    fields: Dict[str, AnyMetadataField] = field(default_factory=dict)

    def __post_init__(self):
        unknown = set(self.fields) - set(METADATA_FIELDS)
        if unknown:
            raise BadRequestError(f"Unknown metadata fields: {', '.join(sorted(unknown))}")

    def get(self, name: str) -> Optional[AnyMetadataField]:
        return self.fields.get(name)

    def items(self) -> Iterator[Tuple[str, AnyMetadataField]]:
        """Iterate present fields in canonical order."""
        for name in METADATA_FIELDS:
            if name in self.fields:
                yield name, self.fields[name]

    def __contains__(self, name: str) -> bool:
        return name in self.fields

    def copy(self) -> "ProxyMetadata":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: meta_field.to_dict() for name, meta_field in self.items()}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ProxyMetadata":
        if not data:
            return cls()
        fields: Dict[str, AnyMetadataField] = {}
        for name, raw in data.items():
            if raw is None:
                continue
            if name not in METADATA_FIELDS:
                raise BadRequestError(f"Unknown metadata field '{name}'")
            fields[name] = _field_class(name).from_dict(raw)
        return cls(fields=fields)
