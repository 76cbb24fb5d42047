"""Proxy template entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ....utils.datetime import utc_now
from ....utils.uuid import generate_uuid_v4
from ...catalog.entities.enums import TemplateStatus, Visibility
from ...catalog.entities.metadata import ProxyMetadata
from ...catalog.utils.validation import CatalogValidationRules


@dataclass
class UnitOfMeasurement:
    """A unit a proxy value can be expressed in, relative to the default unit."""

    name: str
    is_default: bool = False
    from_default_multiplier: float = 1.0
    to_default_multiplier: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "isDefault": self.is_default,
            "fromDefaultMultiplier": self.from_default_multiplier,
            "toDefaultMultiplier": self.to_default_multiplier,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UnitOfMeasurement":
        return cls(
            name=data["name"],
            is_default=bool(data.get("isDefault", data.get("is_default", False))),
            from_default_multiplier=data.get("fromDefaultMultiplier", data.get("from_default_multiplier", 1.0)),
            to_default_multiplier=data.get("toDefaultMultiplier", data.get("to_default_multiplier", 1.0)),
        )


@dataclass
class ResilocProxy:
    """A catalog proxy template.

    Communities never hold a template directly; they get a ``StaticProxy``
    cloned from it.
    """

    name: str
    id: str = field(default_factory=generate_uuid_v4)
    description: str = ""
    type: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    status: TemplateStatus = TemplateStatus.REQUESTED
    visibility: Visibility = Visibility.DRAFT
    unit_of_measurement: List[UnitOfMeasurement] = field(default_factory=list)
    metadata: ProxyMetadata = field(default_factory=ProxyMetadata)
    date_created: datetime = field(default_factory=utc_now)
    date_modified: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        self.name = CatalogValidationRules.normalize_name(self.name)
        self.status = TemplateStatus(self.status)
        self.visibility = Visibility(self.visibility)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type,
            "tags": list(self.tags),
            "status": self.status.value,
            "visibility": self.visibility.value,
            "unitOfMeasurement": [unit.to_dict() for unit in self.unit_of_measurement],
            "metadata": self.metadata.to_dict(),
            "dateCreated": self.date_created.isoformat() if self.date_created else None,
            "dateModified": self.date_modified.isoformat() if self.date_modified else None,
        }
