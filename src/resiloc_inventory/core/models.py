"""Base request model for the HTTP surface."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """Request bodies use camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="forbid",
    )

    def to_changes(self) -> Dict[str, Any]:
        """Fields the caller actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)
