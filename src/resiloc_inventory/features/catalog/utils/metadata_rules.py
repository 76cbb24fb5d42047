"""Validation of descriptive metadata by field type.

Each ``MetadataType`` has exactly one rule object below; every check on
templates, instance edits and snapshot submission dispatches through
``FIELD_RULES`` so the behaviour of a type lives in one place.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from ....core.exceptions import BadRequestError
from ..entities.enums import MetadataType
from ..entities.metadata import (
    METADATA_FIELDS,
    PERIOD_OF_REFERENCE,
    AnyMetadataField,
    PeriodField,
    ProxyMetadata,
)


class FieldRule:
    """Behaviour of one metadata type."""

    metadata_type: MetadataType
    # Whether instances may carry their own value for the field
    editable_on_instance: bool = True
    # Whether templates must define a value
    template_value: Optional[bool] = None

    def check_template(self, name: str, meta_field: AnyMetadataField) -> None:
        if self.template_value is True and not meta_field.has_value():
            raise BadRequestError(
                "Value field is required for static and default type",
                details={"field": name},
            )
        if self.template_value is False and not meta_field.is_empty():
            raise BadRequestError(
                "Required type does not need value",
                details={"field": name},
            )

    def check_instance_edit(self, owner_id: str, name: str) -> None:
        if not self.editable_on_instance:
            raise BadRequestError(
                f"Unable to update value for a static field of static proxy {owner_id}: {name}",
                details={"field": name},
            )

    def check_submission(self, owner_id: str, name: str, meta_field: AnyMetadataField) -> None:
        return None


class RequiredFieldRule(FieldRule):
    """Filled in on instances only, mandatory before submission."""

    metadata_type = MetadataType.REQUIRED
    template_value = False

    def check_submission(self, owner_id: str, name: str, meta_field: AnyMetadataField) -> None:
        if isinstance(meta_field, PeriodField):
            if meta_field.start is None:
                raise BadRequestError(
                    f"Missing 'from' value of {name} (required field) of static proxy {owner_id} to submit"
                )
            if meta_field.end is None:
                raise BadRequestError(
                    f"Missing 'to' value of {name} (required field) of static proxy {owner_id} to submit"
                )
        elif not meta_field.has_value():
            raise BadRequestError(
                f"Missing value of {name} (required field) of static proxy {owner_id} to submit"
            )


class StaticFieldRule(FieldRule):
    """Value fixed by the template."""

    metadata_type = MetadataType.STATIC
    editable_on_instance = False
    template_value = True


class DefaultFieldRule(FieldRule):
    """Template value that instances may override."""

    metadata_type = MetadataType.DEFAULT
    template_value = True


FIELD_RULES: Dict[MetadataType, FieldRule] = {
    rule.metadata_type: rule
    for rule in (RequiredFieldRule(), StaticFieldRule(), DefaultFieldRule())
}

if set(FIELD_RULES) != set(MetadataType):
    raise RuntimeError("Every metadata type needs a field rule")


def _as_instant(bound: str, value: Any) -> datetime:
    """Parse one end of a period as a UTC instant; naive values count as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise BadRequestError(f"'{bound}' value of periodOfReference must be an ISO 8601 date string")
    else:
        raise BadRequestError(f"'{bound}' value of periodOfReference must be an ISO 8601 date string")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class MetadataRules:
    """Metadata checks used by proxy templates and static proxy instances."""

    @staticmethod
    def rule_for(name: str, meta_field: AnyMetadataField) -> FieldRule:
        if meta_field.type is None:
            raise BadRequestError(f"Missing type value of field {name}")
        return FIELD_RULES[meta_field.type]

    @staticmethod
    def check_period(metadata: ProxyMetadata) -> None:
        period = metadata.get(PERIOD_OF_REFERENCE)
        if not isinstance(period, PeriodField):
            return
        start = _as_instant("from", period.start) if period.start is not None else None
        end = _as_instant("to", period.end) if period.end is not None else None
        if start is not None and end is not None and start > end:
            raise BadRequestError("'From' value must be smaller or equal to 'to' value")

    @staticmethod
    def validate_template(metadata: ProxyMetadata) -> None:
        """Validate metadata supplied for a template (create or update)."""
        for name, meta_field in metadata.items():
            MetadataRules.rule_for(name, meta_field).check_template(name, meta_field)
        MetadataRules.check_period(metadata)

    @staticmethod
    def strip_required_values(metadata: ProxyMetadata) -> ProxyMetadata:
        """Return a copy where required fields carry no value."""
        stripped = metadata.copy()
        for name, meta_field in stripped.items():
            if meta_field.type == MetadataType.REQUIRED:
                meta_field.clear_value()
        return stripped

    @staticmethod
    def ensure_no_static_values(owner_id: str, current: ProxyMetadata, supplied: Optional[ProxyMetadata]) -> None:
        """Reject caller-supplied values for fields the template fixes."""
        if not supplied:
            return
        for name, meta_field in current.items():
            if name in supplied:
                MetadataRules.rule_for(name, meta_field).check_instance_edit(owner_id, name)

    @staticmethod
    def ensure_instance_complete(owner_id: str, metadata: ProxyMetadata) -> None:
        """Every field has a type and every non-required field has a value."""
        for name in METADATA_FIELDS:
            meta_field = metadata.get(name)
            if meta_field is None:
                raise BadRequestError(
                    f"Descriptive metadata of static proxy {owner_id} is not filled in completely"
                )
            if meta_field.type is None:
                raise BadRequestError(f"Missing type value of field {name} of static proxy {owner_id}")
            if meta_field.type != MetadataType.REQUIRED and not meta_field.has_value():
                part = "from/to" if isinstance(meta_field, PeriodField) else "value"
                raise BadRequestError(
                    f"Missing {part} of field {name} of static proxy {owner_id} ({meta_field.type.value} type)"
                )

    @staticmethod
    def ensure_ready_for_submission(owner_id: str, metadata: ProxyMetadata) -> None:
        for name, meta_field in metadata.items():
            MetadataRules.rule_for(name, meta_field).check_submission(owner_id, name, meta_field)
        MetadataRules.check_period(metadata)

    @staticmethod
    def merge_instance_values(metadata: ProxyMetadata, supplied: Optional[ProxyMetadata]) -> ProxyMetadata:
        """Overlay supplied values on editable fields, keeping each field's type.

        Blank supplied values are ignored. Fields the template fixes are left
        untouched.
        """
        merged = metadata.copy()
        if not supplied:
            return merged
        for name, meta_field in merged.items():
            if name not in supplied or meta_field.type is None:
                continue
            if not FIELD_RULES[meta_field.type].editable_on_instance:
                continue
            meta_field.merge_values(supplied.get(name))
        return merged

    @staticmethod
    def apply_instance_values(owner_id: str, metadata: ProxyMetadata, supplied: ProxyMetadata) -> ProxyMetadata:
        """Like ``merge_instance_values`` but a supplied static field is an error."""
        MetadataRules.ensure_no_static_values(owner_id, metadata, supplied)
        return MetadataRules.merge_instance_values(metadata, supplied)
