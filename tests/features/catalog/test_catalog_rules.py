"""Tests for catalog validation, metadata rules and the visibility policy."""

import itertools

import pytest

from resiloc_inventory.core.exceptions import BadRequestError, ForbiddenError
from resiloc_inventory.features.catalog.entities.enums import (
    IndicatorContext,
    IndicatorCriteria,
    MetadataType,
    TemplateStatus,
    Visibility,
)
from resiloc_inventory.features.catalog.entities.metadata import PeriodField, ProxyMetadata
from resiloc_inventory.features.catalog.utils.metadata_rules import MetadataRules
from resiloc_inventory.features.catalog.utils.validation import (
    CRITERIA_BY_CONTEXT,
    CatalogValidationRules,
    parse_status_filter,
)
from resiloc_inventory.features.policy.services.policy import VisibilityPolicy
from resiloc_inventory.features.resiloc_indicators.entities.resiloc_indicator import ResilocIndicator

VALID_PAIRS = {
    (IndicatorContext.FRAMEWORK, IndicatorCriteria.COHERENCE),
    (IndicatorContext.FRAMEWORK, IndicatorCriteria.COMPLIANCE),
    (IndicatorContext.FRAMEWORK, IndicatorCriteria.ADEQUACY),
    (IndicatorContext.PROCESS, IndicatorCriteria.SUSTAINABILITY),
    (IndicatorContext.PROCESS, IndicatorCriteria.INNOVATION),
    (IndicatorContext.PROCESS, IndicatorCriteria.INCLUSIVENESS),
    (IndicatorContext.RESOURCE, IndicatorCriteria.DIVERSITY),
    (IndicatorContext.RESOURCE, IndicatorCriteria.REDUNDANCY),
    (IndicatorContext.RESOURCE, IndicatorCriteria.MODULARITY),
}

ALL_PAIRS = list(itertools.product(IndicatorContext, IndicatorCriteria))


class TestContextCriteria:
    def test_every_criteria_belongs_to_one_context(self):
        assert len(ALL_PAIRS) == 27
        assert sum(len(criteria) for criteria in CRITERIA_BY_CONTEXT.values()) == len(IndicatorCriteria)

    @pytest.mark.parametrize("context,criteria", ALL_PAIRS)
    def test_compatibility_table(self, context, criteria):
        assert CatalogValidationRules.is_compatible(context, criteria) == ((context, criteria) in VALID_PAIRS)

    @pytest.mark.parametrize("context,criteria", [pair for pair in ALL_PAIRS if pair not in VALID_PAIRS])
    def test_indicator_rejects_mismatched_pair(self, context, criteria):
        with pytest.raises(BadRequestError):
            ResilocIndicator(name="Indicator", context=context, criteria=criteria)

    def test_indicator_accepts_wire_values(self):
        indicator = ResilocIndicator(name="  Water   supply ", context="process", criteria="innovation")
        assert indicator.name == "Water supply"
        assert indicator.criteria == IndicatorCriteria.INNOVATION


class TestNormalization:
    def test_blank_name_is_rejected(self):
        with pytest.raises(BadRequestError):
            CatalogValidationRules.normalize_name("   ")

    def test_tags_are_lower_cased_and_collapsed(self):
        assert CatalogValidationRules.normalize_tags(["  Flood  Risk ", "energy"]) == ["flood risk", "energy"]

    def test_tags_colliding_after_normalization_are_rejected(self):
        with pytest.raises(BadRequestError, match="duplicate"):
            CatalogValidationRules.normalize_tags(["Flood", " flood "])

    @pytest.mark.parametrize("relevance", [-0.1, 1.1, "high", True])
    def test_relevance_out_of_range(self, relevance):
        with pytest.raises(BadRequestError):
            CatalogValidationRules.validate_relevance(relevance)

    @pytest.mark.parametrize("direction", [-1, 0, 0.5, 1])
    def test_direction_in_range(self, direction):
        assert CatalogValidationRules.validate_direction(direction) == float(direction)

    def test_min_target_above_max_target(self):
        with pytest.raises(BadRequestError):
            CatalogValidationRules.validate_targets(10, 5)

    def test_scenario_metadata_type_checked(self):
        with pytest.raises(BadRequestError):
            CatalogValidationRules.validate_scenario_metadata([{"name": "Budget", "type": "number", "value": "a lot"}])

    def test_scenario_metadata_names_unique(self):
        with pytest.raises(BadRequestError):
            CatalogValidationRules.validate_scenario_metadata([
                {"name": "Budget", "type": "number"},
                {"name": " budget", "type": "text"},
            ])

    def test_status_filter_default_token_selects_everything(self):
        assert parse_status_filter(["default"]) == frozenset(TemplateStatus)
        assert parse_status_filter(None) == frozenset(TemplateStatus)
        assert parse_status_filter("requested") == frozenset({TemplateStatus.REQUESTED})

    def test_status_filter_unknown_value(self):
        with pytest.raises(BadRequestError):
            parse_status_filter(["pending"])


class TestMetadataRules:
    def test_static_field_needs_value_on_template(self):
        metadata = ProxyMetadata.from_dict({"certified": {"type": "static"}})
        with pytest.raises(BadRequestError):
            MetadataRules.validate_template(metadata)

    def test_required_field_must_not_carry_value_on_template(self):
        metadata = ProxyMetadata.from_dict({"dateOfData": {"type": "required", "value": "2020-01-01"}})
        with pytest.raises(BadRequestError):
            MetadataRules.validate_template(metadata)

    def test_period_must_be_ordered(self):
        metadata = ProxyMetadata.from_dict(
            {"periodOfReference": {"type": "default", "from": "2021-01-01", "to": "2020-01-01"}}
        )
        with pytest.raises(BadRequestError):
            MetadataRules.validate_template(metadata)

    def test_period_bounds_compare_as_instants(self):
        # 2021-01-02T00:00+05:00 is 2021-01-01T19:00Z, an hour before the end
        metadata = ProxyMetadata.from_dict(
            {
                "periodOfReference": {
                    "type": "default",
                    "from": "2021-01-02T00:00:00+05:00",
                    "to": "2021-01-01T20:00:00Z",
                }
            }
        )

        MetadataRules.validate_template(metadata)

    def test_naive_period_bound_is_utc(self):
        metadata = ProxyMetadata.from_dict(
            {"periodOfReference": {"type": "default", "from": "2021-01-01T12:00:00", "to": "2021-01-01T13:00:00+02:00"}}
        )
        with pytest.raises(BadRequestError, match="smaller or equal"):
            MetadataRules.validate_template(metadata)

    @pytest.mark.parametrize(
        "start, end",
        [("banana", "cherry"), (2020, "2021-01-01"), ("2020-01-01", ["2021"]), ("2020-13-01", "2021-01-01")],
    )
    def test_unparsable_period_bound(self, start, end):
        metadata = ProxyMetadata.from_dict({"periodOfReference": {"type": "default", "from": start, "to": end}})
        with pytest.raises(BadRequestError, match="ISO 8601"):
            MetadataRules.check_period(metadata)

    def test_required_period_with_one_bound_on_template(self):
        metadata = ProxyMetadata.from_dict({"periodOfReference": {"type": "required", "from": "2021-01-01"}})
        with pytest.raises(BadRequestError, match="Required type does not need value"):
            MetadataRules.validate_template(metadata)

    def test_strip_required_values_clears_half_filled_period(self):
        metadata = ProxyMetadata.from_dict({"periodOfReference": {"type": "required", "to": "2021-01-01"}})

        stripped = MetadataRules.strip_required_values(metadata)

        assert stripped.get("periodOfReference").is_empty()
        MetadataRules.validate_template(stripped)
        assert metadata.get("periodOfReference").end == "2021-01-01"

    def test_unknown_field_is_rejected(self):
        with pytest.raises(BadRequestError):
            ProxyMetadata.from_dict({"colour": {"type": "static", "value": "red"}})

    def test_unknown_type_is_rejected(self):
        with pytest.raises(BadRequestError):
            ProxyMetadata.from_dict({"tooltip": {"type": "optional", "value": "x"}})

    def test_period_field_round_trips_from_to(self):
        metadata = ProxyMetadata.from_dict({"periodOfReference": {"type": "required"}})
        assert isinstance(metadata.get("periodOfReference"), PeriodField)
        assert metadata.to_dict() == {"periodOfReference": {"type": "required"}}

    def test_strip_required_values_keeps_other_fields(self, seed):
        metadata = ProxyMetadata.from_dict({**seed.template_metadata(), **{
            "dateOfData": {"type": "required", "value": "2020-01-01"},
        }})
        stripped = MetadataRules.strip_required_values(metadata)
        assert not stripped.get("dateOfData").has_value()
        assert stripped.get("tooltip").value == "Share of households"
        assert metadata.get("dateOfData").has_value()

    def test_static_value_cannot_be_supplied_on_instance(self, seed):
        current = ProxyMetadata.from_dict(seed.template_metadata())
        supplied = ProxyMetadata.from_dict({"tooltip": {"value": "Other text"}})
        with pytest.raises(BadRequestError, match="static field"):
            MetadataRules.apply_instance_values("sp-1", current, supplied)

    def test_blank_values_do_not_override(self, seed):
        current = ProxyMetadata.from_dict(seed.template_metadata())
        supplied = ProxyMetadata.from_dict({"sourceType": {"value": "  "}, "availability": {"value": "derived"}})
        merged = MetadataRules.merge_instance_values(current, supplied)
        assert merged.get("sourceType").value == "survey"
        assert merged.get("availability").value == "derived"
        assert merged.get("availability").type == MetadataType.DEFAULT

    def test_submission_needs_required_values(self, seed):
        metadata = ProxyMetadata.from_dict(seed.template_metadata())
        with pytest.raises(BadRequestError, match="dateOfData"):
            MetadataRules.ensure_ready_for_submission("sp-1", metadata)

        filled = MetadataRules.merge_instance_values(metadata, ProxyMetadata.from_dict(seed.required_values()))
        MetadataRules.ensure_ready_for_submission("sp-1", filled)

    def test_instance_incomplete_without_every_field(self):
        metadata = ProxyMetadata.from_dict({"certified": {"type": "static", "value": True}})
        with pytest.raises(BadRequestError, match="not filled in completely"):
            MetadataRules.ensure_instance_complete("sp-1", metadata)


class TestVisibilityPolicy:
    @pytest.mark.parametrize("status", [TemplateStatus.REQUESTED, TemplateStatus.REJECTED])
    def test_pending_template_is_hidden_from_other_communities(self, status):
        with pytest.raises(ForbiddenError):
            VisibilityPolicy.ensure_template_readable("resiloc proxy", status, Visibility.PUBLIC, False, False)

    def test_draft_template_is_hidden_from_other_communities(self):
        with pytest.raises(ForbiddenError):
            VisibilityPolicy.ensure_template_readable(
                "resiloc proxy", TemplateStatus.VERIFIED, Visibility.DRAFT, False, False
            )

    def test_owner_and_admin_can_read_pending_drafts(self):
        VisibilityPolicy.ensure_template_readable("resiloc proxy", "requested", "draft", False, True)
        VisibilityPolicy.ensure_template_readable("resiloc proxy", "requested", "draft", True, False)

    def test_creation_status(self):
        assert VisibilityPolicy.creation_status(True) == (TemplateStatus.VERIFIED, None)
        assert VisibilityPolicy.creation_status(False) == (TemplateStatus.REQUESTED, Visibility.DRAFT)

    def test_approved_template_in_use_cannot_become_pending(self):
        with pytest.raises(BadRequestError):
            VisibilityPolicy.ensure_status_transition("proxy", "verified", "rejected", in_use=True)
        VisibilityPolicy.ensure_status_transition("proxy", "verified", "rejected", in_use=False)
        VisibilityPolicy.ensure_status_transition("proxy", "verified", "accepted", in_use=True)

    def test_non_owner_cannot_mutate(self):
        with pytest.raises(ForbiddenError):
            VisibilityPolicy.ensure_template_mutable("requested", "draft", is_admin=False, is_owner=False)
        with pytest.raises(ForbiddenError):
            VisibilityPolicy.ensure_template_mutable("verified", "draft", is_admin=False, is_owner=True)

    def test_community_level_filter(self):
        items = [Visibility.DRAFT, Visibility.INTERNAL, Visibility.COMMUNITY, Visibility.PUBLIC]
        assert VisibilityPolicy.filter_community_level(items, lambda item: item, False, set()) == [
            Visibility.COMMUNITY,
            Visibility.PUBLIC,
        ]
        assert VisibilityPolicy.filter_community_level(items, lambda item: item, True, set()) == items
