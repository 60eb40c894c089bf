"""Tests for the table relationship schema."""

import pytest

from linkvault.core.models import Record, Reference
from linkvault.core.schema import TableSchema
from linkvault.shared.errors import DomainError, ErrorCode


class TestSchemaConstruction:
    def test_default_schema(self, default_schema):
        assert default_schema.anchor_table == "courses"
        assert "constituents" in default_schema.tables
        assert default_schema.link_fields("courses") == frozenset({"lessons"})

    def test_referenced_only_tables_get_an_entry(self):
        schema = TableSchema({"a": ["b"]}, "a")

        assert schema.tables == frozenset({"a", "b"})
        assert schema.link_fields("b") == frozenset()

    def test_unknown_anchor_rejected(self):
        with pytest.raises(DomainError) as exc_info:
            TableSchema({"a": []}, "missing")

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    def test_empty_prefix_rejected(self):
        with pytest.raises(DomainError):
            TableSchema({"a": []}, "a", reference_prefix="")

    def test_malformed_back_reference_key_rejected(self):
        with pytest.raises(DomainError, match="table.field"):
            TableSchema({"a": ["b"]}, "a", back_references={"ab": ["a"]})


class TestDependencies:
    def test_default_dependencies_breadth_first(self, default_schema):
        assert default_schema.dependencies() == [
            "lessons",
            "pronouns",
            "sentence_structures",
            "tense_markers",
            "verbs",
        ]

    def test_unreachable_table_not_a_dependency(self, default_schema):
        assert "constituents" not in default_schema.dependencies()

    def test_cycle_terminates(self):
        schema = TableSchema({"a": ["b"], "b": ["a"]}, "a")

        assert schema.dependencies() == ["b"]
        assert schema.dependencies("b") == ["a"]

    def test_required_tables_start_with_anchor(self, default_schema):
        assert default_schema.required_tables()[0] == "courses"


class TestBackReferences:
    def test_parent_stripped_when_child_links_back(self, default_schema):
        assert default_schema.back_reference_fields("courses", "lessons") == frozenset(
            {"courses"}
        )

    def test_nothing_stripped_without_reverse_link(self, default_schema):
        assert default_schema.back_reference_fields("lessons", "verbs") == frozenset()

    def test_override_wins(self):
        schema = TableSchema(
            {"a": ["b"], "b": ["a"]},
            "a",
            back_references={"a.b": ["a", "owner"]},
        )

        assert schema.back_reference_fields("a", "b") == frozenset({"a", "owner"})


class TestClassification:
    """Tagging of raw field values at ingestion."""

    def test_non_link_field_unchanged(self, default_schema):
        assert default_schema.classify("lessons", "name", "recLooksLikeId") == "recLooksLikeId"

    def test_single_reference(self, default_schema):
        assert default_schema.classify("lessons", "verbs", "recV1") == Reference("recV1")

    def test_reference_list(self, default_schema):
        assert default_schema.classify("lessons", "verbs", ["recV1", "recV2"]) == [
            Reference("recV1"),
            Reference("recV2"),
        ]

    def test_non_prefixed_strings_stay_plain(self, default_schema):
        assert default_schema.classify("lessons", "verbs", ["ser", "estar"]) == ["ser", "estar"]

    def test_undeclared_field_stays_plain(self):
        schema = TableSchema({"a": ["b"], "c": []}, "a")

        assert schema.classify("a", "c", "recX1") == "recX1"

    def test_serialized_records_become_records(self, default_schema):
        # Given
        value = [
            {"id": "recV1", "fields": {"infinitive": "ser"}},
            "recV2",
        ]

        # When
        classified = default_schema.classify("lessons", "verbs", value)

        # Then
        assert isinstance(classified[0], Record)
        assert classified[0].fields == {"infinitive": "ser"}
        assert classified[1] == Reference("recV2")

    def test_custom_prefix(self):
        schema = TableSchema({"a": ["b"]}, "a", reference_prefix="id_")

        assert schema.classify("a", "b", "id_7") == Reference("id_7")
        assert schema.classify("a", "b", "rec7") == "rec7"


class TestIngestion:
    def test_record_from_dict(self, default_schema):
        # Given
        payload = {
            "id": "recL1",
            "createdTime": "2024-01-01T00:00:00.000Z",
            "fields": {"name": "Intro", "verbs": ["recV1"]},
        }

        # When
        record = default_schema.record_from_dict("lessons", payload)

        # Then
        assert record.id == "recL1"
        assert record.created_time == "2024-01-01T00:00:00.000Z"
        assert record.fields == {"name": "Intro", "verbs": [Reference("recV1")]}

    def test_missing_fields_means_empty(self, default_schema):
        assert default_schema.record_from_dict("verbs", {"id": "recV1"}).fields == {}

    def test_nested_records_classified_by_their_table(self, default_schema):
        # Given
        payload = {
            "id": "recC1",
            "fields": {
                "lessons": [
                    {"id": "recL1", "fields": {"verbs": ["recV1"]}},
                ]
            },
        }

        # When
        course = default_schema.record_from_dict("courses", payload)

        # Then
        lesson = course.fields["lessons"][0]
        assert lesson.fields["verbs"] == [Reference("recV1")]

    @pytest.mark.parametrize(
        "payload",
        [
            {"fields": {}},
            {"id": "", "fields": {}},
            {"id": 5, "fields": {}},
            {"id": "recA1", "fields": ["not", "a", "mapping"]},
        ],
    )
    def test_malformed_payload_rejected(self, default_schema, payload):
        with pytest.raises(DomainError) as exc_info:
            default_schema.record_from_dict("verbs", payload)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR


class TestSchemaMetadata:
    def test_to_dict_from_dict_equal(self):
        schema = TableSchema(
            {"a": ["b"], "b": ["a"]},
            "a",
            back_references={"a.b": ["a"]},
        )

        assert TableSchema.from_dict(schema.to_dict()) == schema

    def test_to_dict_is_order_independent(self):
        first = TableSchema({"a": ["c", "b"], "b": [], "c": []}, "a")
        second = TableSchema({"c": [], "b": [], "a": ["b", "c"]}, "a")

        assert first.to_dict() == second.to_dict()

    def test_different_relationships_differ(self, default_schema):
        other = TableSchema({"courses": []}, "courses")

        assert other != default_schema
