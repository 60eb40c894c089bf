"""Tests for record and field value models."""

from linkvault.core.models import (
    Record,
    Reference,
    is_reference_value,
    records_to_dicts,
    reference_ids,
    serialize_field_value,
)


class TestReference:
    def test_str_is_record_id(self):
        assert str(Reference("recA1")) == "recA1"

    def test_references_compare_by_id(self):
        assert Reference("recA1") == Reference("recA1")
        assert Reference("recA1") != Reference("recA2")


class TestReferenceValues:
    """Detection of tagged link values."""

    def test_single_reference(self):
        assert is_reference_value(Reference("recA1")) is True

    def test_reference_list(self):
        assert is_reference_value([Reference("recA1"), Reference("recA2")]) is True

    def test_empty_list_is_not_reference(self):
        assert is_reference_value([]) is False

    def test_mixed_list_is_not_reference(self):
        assert is_reference_value([Reference("recA1"), Record(id="recB1")]) is False

    def test_plain_string_is_not_reference(self):
        assert is_reference_value("recA1") is False

    def test_reference_ids_keep_order(self):
        value = [Reference("recB2"), Reference("recB1")]

        assert reference_ids(value) == ["recB2", "recB1"]
        assert reference_ids(Reference("recA1")) == ["recA1"]
        assert reference_ids("plain") == []


class TestRecord:
    def test_copy_is_independent(self):
        # Given
        original = Record(id="recL1", fields={"verbs": [Reference("recV1")], "name": "Intro"})

        # When
        clone = original.copy()
        clone.fields["verbs"].append(Reference("recV2"))
        clone.fields["name"] = "Changed"

        # Then
        assert original.fields == {"verbs": [Reference("recV1")], "name": "Intro"}
        assert clone.id == original.id

    def test_to_dict_serializes_nested_values(self):
        # Given
        verb = Record(id="recV1", fields={"infinitive": "ser"})
        lesson = Record(
            id="recL1",
            fields={"verbs": [verb], "courses": Reference("recC1"), "name": "Intro"},
            created_time="2024-01-01T00:00:00.000Z",
        )

        # When
        data = lesson.to_dict()

        # Then
        assert data == {
            "id": "recL1",
            "createdTime": "2024-01-01T00:00:00.000Z",
            "fields": {
                "verbs": [{"id": "recV1", "fields": {"infinitive": "ser"}}],
                "courses": "recC1",
                "name": "Intro",
            },
        }

    def test_to_dict_omits_missing_created_time(self):
        assert "createdTime" not in Record(id="recA1").to_dict()

    def test_serialize_field_value_passes_scalars(self):
        assert serialize_field_value(3) == 3
        assert serialize_field_value(["a", "b"]) == ["a", "b"]

    def test_records_to_dicts(self):
        records = [Record(id="recA1"), Record(id="recA2")]

        assert [item["id"] for item in records_to_dicts(records)] == ["recA1", "recA2"]
