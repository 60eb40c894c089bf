"""Tests for path expression lookup."""

import pytest

from linkvault.core.paths import get_nested_value, parse_path
from linkvault.shared.errors import DomainError, ErrorCode


@pytest.fixture
def courses():
    return [
        {
            "id": "recC1",
            "fields": {
                "name": "Spanish 101",
                "lessons": [
                    {"id": "recL1", "fields": {"name": "Intro"}},
                    {"id": "recL2", "fields": {"name": "Basics"}},
                ],
            },
        }
    ]


class TestParsePath:
    def test_keys_and_indexes(self):
        assert parse_path("0.fields.lessons[1].fields.name") == [
            0,
            "fields",
            "lessons",
            1,
            "fields",
            "name",
        ]

    def test_chained_indexes(self):
        assert parse_path("grid[0][-1]") == ["grid", 0, -1]

    @pytest.mark.parametrize("path", ["", "   ", "a..b", "a[x]", "a]b"])
    def test_malformed_paths(self, path):
        with pytest.raises(DomainError) as exc_info:
            parse_path(path)

        assert exc_info.value.code == ErrorCode.INVALID_PATH_EXPRESSION


class TestGetNestedValue:
    def test_deep_lookup(self, courses):
        assert get_nested_value(courses, "0.fields.lessons[1].fields.name") == "Basics"

    def test_negative_index(self, courses):
        assert get_nested_value(courses, "0.fields.lessons[-1].id") == "recL2"

    def test_missing_key_returns_none(self, courses):
        assert get_nested_value(courses, "0.fields.missing.name") is None

    def test_index_out_of_range_returns_none(self, courses):
        assert get_nested_value(courses, "3.id") is None

    def test_key_on_list_returns_none(self, courses):
        assert get_nested_value(courses, "fields") is None

    def test_whole_subtree(self, courses):
        assert get_nested_value(courses, "0.fields.lessons[0]") == {
            "id": "recL1",
            "fields": {"name": "Intro"},
        }
