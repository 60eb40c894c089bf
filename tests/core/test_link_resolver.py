"""Tests for linked record resolution."""

from collections import Counter

import pytest

from linkvault.core.link_resolver import LinkResolver, ResolutionContext
from linkvault.core.models import Record, Reference
from linkvault.core.schema import TableSchema
from linkvault.shared.errors import FetchError


class DictSource:
    """Table source over already ingested payloads."""

    def __init__(self, schema, tables, failing=()):
        self.records = {
            name: schema.records_from_payload(name, payload) for name, payload in tables.items()
        }
        self.failing = set(failing)
        self.calls = Counter()

    async def get(self, table_name):
        self.calls[table_name] += 1
        if table_name in self.failing:
            raise FetchError(table_name, ConnectionError("boom"))
        return self.records[table_name]


def anchor(source, table, record_id):
    return next(record for record in source.records[table] if record.id == record_id)


def rec(record_id, **fields):
    return {"id": record_id, "fields": fields}


class TestScenario:
    """Courses and lessons base resolved from the anchor."""

    @pytest.mark.asyncio
    async def test_course_lessons_expanded(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base)
        resolver = LinkResolver(default_schema, source)
        course = anchor(source, "courses", "recC1")

        # When
        resolved = await resolver.resolve(course, "courses")

        # Then
        lessons = resolved.fields["lessons"]
        assert [lesson.id for lesson in lessons] == ["recL1", "recL2"]
        assert all(isinstance(lesson, Record) for lesson in lessons)
        assert "courses" not in lessons[0].fields
        assert "courses" not in lessons[1].fields

    @pytest.mark.asyncio
    async def test_resolved_course_serialized(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base)
        resolver = LinkResolver(default_schema, source)
        created = "2024-01-01T00:00:00.000Z"

        def leaf(record_id, **fields):
            return {"id": record_id, "createdTime": created, "fields": fields}

        # When
        course = await resolver.resolve(anchor(source, "courses", "recC1"), "courses")

        # Then
        assert course.to_dict() == leaf(
            "recC1",
            name="Spanish 101",
            lessons=[
                leaf(
                    "recL1",
                    name="Intro",
                    verbs=[leaf("recV1", infinitive="ser")],
                    pronouns=[leaf("recP1", text="yo")],
                    tense_markers=[leaf("recT1", text="ayer")],
                    sentence_structures=[leaf("recS1", pattern="S V O")],
                ),
                leaf(
                    "recL2",
                    name="Basics",
                    verbs=["recV1", "recV2"],
                    pronouns=["recP2"],
                ),
            ],
        )

    @pytest.mark.asyncio
    async def test_first_lesson_children_expanded(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base)
        resolver = LinkResolver(default_schema, source)

        # When
        course = await resolver.resolve(anchor(source, "courses", "recC1"), "courses")

        # Then
        intro = course.fields["lessons"][0]
        assert intro.fields["verbs"][0].fields == {"infinitive": "ser"}
        assert intro.fields["pronouns"][0].fields == {"text": "yo"}
        assert intro.fields["tense_markers"][0].id == "recT1"
        assert intro.fields["sentence_structures"][0].id == "recS1"

    @pytest.mark.asyncio
    async def test_traversed_relationship_left_as_references(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base)
        resolver = LinkResolver(default_schema, source)

        # When
        course = await resolver.resolve(anchor(source, "courses", "recC1"), "courses")

        # Then
        basics = course.fields["lessons"][1]
        assert basics.fields["verbs"] == [Reference("recV1"), Reference("recV2")]
        assert basics.fields["pronouns"] == [Reference("recP2")]

    @pytest.mark.asyncio
    async def test_source_tables_not_mutated(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base)
        resolver = LinkResolver(default_schema, source)

        # When
        await resolver.resolve(anchor(source, "courses", "recC1"), "courses")

        # Then
        intro = anchor(source, "lessons", "recL1")
        assert intro.fields["courses"] == [Reference("recC1")]
        assert intro.fields["verbs"] == [Reference("recV1")]

    @pytest.mark.asyncio
    async def test_each_table_fetched_once(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base)
        resolver = LinkResolver(default_schema, source)

        # When
        await resolver.resolve(anchor(source, "courses", "recC1"), "courses")

        # Then
        assert all(count == 1 for count in source.calls.values())
        assert "constituents" not in source.calls


class TestTraversalGuards:
    @pytest.mark.asyncio
    async def test_mutual_links_terminate(self):
        # Given
        schema = TableSchema({"a": ["b"], "b": ["a"]}, "a")
        source = DictSource(
            schema,
            {"a": [rec("recA1", b=["recB1"])], "b": [rec("recB1", a=["recA1"])]},
        )
        resolver = LinkResolver(schema, source)

        # When
        resolved = await resolver.resolve(anchor(source, "a", "recA1"), "a")

        # Then
        child = resolved.fields["b"][0]
        assert child.id == "recB1"
        assert "a" not in child.fields

    @pytest.mark.asyncio
    async def test_revisited_record_becomes_reference_leaf(self):
        # Given
        schema = TableSchema({"a": ["b", "c"], "b": ["c"], "c": []}, "a")
        source = DictSource(
            schema,
            {
                "a": [rec("recA1", b=["recB1"], c=["recC1"])],
                "b": [rec("recB1", c=["recC1"])],
                "c": [rec("recC1", label="leaf")],
            },
        )
        resolver = LinkResolver(schema, source)

        # When
        resolved = await resolver.resolve(anchor(source, "a", "recA1"), "a")

        # Then
        assert resolved.fields["b"][0].fields["c"][0].fields == {"label": "leaf"}
        assert resolved.fields["c"] == [Reference("recC1")]

    @pytest.mark.asyncio
    async def test_already_visited_record_returned_unchanged(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base)
        resolver = LinkResolver(default_schema, source)
        ctx = ResolutionContext(visited_records={"recC1"})
        course = anchor(source, "courses", "recC1")

        # When
        result = await resolver.resolve(course, "courses", ctx)

        # Then
        assert result is course
        assert result.fields["lessons"] == [Reference("recL1"), Reference("recL2")]
        assert not source.calls

    @pytest.mark.asyncio
    async def test_resolving_twice_is_stable(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base)
        resolver = LinkResolver(default_schema, source)
        course = await resolver.resolve(anchor(source, "courses", "recC1"), "courses")
        first = course.to_dict()

        # When
        again = await resolver.resolve(course, "courses")

        # Then
        assert again.to_dict() == first


class TestBackReferences:
    @pytest.mark.asyncio
    async def test_override_strips_configured_fields(self):
        # Given
        schema = TableSchema(
            {"a": ["b"], "b": []},
            "a",
            back_references={"a.b": ["owner"]},
        )
        source = DictSource(
            schema,
            {"a": [rec("recA1", b=["recB1"])], "b": [rec("recB1", owner="recA1", name="x")]},
        )
        resolver = LinkResolver(schema, source)

        # When
        resolved = await resolver.resolve(anchor(source, "a", "recA1"), "a")

        # Then
        assert resolved.fields["b"][0].fields == {"name": "x"}


class TestUnresolvable:
    @pytest.mark.asyncio
    async def test_missing_ids_dropped_from_list(self):
        # Given
        schema = TableSchema({"a": ["b"], "b": []}, "a")
        source = DictSource(
            schema,
            {"a": [rec("recA1", b=["recB1", "recB9"])], "b": [rec("recB1")]},
        )
        resolver = LinkResolver(schema, source)

        # When
        resolved = await resolver.resolve(anchor(source, "a", "recA1"), "a")

        # Then
        assert [child.id for child in resolved.fields["b"]] == ["recB1"]

    @pytest.mark.asyncio
    async def test_missing_single_reference_removes_field(self):
        # Given
        schema = TableSchema({"a": ["b"], "b": []}, "a")
        source = DictSource(schema, {"a": [rec("recA1", b="recB9")], "b": []})
        resolver = LinkResolver(schema, source)

        # When
        resolved = await resolver.resolve(anchor(source, "a", "recA1"), "a")

        # Then
        assert "b" not in resolved.fields

    @pytest.mark.asyncio
    async def test_single_reference_resolved_to_record(self):
        schema = TableSchema({"a": ["b"], "b": []}, "a")
        source = DictSource(schema, {"a": [rec("recA1", b="recB1")], "b": [rec("recB1")]})
        resolver = LinkResolver(schema, source)

        resolved = await resolver.resolve(anchor(source, "a", "recA1"), "a")

        assert isinstance(resolved.fields["b"], Record)

    @pytest.mark.asyncio
    async def test_failing_table_field_removed(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base, failing={"pronouns"})
        resolver = LinkResolver(default_schema, source)
        ctx = ResolutionContext()

        # When
        course = await resolver.resolve(anchor(source, "courses", "recC1"), "courses", ctx)

        # Then
        intro, basics = course.fields["lessons"]
        assert "pronouns" not in intro.fields
        assert "pronouns" not in basics.fields
        assert intro.fields["verbs"][0].id == "recV1"
        assert ctx.unavailable_tables == {"pronouns"}
        assert source.calls["pronouns"] == 1

    @pytest.mark.asyncio
    async def test_known_unavailable_table_not_fetched(self, default_schema, lessons_base):
        # Given
        source = DictSource(default_schema, lessons_base)
        resolver = LinkResolver(default_schema, source)
        ctx = ResolutionContext(unavailable_tables={"verbs"})

        # When
        course = await resolver.resolve(anchor(source, "courses", "recC1"), "courses", ctx)

        # Then
        assert "verbs" not in course.fields["lessons"][0].fields
        assert "verbs" not in source.calls


class TestResolutionContext:
    def test_fork_shares_unavailable_tables_and_indexes(self):
        parent = ResolutionContext(visited_records={"recA1"})
        parent.visited_edges.add(("a", "b"))

        child = parent.fork()
        child.unavailable_tables.add("b")

        assert child.visited_records == set()
        assert child.visited_edges == set()
        assert parent.unavailable_tables == {"b"}
        assert child.indexes is parent.indexes

    def test_reverse_edge_counts_as_visited(self):
        ctx = ResolutionContext(visited_edges={("a", "b")})

        assert ctx.edge_visited("b", "a") is True
        assert ctx.edge_visited("a", "c") is False
