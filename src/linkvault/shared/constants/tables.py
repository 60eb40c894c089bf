"""
Table Relationship Constants

The default relationship graph of the lessons base: for every table, the
names of the fields that link to other tables. A field name equals the
name of the table it references.
"""

from typing import ClassVar


class Tables:
    """Default table names and relationship graph."""

    COURSES = "courses"
    LESSONS = "lessons"
    SENTENCE_STRUCTURES = "sentence_structures"
    TENSE_MARKERS = "tense_markers"
    VERBS = "verbs"
    PRONOUNS = "pronouns"
    CONSTITUENTS = "constituents"

    ANCHOR = COURSES

    RELATIONSHIPS: ClassVar[dict[str, list[str]]] = {
        COURSES: [LESSONS],
        LESSONS: [
            COURSES,
            SENTENCE_STRUCTURES,
            TENSE_MARKERS,
            VERBS,
            PRONOUNS,
        ],
        SENTENCE_STRUCTURES: [],
        TENSE_MARKERS: [],
        VERBS: [],
        PRONOUNS: [],
        CONSTITUENTS: [],
    }
