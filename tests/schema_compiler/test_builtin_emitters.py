"""Tests for the built-in emitters."""

import ast

import pytest

from src.schema_compiler.descriptors import InjectionKind, TypeKind, TypeRef
from src.schema_compiler.emitters.builtin import (
    CollectionReferenceEmitter,
    DocumentReferenceEmitter,
    DocumentSnapshotEmitter,
    QueryDocumentSnapshotEmitter,
    QueryEmitter,
    QuerySnapshotEmitter,
    SubcollectionAccessorsEmitter,
    preamble,
    python_type,
)
from src.schema_compiler.graph import build_graph
from tests.conftest import field, int_type, list_of, make_declaration, make_record_type, string_type

ALL_EMITTERS = [
    CollectionReferenceEmitter(),
    DocumentReferenceEmitter(),
    DocumentSnapshotEmitter(),
    QueryEmitter(),
    QuerySnapshotEmitter(),
    QueryDocumentSnapshotEmitter(),
]


@pytest.fixture
def graph(movie_type, comment_type):
    return build_graph(
        [make_declaration("movies", movie_type), make_declaration("movies/*/comments", comment_type)]
    ).raise_for_errors()


class TestPythonType:
    @pytest.mark.parametrize(
        ("type_ref", "expected"),
        [
            (string_type(), "str"),
            (string_type(nullable=True), "str | None"),
            (TypeRef(kind=TypeKind.NUMBER), "int | float"),
            (list_of(int_type()), "list[int]"),
            (TypeRef(kind=TypeKind.MAP), "dict[str, Any]"),
            (TypeRef(kind=TypeKind.MAP, arguments=[string_type(), int_type()]), "dict[str, int]"),
            (TypeRef(kind=TypeKind.OBJECT, name="Director", nullable=True), "Director | None"),
            (TypeRef(kind=TypeKind.DYNAMIC, nullable=True), "Any"),
        ],
    )
    def test_rendering(self, type_ref, expected):
        assert python_type(type_ref) == expected


class TestRenderedSource:
    """Every fragment is syntactically valid Python."""

    @pytest.mark.parametrize("emitter", ALL_EMITTERS, ids=lambda e: e.name)
    def test_fragments_parse(self, graph, emitter):
        for collection in graph:
            ast.parse(emitter.render(collection))

    def test_preamble_parses(self):
        ast.parse(preamble())

    def test_subcollection_accessors_parse(self, graph):
        ast.parse(SubcollectionAccessorsEmitter().render(graph.get("movies")))


class TestCollectionReference:
    def test_root_uses_collection_path(self, graph):
        source = CollectionReferenceEmitter().render(graph.get("movies"))

        assert "class MovieCollectionReference(MovieQuery):" in source
        assert 'firestore.collection("movies")' in source
        assert "value = Movie.from_json(snapshot.to_dict())" in source
        assert "value.id = snapshot.id" in source
        assert "data = value.to_json()" in source
        assert 'data.pop("id", None)' in source

    def test_subcollection_hangs_off_parent_document(self, graph):
        source = CollectionReferenceEmitter().render(graph.get("movies/*/comments"))

        assert "def __init__(self, parent: MovieDocumentReference) -> None:" in source
        assert 'parent.reference.collection("comments")' in source
        assert "value.movie_id = _parent_id(snapshot)" in source

    def test_required_parent_id_raises_when_missing(self):
        record = make_record_type(
            "Comment",
            [field("movie_id", string_type(), mutable=True, injections=[InjectionKind.PARENT_DOCUMENT_ID])],
        )
        graph = build_graph([make_declaration("comments", record)]).raise_for_errors()

        source = CollectionReferenceEmitter().render(graph.get("comments"))

        assert "if parent_id is None:" in source
        ast.parse(source)

    def test_derived_codec(self):
        record = make_record_type("Movie", with_codec=False, structural=True)
        graph = build_graph([make_declaration("movies", record)]).raise_for_errors()

        source = CollectionReferenceEmitter().render(graph.get("movies"))

        assert "_Movie_from_json(snapshot.to_dict())" in source
        assert "_Movie_to_json(value)" in source


class TestQuery:
    def test_where_and_order_by_per_queryable_field(self, graph):
        source = QueryEmitter().render(graph.get("movies"))

        for name in ["title", "year", "rating", "genres"]:
            assert f"def where_{name}(" in source
            assert f"def order_by_{name}(" in source
        assert "where_metadata" not in source
        assert "where_id" not in source

    def test_list_fields_use_array_operators(self, graph):
        source = QueryEmitter().render(graph.get("movies"))

        assert '"genres", "array_contains", array_contains' in source
        assert '"year", ">=", is_greater_than_or_equal_to' in source


class TestSubcollectionAccessors:
    def test_accepts_only_parents(self, graph):
        emitter = SubcollectionAccessorsEmitter()

        assert emitter.accepts(graph.get("movies"))
        assert not emitter.accepts(graph.get("movies/*/comments"))

    def test_accessor_named_after_child(self, graph):
        source = SubcollectionAccessorsEmitter().render(graph.get("movies"))

        assert "MovieDocumentReference.comments = property(" in source
        assert "return CommentCollectionReference(self)" in source
