"""End-to-end tests for schema compilation."""

import ast

import pytest

from src.schema_compiler.emitters.builtin import QuerySnapshotEmitter
from src.schema_compiler.errors import ErrorCode, PathError, SchemaCompilationError
from src.schema_compiler.pipeline import SchemaPipeline, compile_schema
from src.schema_compiler.settings import CompilerSettings
from tests.conftest import make_declaration, make_record_type


def test_compiles_movies_with_comments(movie_type, comment_type, settings):
    output = compile_schema(
        [make_declaration("movies", movie_type), make_declaration("movies/*/comments", comment_type)],
        settings=settings,
    )

    by_collection = output.by_collection()
    assert set(by_collection) == {"movies", "movies/*/comments"}
    assert "subcollection_accessors" in by_collection["movies"]
    assert "subcollection_accessors" not in by_collection["movies/*/comments"]
    assert len(by_collection["movies/*/comments"]) == 6
    ast.parse(output.render())


def test_settings_select_emitters(movie_type):
    settings = CompilerSettings(emitters=("query",))

    output = compile_schema([make_declaration("movies", movie_type)], settings=settings)

    assert [f.emitter for f in output.fragments] == ["preamble", "query"]


def test_explicit_emitters_override_settings(movie_type):
    output = SchemaPipeline(emitters=[QuerySnapshotEmitter()], settings=CompilerSettings(emitters=("query",))).process(
        [make_declaration("movies", movie_type)]
    )

    assert [f.emitter for f in output.fragments] == ["preamble", "query_snapshot"]


def test_orphan_raises_aggregate(settings):
    with pytest.raises(SchemaCompilationError) as exc_info:
        compile_schema([make_declaration("movies/*/comments")], settings=settings)

    assert exc_info.value.codes == [ErrorCode.ORPHAN_SUBCOLLECTION]
    assert 'no collection with path "movies"' in str(exc_info.value)


def test_all_diagnostics_reported_together(settings):
    with pytest.raises(SchemaCompilationError) as exc_info:
        compile_schema(
            [make_declaration("a/b"), make_declaration("movies", make_record_type("Movie", with_codec=False))],
            settings=settings,
        )

    assert exc_info.value.codes == [
        ErrorCode.POINTS_TO_DOCUMENT,
        ErrorCode.MISSING_DECODER,
        ErrorCode.MISSING_ENCODER,
    ]


def test_fail_fast_setting():
    with pytest.raises(PathError):
        compile_schema(
            [make_declaration("a/b"), make_declaration("c/*/d")],
            settings=CompilerSettings(fail_fast=True),
        )
