"""Shared test fixtures and helpers."""

import pytest

from src.schema_compiler.descriptors import (
    ConstructorDescriptor,
    DeclarationSite,
    InjectionKind,
    MemberDescriptor,
    MemberKind,
    MethodDescriptor,
    ParameterDescriptor,
    RawCollectionDeclaration,
    RecordTypeDescriptor,
    TypeKind,
    TypeRef,
)
from src.schema_compiler.settings import CompilerSettings

LIBRARY = "app/models.py"

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


def string_type(nullable: bool = False) -> TypeRef:
    return TypeRef(kind=TypeKind.STRING, name="str", nullable=nullable)


def int_type(nullable: bool = False) -> TypeRef:
    return TypeRef(kind=TypeKind.INT, name="int", nullable=nullable)


def list_of(element: TypeRef, nullable: bool = False) -> TypeRef:
    return TypeRef(kind=TypeKind.LIST, name="list", nullable=nullable, arguments=[element])


def json_map_type() -> TypeRef:
    return TypeRef(kind=TypeKind.MAP, name="dict", arguments=[string_type(), TypeRef(kind=TypeKind.DYNAMIC)])


def field(
    name: str,
    type_ref: TypeRef,
    *,
    mutable: bool = False,
    public: bool = True,
    injections: list[InjectionKind] | None = None,
) -> MemberDescriptor:
    """A field member; final (immutable) unless mutable=True."""
    return MemberDescriptor(
        name=name,
        type=type_ref,
        kind=MemberKind.FIELD,
        mutable=mutable,
        public=public,
        injections=injections or [],
    )


def setter(name: str, type_ref: TypeRef, injections: list[InjectionKind] | None = None) -> MemberDescriptor:
    """A settable property."""
    return MemberDescriptor(
        name=name,
        type=type_ref,
        kind=MemberKind.PROPERTY,
        mutable=True,
        injections=injections or [],
    )


def from_json_constructor(param_type: TypeRef | None = None) -> ConstructorDescriptor:
    return ConstructorDescriptor(
        name="from_json",
        parameters=[ParameterDescriptor(name="data", type=param_type or json_map_type())],
    )


def to_json_method(return_type: TypeRef | None = None) -> MethodDescriptor:
    return MethodDescriptor(name="to_json", return_type=return_type or json_map_type())


# ---------------------------------------------------------------------------
# Record types and declarations
# ---------------------------------------------------------------------------


def make_record_type(
    name: str = "Movie",
    members: list[MemberDescriptor] | None = None,
    *,
    with_codec: bool = True,
    structural: bool = False,
    library: str = LIBRARY,
) -> RecordTypeDescriptor:
    """Create a record type descriptor.

    Args:
        name: Type name.
        members: Data members (defaults to a `title` string field).
        with_codec: Declare from_json/to_json by hand.
        structural: Mark the type as having a derivable serializer.
        library: Module defining the type.
    """
    return RecordTypeDescriptor(
        name=name,
        library=library,
        members=members if members is not None else [field("title", string_type())],
        constructors=[from_json_constructor()] if with_codec else [],
        methods=[to_json_method()] if with_codec else [],
        has_structural_serializer=structural,
    )


def make_declaration(
    path: str,
    record_type: RecordTypeDescriptor | None = None,
    *,
    name: str | None = None,
    symbol: str = "movies_ref",
    line: int | None = None,
) -> RawCollectionDeclaration:
    return RawCollectionDeclaration(
        path=path,
        name=name,
        record_type=record_type or make_record_type(),
        site=DeclarationSite(symbol=symbol, library=LIBRARY, line=line),
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def movie_type() -> RecordTypeDescriptor:
    """A typical record with queryable, non-queryable and injected members."""
    return make_record_type(
        "Movie",
        [
            setter("id", string_type(nullable=True), [InjectionKind.DOCUMENT_ID]),
            field("title", string_type()),
            field("year", int_type()),
            field("rating", TypeRef(kind=TypeKind.FLOAT, name="float")),
            field("genres", list_of(string_type())),
            field("metadata", TypeRef(kind=TypeKind.MAP, name="dict")),
        ],
    )


@pytest.fixture
def comment_type() -> RecordTypeDescriptor:
    return make_record_type(
        "Comment",
        [
            field("author", string_type()),
            field("movie_id", string_type(nullable=True), mutable=True, injections=[InjectionKind.PARENT_DOCUMENT_ID]),
        ],
    )


@pytest.fixture
def settings() -> CompilerSettings:
    return CompilerSettings()
