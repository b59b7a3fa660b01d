"""Input boundary models for the schema compiler.

The annotation-discovery collaborator reduces program source to a list of
RawCollectionDeclaration plus, for each referenced record type, a
RecordTypeDescriptor describing its members, constructors and methods.

Uses Pydantic so the collaborator can hand declarations over as plain
dicts/JSON (``RawCollectionDeclaration.model_validate(...)``).

All models are frozen: the compiler never mutates its input.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Enums
# =============================================================================


class TypeKind(str, Enum):
    """Coarse classification of a declared type."""

    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    NUMBER = "number"
    LIST = "list"
    MAP = "map"
    OBJECT = "object"
    DYNAMIC = "dynamic"


# Kinds usable directly in query predicates
PRIMITIVE_KINDS = frozenset(
    {TypeKind.STRING, TypeKind.BOOL, TypeKind.INT, TypeKind.FLOAT, TypeKind.NUMBER}
)


class MemberKind(str, Enum):
    """Data member flavour."""

    FIELD = "field"
    PROPERTY = "property"


class InjectionKind(str, Enum):
    """Document metadata that can be injected into a record member."""

    DOCUMENT_ID = "id"
    DOCUMENT_PATH = "path"
    PARENT_DOCUMENT_ID = "parent_id"


# =============================================================================
# Types and signatures
# =============================================================================


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class TypeRef(_Frozen):
    """A declared type, e.g. ``list<string>?``."""

    kind: TypeKind
    name: str = ""
    nullable: bool = False
    arguments: list[TypeRef] = Field(default_factory=list)

    @property
    def is_string(self) -> bool:
        return self.kind == TypeKind.STRING

    @property
    def is_primitive(self) -> bool:
        return self.kind in PRIMITIVE_KINDS

    @property
    def is_string_keyed_map(self) -> bool:
        """True for ``map`` and ``map<string, V>``.

        A bare map (no type arguments) is accepted the same way a raw
        ``Map`` is accepted as a JSON object.
        """
        if self.kind != TypeKind.MAP:
            return False
        if not self.arguments:
            return True
        return self.arguments[0].is_string

    @property
    def display(self) -> str:
        base = self.name or self.kind.value
        if self.arguments:
            base = f"{base}<{', '.join(arg.display for arg in self.arguments)}>"
        return f"{base}?" if self.nullable else base


class ParameterDescriptor(_Frozen):
    """A constructor or method parameter."""

    name: str
    type: TypeRef
    required: bool = True
    positional: bool = True

    @property
    def is_required_positional(self) -> bool:
        return self.required and self.positional


class ConstructorDescriptor(_Frozen):
    """A constructor; an empty name is the unnamed/default constructor."""

    name: str = ""
    parameters: list[ParameterDescriptor] = Field(default_factory=list)


class MethodDescriptor(_Frozen):
    """An instance or static method."""

    name: str
    parameters: list[ParameterDescriptor] = Field(default_factory=list)
    return_type: TypeRef = Field(default_factory=lambda: TypeRef(kind=TypeKind.DYNAMIC))
    static: bool = False


class MemberDescriptor(_Frozen):
    """A data member (field or property) of a record type."""

    name: str
    type: TypeRef
    kind: MemberKind = MemberKind.FIELD
    mutable: bool = True  # non-final field, or property with a setter
    public: bool = True
    injections: list[InjectionKind] = Field(default_factory=list)


class RecordTypeDescriptor(_Frozen):
    """Reflective view of the type stored in a collection."""

    name: str
    library: str = ""
    is_class: bool = True
    members: list[MemberDescriptor] = Field(default_factory=list)
    constructors: list[ConstructorDescriptor] = Field(default_factory=list)
    methods: list[MethodDescriptor] = Field(default_factory=list)
    has_structural_serializer: bool = False

    @property
    def fields(self) -> list[MemberDescriptor]:
        return [m for m in self.members if m.kind == MemberKind.FIELD]

    @property
    def properties(self) -> list[MemberDescriptor]:
        return [m for m in self.members if m.kind == MemberKind.PROPERTY]

    def find_constructor(self, name: str) -> ConstructorDescriptor | None:
        return next((c for c in self.constructors if c.name == name), None)

    def find_method(self, name: str) -> MethodDescriptor | None:
        return next((m for m in self.methods if m.name == name), None)


# =============================================================================
# Declarations
# =============================================================================


class DeclarationSite(_Frozen):
    """Where a collection annotation was found, for diagnostics."""

    symbol: str = ""
    library: str = ""
    line: int | None = None

    def __str__(self) -> str:
        location = self.library or "<unknown>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location} ({self.symbol})" if self.symbol else location


class RawCollectionDeclaration(_Frozen):
    """One collection annotation, as reported by annotation discovery.

    ``record_type`` is None when the annotation carried no type argument.
    """

    path: str
    name: str | None = None
    record_type: RecordTypeDescriptor | None = None
    site: DeclarationSite = Field(default_factory=DeclarationSite)

    @classmethod
    def from_annotation(
        cls,
        annotation: dict[str, Any],
        record_type: RecordTypeDescriptor | None,
        site: DeclarationSite | None = None,
    ) -> RawCollectionDeclaration:
        """Build a declaration from the annotation's raw ``{path, name}`` mapping.

        Raises:
            KeyError: If the mapping has no ``path``.
        """
        return cls(
            path=annotation["path"],
            name=annotation.get("name"),
            record_type=record_type,
            site=site or DeclarationSite(),
        )
