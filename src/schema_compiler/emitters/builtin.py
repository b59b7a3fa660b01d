"""Built-in emitters for the typed data-access layer.

One emitter per generated artifact, for every collection:
- collection_reference     typed reference to the collection
- document_reference       typed reference to one document
- document_snapshot        typed snapshot of one document
- query                    typed query builder over queryable fields
- query_snapshot           typed result of a query
- query_document_snapshot  typed document inside a query result

Plus subcollection_accessors, only for collections with children.

Output is Python source wrapping a google-cloud-firestore style client handed
in at runtime. Assembling fragments into modules is left to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.schema_compiler.descriptors import InjectionKind, TypeKind, TypeRef
from src.schema_compiler.emitters.base import Emitter, SourceWriter
from src.schema_compiler.naming import camel_case

if TYPE_CHECKING:
    from src.schema_compiler.collection import CollectionDescriptor

GENERATED_HEADER = "# GENERATED CODE - DO NOT MODIFY BY HAND"

_PYTHON_TYPES = {
    TypeKind.STRING: "str",
    TypeKind.BOOL: "bool",
    TypeKind.INT: "int",
    TypeKind.FLOAT: "float",
    TypeKind.NUMBER: "int | float",
    TypeKind.DYNAMIC: "Any",
}

# Expression reading each injected value from a DocumentSnapshot named `snapshot`
_INJECTION_SOURCES = {
    InjectionKind.DOCUMENT_ID: "snapshot.id",
    InjectionKind.DOCUMENT_PATH: "snapshot.reference.path",
    InjectionKind.PARENT_DOCUMENT_ID: "_parent_id(snapshot)",
}


def python_type(type_ref: TypeRef) -> str:
    """Render a TypeRef as a Python annotation."""
    if type_ref.kind in _PYTHON_TYPES:
        rendered = _PYTHON_TYPES[type_ref.kind]
    elif type_ref.kind == TypeKind.LIST:
        element = python_type(type_ref.arguments[0]) if type_ref.arguments else "Any"
        rendered = f"list[{element}]"
    elif type_ref.kind == TypeKind.MAP:
        if len(type_ref.arguments) == 2:
            rendered = f"dict[{python_type(type_ref.arguments[0])}, {python_type(type_ref.arguments[1])}]"
        else:
            rendered = "dict[str, Any]"
    else:
        rendered = type_ref.name or "Any"

    if type_ref.nullable and rendered != "Any":
        return f"{rendered} | None"
    return rendered


def preamble() -> str:
    """Source emitted once per compilation unit, before any collection."""
    out = SourceWriter()
    out.line(GENERATED_HEADER)
    out.line("# ruff: noqa")
    out.line()
    out.line("from __future__ import annotations")
    out.line()
    out.line("from typing import Any")
    out.line()
    out.line()
    out.line("class _Sentinel:")
    out.indent().line('"""Marks arguments that were not passed."""').dedent()
    out.line()
    out.line()
    out.line("_sentinel = _Sentinel()")
    out.line()
    out.line()
    out.line("def _parent_id(snapshot) -> str | None:")
    out.indent()
    out.line("parent = snapshot.reference.parent.parent")
    out.line("return parent.id if parent is not None else None")
    out.dedent()
    return out.render()


# =============================================================================
# Collection level
# =============================================================================


class CollectionReferenceEmitter(Emitter):
    """Typed reference to the collection, with decode/encode hooks."""

    name = "collection_reference"

    def render(self, collection: CollectionDescriptor) -> str:
        out = SourceWriter()
        record = collection.record_type.name
        parent = collection.parent

        out.line(f"class {collection.collection_reference_interface_name}({collection.query_reference_interface_name}):")
        out.indent()
        out.line(f'"""Reference to the "{collection.path}" collection."""')
        out.line()
        out.line(f'path = "{collection.path}"')
        out.line()
        if parent is None:
            out.line("def __init__(self, firestore) -> None:")
            out.indent()
            out.line(f'super().__init__(firestore.collection("{collection.path}"))')
        else:
            out.line(f"def __init__(self, parent: {parent.document_reference_name}) -> None:")
            out.indent()
            out.line("self.parent = parent")
            out.line(f'super().__init__(parent.reference.collection("{collection.validated_path.last_literal}"))')
        out.dedent()
        out.line()

        out.line("@staticmethod")
        out.line(f"def from_firestore(snapshot) -> {record}:")
        out.indent()
        out.line(f"value = {collection.decode('snapshot.to_dict()')}")
        for injection in collection.injections:
            source = _INJECTION_SOURCES[injection.kind]
            if injection.kind == InjectionKind.PARENT_DOCUMENT_ID and not injection.nullable:
                out.line(f"parent_id = {source}")
                out.line("if parent_id is None:")
                out.indent()
                out.line(
                    f'raise ValueError("{record}.{injection.target_field} requires a parent document")'
                )
                out.dedent()
                source = "parent_id"
            out.line(f"value.{injection.target_field} = {source}")
        out.line("return value")
        out.dedent()
        out.line()

        out.line("@staticmethod")
        out.line(f"def to_firestore(value: {record}) -> dict[str, Any]:")
        out.indent()
        out.line(f"data = {collection.encode('value')}")
        for injection in collection.injections:
            out.line(f'data.pop("{injection.target_field}", None)')
        out.line("return data")
        out.dedent()
        out.line()

        out.line(f"def doc(self, id: str | None = None) -> {collection.document_reference_name}:")
        out.indent()
        out.line(f"return {collection.document_reference_name}(self.reference.document(id), self)")
        out.dedent()
        out.line()

        out.line(f"def add(self, value: {record}) -> {collection.document_reference_name}:")
        out.indent()
        out.line("_, reference = self.reference.add(self.to_firestore(value))")
        out.line(f"return {collection.document_reference_name}(reference, self)")
        return out.render()


class DocumentReferenceEmitter(Emitter):
    """Typed reference to one document, with per-field update()."""

    name = "document_reference"

    def render(self, collection: CollectionDescriptor) -> str:
        out = SourceWriter()
        record = collection.record_type.name

        out.line(f"class {collection.document_reference_name}:")
        out.indent()
        out.line(f'"""Reference to a document of "{collection.path}"."""')
        out.line()
        out.line(f"def __init__(self, reference, collection: {collection.collection_reference_interface_name}) -> None:")
        out.indent()
        out.line("self.reference = reference")
        out.line("self.collection = collection")
        out.dedent()
        out.line()
        out.line("@property")
        out.line("def id(self) -> str:")
        out.indent().line("return self.reference.id").dedent()
        out.line()
        out.line(f"def get(self) -> {collection.document_snapshot_name}:")
        out.indent()
        out.line(f"return {collection.document_snapshot_name}(self.reference.get(), self)")
        out.dedent()
        out.line()
        out.line(f"def set(self, value: {record}) -> None:")
        out.indent()
        out.line("self.reference.set(self.collection.to_firestore(value))")
        out.dedent()
        out.line()
        out.line("def delete(self) -> None:")
        out.indent().line("self.reference.delete()").dedent()

        if collection.queryable_fields:
            out.line()
            params = ", ".join(
                f"{f.name}: {python_type(f.type)} | _Sentinel = _sentinel"
                for f in collection.queryable_fields
            )
            out.line(f"def update(self, *, {params}) -> None:")
            out.indent()
            out.line("data = {}")
            for f in collection.queryable_fields:
                out.line(f"if {f.name} is not _sentinel:")
                out.indent().line(f'data["{f.name}"] = {f.name}').dedent()
            out.line("self.reference.update(data)")
            out.dedent()
        return out.render()


class DocumentSnapshotEmitter(Emitter):
    """Typed snapshot of one document."""

    name = "document_snapshot"

    def render(self, collection: CollectionDescriptor) -> str:
        out = SourceWriter()
        record = collection.record_type.name

        out.line(f"class {collection.document_snapshot_name}:")
        out.indent()
        out.line(f'"""Wraps {collection.original_document_snapshot_name}."""')
        out.line()
        out.line(f"def __init__(self, snapshot, reference: {collection.document_reference_name}) -> None:")
        out.indent()
        out.line("self.snapshot = snapshot")
        out.line("self.reference = reference")
        out.line(
            f"self.data: {record} | None = "
            f"{collection.collection_reference_interface_name}.from_firestore(snapshot) "
            "if snapshot.exists else None"
        )
        out.dedent()
        out.line()
        out.line("@property")
        out.line("def exists(self) -> bool:")
        out.indent().line("return self.snapshot.exists").dedent()
        return out.render()


# =============================================================================
# Queries
# =============================================================================


class QueryEmitter(Emitter):
    """Typed query builder over the collection's queryable fields."""

    name = "query"

    def render(self, collection: CollectionDescriptor) -> str:
        out = SourceWriter()

        out.line(f"class {collection.query_reference_interface_name}:")
        out.indent()
        out.line(f'"""Query over "{collection.path}"."""')
        out.line()
        out.line("def __init__(self, reference) -> None:")
        out.indent().line("self.reference = reference").dedent()
        out.line()
        out.line(f"def get(self) -> {collection.query_snapshot_name}:")
        out.indent()
        out.line(f"return {collection.query_snapshot_name}(self.reference.get(), self)")
        out.dedent()
        out.line()
        out.line(f"def limit(self, count: int) -> {collection.query_reference_interface_name}:")
        out.indent()
        out.line(f"return {collection.query_reference_interface_name}(self.reference.limit(count))")
        out.dedent()

        for f in collection.queryable_fields:
            self._render_field(out, collection, f.name, f.type)
        return out.render()

    def _render_field(
        self,
        out: SourceWriter,
        collection: CollectionDescriptor,
        field_name: str,
        type_ref: TypeRef,
    ) -> None:
        query = collection.query_reference_interface_name
        value_type = python_type(type_ref)

        out.line()
        if type_ref.kind == TypeKind.LIST:
            element_type = python_type(type_ref.arguments[0])
            out.line(
                f"def where_{field_name}(self, *, array_contains: {element_type} | None = None, "
                f"array_contains_any: {value_type} | None = None) -> {query}:"
            )
            out.indent()
            out.line("reference = self.reference")
            out.line("if array_contains is not None:")
            out.indent()
            out.line(f'reference = reference.where("{field_name}", "array_contains", array_contains)')
            out.dedent()
            out.line("if array_contains_any is not None:")
            out.indent()
            out.line(f'reference = reference.where("{field_name}", "array_contains_any", array_contains_any)')
            out.dedent()
        else:
            operators = {
                "is_equal_to": "==",
                "is_not_equal_to": "!=",
                "is_less_than": "<",
                "is_less_than_or_equal_to": "<=",
                "is_greater_than": ">",
                "is_greater_than_or_equal_to": ">=",
            }
            params = ", ".join(f"{arg}: {value_type} | None = None" for arg in operators)
            out.line(f"def where_{field_name}(self, *, {params}) -> {query}:")
            out.indent()
            out.line("reference = self.reference")
            for arg, op in operators.items():
                out.line(f"if {arg} is not None:")
                out.indent()
                out.line(f'reference = reference.where("{field_name}", "{op}", {arg})')
                out.dedent()
        out.line(f"return {query}(reference)")
        out.dedent()

        out.line()
        out.line(f"def order_by_{field_name}(self, *, descending: bool = False) -> {query}:")
        out.indent()
        out.line('direction = "DESCENDING" if descending else "ASCENDING"')
        out.line(f'return {query}(self.reference.order_by("{field_name}", direction=direction))')
        out.dedent()


class QuerySnapshotEmitter(Emitter):
    """Typed result of a query."""

    name = "query_snapshot"

    def render(self, collection: CollectionDescriptor) -> str:
        out = SourceWriter()

        out.line(f"class {collection.query_snapshot_name}:")
        out.indent()
        out.line(f'"""Documents of "{collection.path}" matched by a query."""')
        out.line()
        out.line(f"def __init__(self, snapshots, query: {collection.query_reference_interface_name}) -> None:")
        out.indent()
        out.line(f"self.docs: list[{collection.query_document_snapshot_name}] = [")
        out.indent().line(f"{collection.query_document_snapshot_name}(snapshot) for snapshot in snapshots").dedent()
        out.line("]")
        out.line("self.query = query")
        out.dedent()
        out.line()
        out.line("def __len__(self) -> int:")
        out.indent().line("return len(self.docs)").dedent()
        return out.render()


class QueryDocumentSnapshotEmitter(Emitter):
    """Typed document inside a query result; always exists."""

    name = "query_document_snapshot"

    def render(self, collection: CollectionDescriptor) -> str:
        out = SourceWriter()
        record = collection.record_type.name

        out.line(f"class {collection.query_document_snapshot_name}:")
        out.indent()
        out.line(f'"""A "{collection.path}" document returned by a query."""')
        out.line()
        out.line("def __init__(self, snapshot) -> None:")
        out.indent()
        out.line("self.snapshot = snapshot")
        out.line("self.id: str = snapshot.id")
        out.line(
            f"self.data: {record} = "
            f"{collection.collection_reference_interface_name}.from_firestore(snapshot)"
        )
        return out.render()


# =============================================================================
# Hierarchy
# =============================================================================


class SubcollectionAccessorsEmitter(Emitter):
    """Accessors from a document reference to its sub-collections."""

    name = "subcollection_accessors"

    def accepts(self, collection: CollectionDescriptor) -> bool:
        return bool(collection.children)

    def render(self, collection: CollectionDescriptor) -> str:
        out = SourceWriter()
        owner = collection.document_reference_name
        for child in collection.children:
            accessor = f"_{camel_case(owner)}_{child.name}"
            out.line(f"def {accessor}(self) -> {child.collection_reference_interface_name}:")
            out.indent()
            out.line(f'"""The "{child.path}" sub-collection of this document."""')
            out.line(f"return {child.collection_reference_interface_name}(self)")
            out.dedent()
            out.line()
            out.line()
            out.line(f"{owner}.{child.name} = property({accessor})")
            out.line()
            out.line()
        return out.render().rstrip("\n") + "\n"
