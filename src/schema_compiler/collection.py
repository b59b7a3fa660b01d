"""Resolved model of one collection.

A CollectionDescriptor aggregates everything the emitters need about a
collection: its record type, validated path, serialization contract,
injections, queryable fields, and its place in the collection hierarchy.

Descriptors are owned by the CollectionGraph. Parent links are weak
references; children are only attached by the graph builder.
"""

from __future__ import annotations

import weakref

from src.schema_compiler.compiler.injection_resolver import FieldInjection
from src.schema_compiler.compiler.path_validator import ValidatedPath
from src.schema_compiler.compiler.queryable_fields import QueryableField
from src.schema_compiler.compiler.serialization_resolver import SerializationContract
from src.schema_compiler.descriptors import DeclarationSite, RecordTypeDescriptor
from src.schema_compiler.naming import camel_case, upper_first_letter

__all__ = ["CollectionDescriptor", "FieldInjection", "QueryableField"]


class CollectionDescriptor:
    """A validated collection, root or nested."""

    def __init__(
        self,
        *,
        record_type: RecordTypeDescriptor,
        path: ValidatedPath,
        serialization: SerializationContract,
        name: str | None = None,
        queryable_fields: tuple[QueryableField, ...] = (),
        injections: tuple[FieldInjection, ...] = (),
        site: DeclarationSite | None = None,
    ):
        self.record_type = record_type
        self.validated_path = path
        self.serialization = serialization
        self.name = name or camel_case(path.last_literal)
        self.queryable_fields = tuple(queryable_fields)
        self.injections = tuple(injections)
        self.site = site or DeclarationSite()

        self._parent: weakref.ref[CollectionDescriptor] | None = None
        self._children: list[CollectionDescriptor] = []
        self._class_name: str | None = None

    def __repr__(self) -> str:
        return (
            f"CollectionDescriptor(type: {self.record_type.name}, "
            f"name: {self.name}, path: {self.path})"
        )

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    @property
    def path(self) -> str:
        return self.validated_path.raw

    @property
    def is_root(self) -> bool:
        return not self.validated_path.is_nested

    @property
    def parent(self) -> CollectionDescriptor | None:
        return self._parent() if self._parent is not None else None

    @property
    def children(self) -> tuple[CollectionDescriptor, ...]:
        return tuple(self._children)

    def _attach_child(self, child: CollectionDescriptor) -> None:
        """Link child under this descriptor. Only called by the graph builder."""
        if child._parent is not None:
            raise ValueError(f"{child.path} already has a parent")
        child._parent = weakref.ref(self)
        self._children.append(child)

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def decode(self, json_expression: str) -> str:
        return self.serialization.decode(json_expression)

    def encode(self, value_expression: str) -> str:
        return self.serialization.encode(value_expression)

    # -------------------------------------------------------------------------
    # Generated names
    # -------------------------------------------------------------------------

    @property
    def class_name(self) -> str:
        """Prefix of every generated class; the record type name unless qualified."""
        return self._class_name or upper_first_letter(self.record_type.name)

    def _qualify_class_name(self) -> None:
        """Derive class names from the path, e.g. "movies/*/comments" -> MoviesComments.

        Used by the graph builder when one record type backs several collections.
        """
        self._class_name = "".join(
            upper_first_letter(camel_case(literal)) for literal in self.validated_path.literals
        )

    @property
    def collection_reference_interface_name(self) -> str:
        return f"{self.class_name}CollectionReference"

    @property
    def collection_reference_impl_name(self) -> str:
        return f"_{self.class_name}CollectionReference"

    @property
    def document_reference_name(self) -> str:
        return f"{self.class_name}DocumentReference"

    @property
    def query_reference_interface_name(self) -> str:
        return f"{self.class_name}Query"

    @property
    def query_reference_impl_name(self) -> str:
        return f"_{self.class_name}Query"

    @property
    def query_snapshot_name(self) -> str:
        return f"{self.class_name}QuerySnapshot"

    @property
    def query_document_snapshot_name(self) -> str:
        return f"{self.class_name}QueryDocumentSnapshot"

    @property
    def document_snapshot_name(self) -> str:
        return f"{self.class_name}DocumentSnapshot"

    @property
    def original_document_snapshot_name(self) -> str:
        return f"DocumentSnapshot[{self.record_type.name}]"
