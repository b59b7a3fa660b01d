"""Collection graph builder.

Declarations only state their own path; the hierarchy is inferred from it:

    movies                      root
    movies/*/comments           child of "movies"
    movies/*/comments/*/likes   child of "movies/*/comments"

Build order:
1. Compile each declaration independently (path, record type,
   serialization, injections, queryable fields), collecting diagnostics
2. Partition compiled descriptors into roots and sub-collections
3. Link every sub-collection to the collection whose path equals its own
   path up to the last "/*/"
4. Name generated classes; a record type backing several collections gets
   per-collection names derived from each path

Diagnostics are reported in declaration order, whichever phase found them.

The graph is built once per compilation unit and is read-only afterwards.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from operator import itemgetter

from src.schema_compiler.collection import CollectionDescriptor
from src.schema_compiler.compiler.context import CompilationContext
from src.schema_compiler.compiler.injection_resolver import FieldInjection, collect_injections
from src.schema_compiler.compiler.path_validator import (
    ValidatedPath,
    parent_path_of,
    validate_path,
)
from src.schema_compiler.compiler.queryable_fields import select_queryable_fields
from src.schema_compiler.compiler.serialization_resolver import (
    resolve_serialization,
    resolve_serialization_errors,
)
from src.schema_compiler.descriptors import RawCollectionDeclaration
from src.schema_compiler.errors import (
    DeclarationError,
    ErrorCode,
    GraphError,
    PathError,
    SchemaCompilationError,
    SchemaError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Graph
# =============================================================================


class CollectionGraph:
    """Every collection of a compilation unit, indexed by path.

    The graph exclusively owns its descriptors; descriptors only hold weak
    references to their parents.
    """

    def __init__(self, collections: Iterable[CollectionDescriptor]):
        self._by_path: dict[str, CollectionDescriptor] = {}
        for collection in collections:
            self._by_path[collection.path] = collection

    def __repr__(self) -> str:
        return f"CollectionGraph(roots: {self.roots}, subcollections: {self.subcollections})"

    def __iter__(self) -> Iterator[CollectionDescriptor]:
        return iter(self._by_path.values())

    def __len__(self) -> int:
        return len(self._by_path)

    def __contains__(self, path: object) -> bool:
        return path in self._by_path

    @property
    def roots(self) -> list[CollectionDescriptor]:
        return [c for c in self._by_path.values() if c.is_root]

    @property
    def subcollections(self) -> list[CollectionDescriptor]:
        return [c for c in self._by_path.values() if not c.is_root]

    @property
    def all_collections(self) -> list[CollectionDescriptor]:
        """Every collection, in declaration order."""
        return list(self._by_path.values())

    def get(self, path: str) -> CollectionDescriptor | None:
        return self._by_path.get(path)

    def walk(self) -> Iterator[CollectionDescriptor]:
        """Depth-first traversal, parents before their children."""
        stack = list(reversed(self.roots))
        while stack:
            collection = stack.pop()
            yield collection
            stack.extend(reversed(collection.children))


@dataclass
class GraphBuildResult:
    """Result of building a graph: the graph, or the diagnostics."""

    graph: CollectionGraph | None = None
    errors: list[SchemaError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def raise_for_errors(self) -> CollectionGraph:
        """Return the graph, or raise every diagnostic at once."""
        if self.errors or self.graph is None:
            raise SchemaCompilationError(self.errors)
        return self.graph


# =============================================================================
# Builder
# =============================================================================


class GraphBuilder:
    """Compiles raw declarations and links them into a CollectionGraph."""

    def __init__(
        self,
        declarations: Iterable[RawCollectionDeclaration],
        *,
        fail_fast: bool = False,
    ):
        self.declarations = list(declarations)
        self.ctx = CompilationContext(fail_fast=fail_fast)

        # Paths whose declaration produced diagnostics
        self._failed_paths: set[str] = set()
        # (declaration index, error), so diagnostics can be reported in input order
        self._indexed_errors: list[tuple[int, SchemaError]] = []

    def build(self) -> GraphBuildResult:
        """Run all phases and return the result.

        Raises:
            SchemaError: Only in fail-fast mode, on the first diagnostic.
        """
        compiled: list[tuple[int, CollectionDescriptor]] = []
        seen: dict[str, RawCollectionDeclaration] = {}

        for index, declaration in enumerate(self.declarations):
            errors_before = len(self.ctx.errors)
            descriptor = self.compile_declaration(declaration)
            if descriptor is not None:
                if descriptor.path in seen:
                    self.ctx.add_error(
                        GraphError(
                            ErrorCode.DUPLICATE_COLLECTION_PATH,
                            f'Collection path "{descriptor.path}" is declared more than once '
                            f"(first at {seen[descriptor.path].site}).",
                            element=str(declaration.site),
                            todo="Declare each collection path exactly once.",
                        )
                    )
                else:
                    seen[descriptor.path] = declaration
                    compiled.append((index, descriptor))
            self._record_errors(index, errors_before)

        self._link(compiled)
        self._assign_class_names(compiled)

        if not self.ctx.is_valid:
            logger.info(f"Collection graph has {len(self.ctx.errors)} error(s)")
            return GraphBuildResult(errors=self._ordered_errors())

        collections = [descriptor for _, descriptor in compiled]
        graph = CollectionGraph(collections)
        logger.info(
            f"Built collection graph: {len(graph.roots)} root(s), "
            f"{len(graph.subcollections)} sub-collection(s)"
        )
        return GraphBuildResult(graph=graph)

    def compile_declaration(
        self, declaration: RawCollectionDeclaration
    ) -> CollectionDescriptor | None:
        """Compile one declaration; None when it has diagnostics.

        Path and record type are checked independently so both are reported.
        """
        site = declaration.site
        errors_before = len(self.ctx.errors)

        path: ValidatedPath | None = None
        injections: tuple[FieldInjection, ...] = ()
        try:
            path = validate_path(declaration.path, element=str(site))
        except PathError as e:
            self.ctx.add_error(e)

        record_type = declaration.record_type
        if record_type is None:
            self.ctx.add_error(
                DeclarationError(
                    ErrorCode.UNTYPED_COLLECTION,
                    f'Collection "{declaration.path}" was declared, but no record type '
                    "was specified.",
                    element=str(site),
                    todo='Instead of Collection("path") use Collection[MyClass]("path").',
                )
            )
        elif not record_type.is_class:
            self.ctx.add_error(
                DeclarationError(
                    ErrorCode.NOT_A_CLASS,
                    f"Collection can only receive classes as record type, "
                    f"got {record_type.name}.",
                    element=str(site),
                )
            )
        else:
            self.ctx.extend(resolve_serialization_errors(record_type, site))
            injections = collect_injections(record_type, self.ctx)

        if len(self.ctx.errors) > errors_before or path is None or record_type is None:
            self._failed_paths.add(declaration.path)
            return None

        descriptor = CollectionDescriptor(
            record_type=record_type,
            path=path,
            serialization=resolve_serialization(record_type, site),
            name=declaration.name,
            queryable_fields=select_queryable_fields(record_type, injections),
            injections=injections,
            site=site,
        )
        logger.debug(f"Compiled {descriptor!r}")
        return descriptor

    def _link(self, compiled: list[tuple[int, CollectionDescriptor]]) -> None:
        by_path = {descriptor.path: descriptor for _, descriptor in compiled}

        for index, subcollection in compiled:
            if subcollection.is_root:
                continue
            errors_before = len(self.ctx.errors)
            self._link_subcollection(subcollection, by_path)
            self._record_errors(index, errors_before)

    def _link_subcollection(
        self,
        subcollection: CollectionDescriptor,
        by_path: dict[str, CollectionDescriptor],
    ) -> None:
        parent_path = parent_path_of(subcollection.path)
        if parent_path is None:
            self.ctx.add_error(
                GraphError(
                    ErrorCode.DANGLING_WILDCARD,
                    f"Defined a sub-collection with path {subcollection.path} but "
                    "the path does not point to a sub-collection.",
                    element=str(subcollection.site),
                )
            )
            return

        parent = by_path.get(parent_path)
        if parent is None:
            if parent_path in self._failed_paths:
                logger.debug(
                    f"Skipping {subcollection.path}: parent {parent_path} failed to compile"
                )
                return
            self.ctx.add_error(
                GraphError(
                    ErrorCode.ORPHAN_SUBCOLLECTION,
                    f'Defined a sub-collection with path "{subcollection.path}" '
                    f'but no collection with path "{parent_path}" found.',
                    element=str(subcollection.site),
                    todo=f'Declare a collection with path "{parent_path}".',
                )
            )
            return

        parent._attach_child(subcollection)

    def _assign_class_names(self, compiled: list[tuple[int, CollectionDescriptor]]) -> None:
        """Qualify names of shared record types and reject remaining clashes."""
        usage = Counter(descriptor.record_type.name for _, descriptor in compiled)
        for _, descriptor in compiled:
            if usage[descriptor.record_type.name] > 1:
                descriptor._qualify_class_name()
                logger.debug(f"{descriptor.path} generates classes as {descriptor.class_name}")

        owners: dict[str, CollectionDescriptor] = {}
        for index, descriptor in compiled:
            owner = owners.setdefault(descriptor.class_name, descriptor)
            if owner is descriptor:
                continue
            errors_before = len(self.ctx.errors)
            self.ctx.add_error(
                GraphError(
                    ErrorCode.CONFLICTING_CLASS_NAME,
                    f'Collections "{owner.path}" and "{descriptor.path}" would both '
                    f"generate classes named {descriptor.class_name}.",
                    element=str(descriptor.site),
                    todo="Rename the record type or the collection path.",
                )
            )
            self._record_errors(index, errors_before)

    def _record_errors(self, index: int, errors_before: int) -> None:
        self._indexed_errors.extend((index, error) for error in self.ctx.errors[errors_before:])

    def _ordered_errors(self) -> list[SchemaError]:
        # sorted() is stable: errors of one declaration keep their phase order
        return [error for _, error in sorted(self._indexed_errors, key=itemgetter(0))]


def build_graph(
    declarations: Iterable[RawCollectionDeclaration],
    *,
    fail_fast: bool = False,
) -> GraphBuildResult:
    """Convenience function to build a collection graph."""
    return GraphBuilder(declarations, fail_fast=fail_fast).build()
