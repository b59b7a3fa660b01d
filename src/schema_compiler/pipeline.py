"""End-to-end schema compilation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from src.schema_compiler.descriptors import RawCollectionDeclaration
from src.schema_compiler.dispatcher import EmitterDispatcher, fragments_by_collection
from src.schema_compiler.emitters.base import Emitter, OutputFragment
from src.schema_compiler.graph import CollectionGraph, build_graph
from src.schema_compiler.registries.emitters import get_emitters
from src.schema_compiler.settings import CompilerSettings, apply_log_level

logger = logging.getLogger(__name__)


@dataclass
class CompilationOutput:
    """Resolved graph plus every fragment generated from it."""

    graph: CollectionGraph
    fragments: list[OutputFragment] = field(default_factory=list)

    def by_collection(self) -> dict[str, dict[str, str]]:
        return fragments_by_collection(self.fragments)

    def render(self) -> str:
        """Concatenate all fragments, in generation order."""
        return "\n\n".join(fragment.content.rstrip("\n") for fragment in self.fragments) + "\n"


class SchemaPipeline:
    """Compiles one unit of declarations into generated fragments.

    Pipeline order:
    1. Build the collection graph (validation + linking)
    2. Raise every collected diagnostic, if any
    3. Dispatch the graph to the emitters
    """

    def __init__(
        self,
        emitters: Iterable[Emitter] | None = None,
        settings: CompilerSettings | None = None,
    ):
        self.settings = settings or CompilerSettings.from_env()
        apply_log_level(self.settings)
        if emitters is None:
            emitters = get_emitters(self.settings.emitters)
        self.dispatcher = EmitterDispatcher(emitters, include_preamble=True)

    def process(self, declarations: Iterable[RawCollectionDeclaration]) -> CompilationOutput:
        """Compile declarations.

        Args:
            declarations: Every collection declaration of the compilation unit.

        Returns:
            The graph and its generated fragments.

        Raises:
            SchemaCompilationError: With every diagnostic, when any was found.
            SchemaError: The first diagnostic, in fail-fast mode.
        """
        result = build_graph(declarations, fail_fast=self.settings.fail_fast)
        graph = result.raise_for_errors()
        return CompilationOutput(graph=graph, fragments=self.dispatcher.generate(graph))


def compile_schema(
    declarations: Iterable[RawCollectionDeclaration],
    emitters: Iterable[Emitter] | None = None,
    settings: CompilerSettings | None = None,
) -> CompilationOutput:
    """Convenience function to compile declarations into fragments."""
    return SchemaPipeline(emitters=emitters, settings=settings).process(declarations)
