"""Emitter dispatch over a collection graph.

For every collection (declaration order) and every emitter (registration
order), the emitter renders a fragment if it accepts the collection. The
compiler knows nothing about concrete emitters: adding an artifact means
registering another Emitter.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from src.schema_compiler.emitters.base import Emitter, OutputFragment
from src.schema_compiler.emitters.builtin import preamble
from src.schema_compiler.graph import CollectionGraph

logger = logging.getLogger(__name__)

PREAMBLE_EMITTER = "preamble"


class EmitterDispatcher:
    """Runs a fixed list of emitters over collection graphs."""

    def __init__(self, emitters: Iterable[Emitter], *, include_preamble: bool = False):
        self.emitters = list(emitters)
        self.include_preamble = include_preamble

    def iter_fragments(self, graph: CollectionGraph) -> Iterator[OutputFragment]:
        """Yield fragments lazily, in collection then emitter order."""
        if self.include_preamble:
            yield OutputFragment(emitter=PREAMBLE_EMITTER, collection_path=None, content=preamble())

        for collection in graph.all_collections:
            for emitter in self.emitters:
                if not emitter.accepts(collection):
                    logger.debug(f"{emitter.name} skipped {collection.path}")
                    continue
                yield OutputFragment(
                    emitter=emitter.name,
                    collection_path=collection.path,
                    content=emitter.render(collection),
                )

    def generate(self, graph: CollectionGraph) -> list[OutputFragment]:
        fragments = list(self.iter_fragments(graph))
        logger.info(
            f"Generated {len(fragments)} fragment(s) for {len(graph)} collection(s) "
            f"with {len(self.emitters)} emitter(s)"
        )
        return fragments


def generate(graph: CollectionGraph, emitters: Iterable[Emitter]) -> list[OutputFragment]:
    """Convenience function to run emitters over a graph."""
    return EmitterDispatcher(emitters).generate(graph)


def fragments_by_collection(
    fragments: Iterable[OutputFragment],
) -> dict[str, dict[str, str]]:
    """Group fragments as ``{collection_path: {emitter_name: content}}``.

    Fragments not tied to a collection (the preamble) are left out.
    """
    grouped: dict[str, dict[str, str]] = {}
    for fragment in fragments:
        if fragment.collection_path is None:
            continue
        grouped.setdefault(fragment.collection_path, {})[fragment.emitter] = fragment.content
    return grouped
