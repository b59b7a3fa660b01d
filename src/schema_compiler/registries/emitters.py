"""Emitter registry.

Maps emitter names (as used in ODM_COMPILER_EMITTERS) to emitter factories.
Registration order is the order fragments are produced for each collection.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from src.schema_compiler.emitters.base import Emitter
from src.schema_compiler.emitters.builtin import (
    CollectionReferenceEmitter,
    DocumentReferenceEmitter,
    DocumentSnapshotEmitter,
    QueryDocumentSnapshotEmitter,
    QueryEmitter,
    QuerySnapshotEmitter,
    SubcollectionAccessorsEmitter,
)
from src.schema_compiler.errors import UnknownEmitterError

# Type alias for emitter factories
EmitterFactory = Callable[[], Emitter]


# =============================================================================
# Registry
# =============================================================================

EMITTER_FACTORIES: dict[str, EmitterFactory] = {
    # Generated base classes precede their subclasses
    "query": QueryEmitter,
    "query_snapshot": QuerySnapshotEmitter,
    "query_document_snapshot": QueryDocumentSnapshotEmitter,
    "document_snapshot": DocumentSnapshotEmitter,
    "document_reference": DocumentReferenceEmitter,
    "collection_reference": CollectionReferenceEmitter,
    "subcollection_accessors": SubcollectionAccessorsEmitter,
}


def get_emitter(name: str) -> Emitter:
    """Create the emitter registered under name.

    Raises:
        UnknownEmitterError: If no emitter is registered under name.
    """
    factory = EMITTER_FACTORIES.get(name)
    if factory is None:
        raise UnknownEmitterError(
            f"Unknown emitter '{name}'. Registered emitters: {sorted(EMITTER_FACTORIES)}"
        )
    return factory()


def get_emitters(names: Iterable[str] | None = None) -> list[Emitter]:
    """Create emitters by name, or every registered emitter when names is None."""
    if names is None:
        names = EMITTER_FACTORIES.keys()
    return [get_emitter(name) for name in names]
