"""Registry modules for declarative mappings."""

from .emitters import (
    EMITTER_FACTORIES,
    get_emitter,
    get_emitters,
)

__all__ = [
    "EMITTER_FACTORIES",
    "get_emitter",
    "get_emitters",
]
