"""Emitters rendering one generated artifact per collection."""

from .base import Emitter, OutputFragment, SourceWriter
from .builtin import (
    CollectionReferenceEmitter,
    DocumentReferenceEmitter,
    DocumentSnapshotEmitter,
    QueryDocumentSnapshotEmitter,
    QueryEmitter,
    QuerySnapshotEmitter,
    SubcollectionAccessorsEmitter,
    preamble,
    python_type,
)

__all__ = [
    "CollectionReferenceEmitter",
    "DocumentReferenceEmitter",
    "DocumentSnapshotEmitter",
    "Emitter",
    "OutputFragment",
    "QueryDocumentSnapshotEmitter",
    "QueryEmitter",
    "QuerySnapshotEmitter",
    "SourceWriter",
    "SubcollectionAccessorsEmitter",
    "preamble",
    "python_type",
]
