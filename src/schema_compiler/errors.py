"""Compile-time diagnostics raised by the schema compiler.

Every error carries:
- ``code``: which rule was violated (an ErrorCode member)
- ``element``: the offending declaration site or ``Type.member``
- ``todo``: an optional remediation hint

Errors are collected per compilation unit and surfaced together through
SchemaCompilationError.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Diagnostic codes, grouped by the phase that reports them."""

    # Path validation
    ILLEGAL_CHARACTER = "IllegalCharacter"
    POINTS_TO_DOCUMENT = "PointsToDocument"
    INVALID_COLLECTION_NAME = "InvalidCollectionName"

    # Declaration shape
    UNTYPED_COLLECTION = "UntypedCollection"
    NOT_A_CLASS = "NotAClass"

    # Serialization contract
    MISSING_DECODER = "MissingDecoder"
    MISSING_ENCODER = "MissingEncoder"
    INCOMPATIBLE_DECODER_SIGNATURE = "IncompatibleDecoderSignature"
    INCOMPATIBLE_ENCODER_SIGNATURE = "IncompatibleEncoderSignature"

    # Field injection
    MULTIPLE_INJECTION_ANNOTATIONS = "MultipleInjectionAnnotations"
    NON_SETTABLE_INJECTION_TARGET = "NonSettableInjectionTarget"
    INJECTION_TYPE_MISMATCH = "InjectionTypeMismatch"

    # Graph linking
    DANGLING_WILDCARD = "DanglingWildcard"
    ORPHAN_SUBCOLLECTION = "OrphanSubcollection"
    DUPLICATE_COLLECTION_PATH = "DuplicateCollectionPath"
    CONFLICTING_CLASS_NAME = "ConflictingClassName"


class SchemaError(Exception):
    """Base class for schema compiler diagnostics."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        element: str = "",
        todo: str | None = None,
    ):
        self.code = code
        self.message = message
        self.element = element
        self.todo = todo
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"[{self.code.value}] {self.message}"
        if self.element:
            text = f"{text}\n  at: {self.element}"
        if self.todo:
            text = f"{text}\n  todo: {self.todo}"
        return text


class PathError(SchemaError):
    """Malformed collection path."""


class DeclarationError(SchemaError):
    """Collection annotation with an unusable record type."""


class SerializationError(SchemaError):
    """Record type cannot be decoded from / encoded to a JSON-like map."""


class InjectionError(SchemaError):
    """Invalid field injection directive."""


class GraphError(SchemaError):
    """Collection hierarchy cannot be resolved."""


class SchemaCompilationError(SchemaError):
    """Aggregate of every diagnostic collected for a compilation unit."""

    def __init__(self, errors: list[SchemaError]):
        if not errors:
            raise ValueError("SchemaCompilationError requires at least one error")
        self.errors = list(errors)
        details = "\n".join(str(error) for error in self.errors)
        super().__init__(
            self.errors[0].code,
            f"{len(self.errors)} error(s) while compiling collections:\n{details}",
        )

    def __str__(self) -> str:
        return self.message

    @property
    def codes(self) -> list[ErrorCode]:
        return [error.code for error in self.errors]


class UnknownEmitterError(ValueError):
    """Raised when asking the registry for an emitter that does not exist."""
