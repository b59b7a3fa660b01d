"""Serialization contract resolution.

Decides how generated code converts documents to and from record instances:

- decode: ``Type.from_json(data)`` when the type declares a compatible
  ``from_json`` constructor, else the derived ``_Type_from_json(data)``
  produced by the structural serializer generator.
- encode: ``value.to_json()`` when the type declares a compatible ``to_json``
  method, else the derived ``_Type_to_json(value)``.

Derived functions don't exist yet when this compiler runs, so the contract
only carries their names; the renderer resolves them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from src.schema_compiler.descriptors import DeclarationSite, RecordTypeDescriptor
from src.schema_compiler.errors import ErrorCode, SerializationError

logger = logging.getLogger(__name__)

DECODER_NAME = "from_json"
ENCODER_NAME = "to_json"


def derived_decoder_name(type_name: str) -> str:
    return f"_{type_name}_from_json"


def derived_encoder_name(type_name: str) -> str:
    return f"_{type_name}_to_json"


class CodecSource(str, Enum):
    """Where a decoder/encoder comes from."""

    DECLARED = "declared"  # written by hand on the record type
    DERIVED = "derived"  # produced by the structural serializer generator


@dataclass(frozen=True)
class SerializationContract:
    """Resolved decode/encode strategy for one record type."""

    type_name: str
    decoder_source: CodecSource
    encoder_source: CodecSource

    def decode(self, json_expression: str) -> str:
        """Expression turning a raw document map into a record instance."""
        if self.decoder_source == CodecSource.DECLARED:
            return f"{self.type_name}.{DECODER_NAME}({json_expression})"
        return f"{derived_decoder_name(self.type_name)}({json_expression})"

    def encode(self, value_expression: str) -> str:
        """Expression turning a record instance into a raw document map."""
        if self.encoder_source == CodecSource.DECLARED:
            return f"{value_expression}.{ENCODER_NAME}()"
        return f"{derived_encoder_name(self.type_name)}({value_expression})"


# =============================================================================
# Public API
# =============================================================================


def resolve_serialization(
    record_type: RecordTypeDescriptor,
    site: DeclarationSite | None = None,
) -> SerializationContract:
    """Resolve the decode/encode contract of a record type.

    Raises the first problem found; use resolve_serialization_errors() to get
    both decoder and encoder problems at once.

    Args:
        record_type: The type stored in the collection.
        site: Where the collection was declared. Derived decoders are private
            to the library that defines the record type, so they are only
            usable when the declaration lives in that same library.

    Returns:
        The resolved contract.

    Raises:
        SerializationError: MissingDecoder, MissingEncoder,
            IncompatibleDecoderSignature or IncompatibleEncoderSignature.
    """
    decoder_source, decoder_error = _resolve_decoder(record_type, site)
    if decoder_error:
        raise decoder_error
    encoder_source, encoder_error = _resolve_encoder(record_type, site)
    if encoder_error:
        raise encoder_error

    logger.debug(
        f"Serialization for {record_type.name}: "
        f"decode={decoder_source.value}, encode={encoder_source.value}"
    )
    return SerializationContract(
        type_name=record_type.name,
        decoder_source=decoder_source,
        encoder_source=encoder_source,
    )


def resolve_serialization_errors(
    record_type: RecordTypeDescriptor,
    site: DeclarationSite | None = None,
) -> list[SerializationError]:
    """Return every decoder/encoder problem of a record type (empty if none)."""
    _, decoder_error = _resolve_decoder(record_type, site)
    _, encoder_error = _resolve_encoder(record_type, site)
    return [error for error in (decoder_error, encoder_error) if error is not None]


# =============================================================================
# Internal
# =============================================================================


def _resolve_decoder(
    record_type: RecordTypeDescriptor,
    site: DeclarationSite | None,
) -> tuple[CodecSource, SerializationError | None]:
    element = str(site) if site else record_type.name
    decoder = record_type.find_constructor(DECODER_NAME)

    if decoder is not None:
        params = decoder.parameters
        if (
            len(params) != 1
            or not params[0].is_required_positional
            or not params[0].type.is_string_keyed_map
        ):
            return CodecSource.DECLARED, SerializationError(
                ErrorCode.INCOMPATIBLE_DECODER_SIGNATURE,
                f"Collection was declared with the class {record_type.name} but its "
                f"{DECODER_NAME} does not match `{DECODER_NAME}(data: map<string, dynamic>)`.",
                element=element,
                todo=f"Make {record_type.name}.{DECODER_NAME} take a single required "
                "positional map parameter.",
            )
        return CodecSource.DECLARED, None

    same_library = site is None or not site.library or site.library == record_type.library
    if record_type.has_structural_serializer and same_library:
        return CodecSource.DERIVED, None

    reason = ""
    if record_type.has_structural_serializer:
        reason = (
            f" Its derived decoder is private to {record_type.library} and cannot "
            f"be used from {site.library}."
        )
    return CodecSource.DERIVED, SerializationError(
        ErrorCode.MISSING_DECODER,
        f"Collection was declared with the class {record_type.name}, but the class "
        f"has no `{DECODER_NAME}` constructor.{reason}",
        element=element,
        todo=f"Add a `{DECODER_NAME}` constructor to {record_type.name}",
    )


def _resolve_encoder(
    record_type: RecordTypeDescriptor,
    site: DeclarationSite | None,
) -> tuple[CodecSource, SerializationError | None]:
    element = str(site) if site else record_type.name
    encoder = record_type.find_method(ENCODER_NAME)

    if encoder is not None:
        if encoder.static or encoder.parameters or not encoder.return_type.is_string_keyed_map:
            return CodecSource.DECLARED, SerializationError(
                ErrorCode.INCOMPATIBLE_ENCODER_SIGNATURE,
                f"Collection was declared with the class {record_type.name} but its "
                f"{ENCODER_NAME} does not match `{ENCODER_NAME}() -> map<string, dynamic>`.",
                element=element,
                todo=f"Make {record_type.name}.{ENCODER_NAME} an instance method with no "
                "parameters returning a map.",
            )
        return CodecSource.DECLARED, None

    if record_type.has_structural_serializer:
        return CodecSource.DERIVED, None

    return CodecSource.DERIVED, SerializationError(
        ErrorCode.MISSING_ENCODER,
        f"Collection was declared with the class {record_type.name}, but the class "
        f"has no `{ENCODER_NAME}` method.",
        element=element,
        todo=f"Add a `{ENCODER_NAME}` method to {record_type.name}",
    )
