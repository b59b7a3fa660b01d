"""Field injection resolution.

Record members can ask to be populated from document metadata instead of
stored data (document id, document path, parent document id). Such a member
must:
- carry exactly one injection directive
- be settable (non-final field, or property with a setter)
- be declared as a string (nullable or not)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from src.schema_compiler.descriptors import (
    InjectionKind,
    MemberDescriptor,
    RecordTypeDescriptor,
)
from src.schema_compiler.errors import ErrorCode, InjectionError

if TYPE_CHECKING:
    from src.schema_compiler.compiler.context import CompilationContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldInjection:
    """A member populated from document metadata."""

    kind: InjectionKind
    target_field: str
    nullable: bool


# =============================================================================
# Public API
# =============================================================================


def resolve_injections(record_type: RecordTypeDescriptor) -> tuple[FieldInjection, ...]:
    """Resolve the injection directives of a record type.

    Members are scanned properties first, then fields, each in declaration
    order, so the output is stable.

    Args:
        record_type: The type stored in the collection.

    Returns:
        One FieldInjection per member carrying a directive.

    Raises:
        InjectionError: On the first invalid member.
    """
    injections: list[FieldInjection] = []
    for member in _injection_candidates(record_type):
        injection = _resolve_member(record_type, member)
        if injection is not None:
            injections.append(injection)
    return tuple(injections)


def collect_injections(
    record_type: RecordTypeDescriptor,
    ctx: CompilationContext,
) -> tuple[FieldInjection, ...]:
    """Like resolve_injections(), but records every invalid member into ctx."""
    injections: list[FieldInjection] = []
    for member in _injection_candidates(record_type):
        try:
            injection = _resolve_member(record_type, member)
        except InjectionError as e:
            ctx.add_error(e)
            continue
        if injection is not None:
            injections.append(injection)
    return tuple(injections)


# =============================================================================
# Internal
# =============================================================================


def _injection_candidates(record_type: RecordTypeDescriptor) -> list[MemberDescriptor]:
    return [*record_type.properties, *record_type.fields]


def _resolve_member(
    record_type: RecordTypeDescriptor,
    member: MemberDescriptor,
) -> FieldInjection | None:
    if not member.injections:
        return None

    element = f"{record_type.name}.{member.name}"

    if len(member.injections) > 1:
        raise InjectionError(
            ErrorCode.MULTIPLE_INJECTION_ANNOTATIONS,
            "Only one injection directive may be used for each field.",
            element=element,
            todo=f"Keep a single directive on {member.name} "
            f"(found: {', '.join(k.value for k in member.injections)}).",
        )

    if not member.mutable:
        raise InjectionError(
            ErrorCode.NON_SETTABLE_INJECTION_TARGET,
            "Injected fields or properties must be settable.",
            element=element,
            todo=f"Make {member.name} a non-final field or give it a setter.",
        )

    if not member.type.is_string:
        raise InjectionError(
            ErrorCode.INJECTION_TYPE_MISMATCH,
            f"Injected fields must be of type string, got {member.type.display}.",
            element=element,
            todo=f"Declare {member.name} as `string` or `string?`.",
        )

    kind = member.injections[0]
    logger.debug(f"Injecting {kind.value} into {element}")
    return FieldInjection(kind=kind, target_field=member.name, nullable=member.type.nullable)
