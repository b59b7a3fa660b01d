"""Queryable field selection.

Only public fields with a type the document store can filter and order on
are exposed to the generated query builders. Anything else (nested objects,
maps, lists of non-primitives) is skipped without error: records may carry
structured data that is simply not queryable.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from src.schema_compiler.compiler.injection_resolver import FieldInjection
from src.schema_compiler.descriptors import (
    MemberDescriptor,
    RecordTypeDescriptor,
    TypeKind,
    TypeRef,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryableField:
    """A field usable in query predicates."""

    name: str
    type: TypeRef


def is_queryable_type(type_ref: TypeRef) -> bool:
    """Primitives, or a list whose element type is a primitive."""
    if type_ref.is_primitive:
        return True
    if type_ref.kind == TypeKind.LIST:
        return len(type_ref.arguments) == 1 and type_ref.arguments[0].is_primitive
    return False


def select_queryable_fields(
    record_type: RecordTypeDescriptor,
    injections: Iterable[FieldInjection] = (),
) -> tuple[QueryableField, ...]:
    """Select the fields of record_type usable in query predicates.

    Args:
        record_type: The type stored in the collection.
        injections: Resolved injections; their targets are not stored data
            and are never queryable.

    Returns:
        Queryable fields in declaration order.
    """
    injected = {injection.target_field for injection in injections}
    selected: list[QueryableField] = []

    for member in record_type.fields:
        if not _is_candidate(member, injected):
            continue
        if not is_queryable_type(member.type):
            logger.debug(
                f"Skipping {record_type.name}.{member.name}: "
                f"{member.type.display} is not queryable"
            )
            continue
        selected.append(QueryableField(name=member.name, type=member.type))

    return tuple(selected)


def _is_candidate(member: MemberDescriptor, injected: set[str]) -> bool:
    return member.public and member.name not in injected
