"""Per-declaration compilation phases.

Phases:
1. path_validator          - Validate and classify the collection path
2. serialization_resolver  - Resolve decode/encode of the record type
3. injection_resolver      - Resolve document metadata injections
4. queryable_fields        - Select the fields usable in queries

Diagnostics are accumulated into CompilationContext.
"""

from src.schema_compiler.compiler.context import CompilationContext
from src.schema_compiler.compiler.injection_resolver import (
    FieldInjection,
    collect_injections,
    resolve_injections,
)
from src.schema_compiler.compiler.path_validator import (
    PathSegment,
    PathSegmentKind,
    ValidatedPath,
    parent_path_of,
    validate_path,
)
from src.schema_compiler.compiler.queryable_fields import (
    QueryableField,
    is_queryable_type,
    select_queryable_fields,
)
from src.schema_compiler.compiler.serialization_resolver import (
    CodecSource,
    SerializationContract,
    resolve_serialization,
    resolve_serialization_errors,
)

__all__ = [
    "CodecSource",
    "CompilationContext",
    "FieldInjection",
    "PathSegment",
    "PathSegmentKind",
    "QueryableField",
    "SerializationContract",
    "ValidatedPath",
    "collect_injections",
    "is_queryable_type",
    "parent_path_of",
    "resolve_injections",
    "resolve_serialization",
    "resolve_serialization_errors",
    "select_queryable_fields",
    "validate_path",
]
