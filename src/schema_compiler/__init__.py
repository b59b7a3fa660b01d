"""Collection schema compiler.

Compiles collection declarations into a validated CollectionGraph and runs
pluggable emitters over it to produce a typed data-access layer.

The compilation pipeline:
  1. RawCollectionDeclaration list → GraphBuilder → CollectionGraph
     (path validation, serialization, injections, queryable fields, linking)
  2. CollectionGraph → EmitterDispatcher → OutputFragment list

All diagnostics of a compilation unit are reported together through
SchemaCompilationError.
"""

from .collection import CollectionDescriptor, FieldInjection, QueryableField
from .descriptors import (
    ConstructorDescriptor,
    DeclarationSite,
    InjectionKind,
    MemberDescriptor,
    MemberKind,
    MethodDescriptor,
    ParameterDescriptor,
    RawCollectionDeclaration,
    RecordTypeDescriptor,
    TypeKind,
    TypeRef,
)
from .dispatcher import EmitterDispatcher, fragments_by_collection, generate
from .emitters import Emitter, OutputFragment
from .errors import (
    DeclarationError,
    ErrorCode,
    GraphError,
    InjectionError,
    PathError,
    SchemaCompilationError,
    SchemaError,
    SerializationError,
    UnknownEmitterError,
)
from .graph import CollectionGraph, GraphBuilder, GraphBuildResult, build_graph
from .pipeline import CompilationOutput, SchemaPipeline, compile_schema
from .settings import CompilerSettings

__all__ = [
    "CollectionDescriptor",
    "CollectionGraph",
    "CompilationOutput",
    "CompilerSettings",
    "ConstructorDescriptor",
    "DeclarationError",
    "DeclarationSite",
    "Emitter",
    "EmitterDispatcher",
    "ErrorCode",
    "FieldInjection",
    "GraphBuildResult",
    "GraphBuilder",
    "GraphError",
    "InjectionError",
    "InjectionKind",
    "MemberDescriptor",
    "MemberKind",
    "MethodDescriptor",
    "OutputFragment",
    "ParameterDescriptor",
    "PathError",
    "QueryableField",
    "RawCollectionDeclaration",
    "RecordTypeDescriptor",
    "SchemaCompilationError",
    "SchemaError",
    "SchemaPipeline",
    "SerializationError",
    "TypeKind",
    "TypeRef",
    "UnknownEmitterError",
    "build_graph",
    "compile_schema",
    "fragments_by_collection",
    "generate",
]
