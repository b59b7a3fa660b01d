"""Compilation context for schema compilation.

Accumulates diagnostics while the per-declaration phases and the graph
linker run, so one malformed declaration doesn't hide problems in others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from src.schema_compiler.errors import SchemaCompilationError, SchemaError

logger = logging.getLogger(__name__)


@dataclass
class CompilationContext:
    """Accumulation context for diagnostics of one compilation unit.

    With ``fail_fast`` set, the first recorded error is raised immediately
    instead of being collected.
    """

    fail_fast: bool = False
    errors: list[SchemaError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, error: SchemaError) -> None:
        """Record a diagnostic (or raise it in fail-fast mode)."""
        if self.fail_fast:
            raise error
        logger.warning(f"{error.code.value}: {error.message} ({error.element})")
        self.errors.append(error)

    def extend(self, errors: list[SchemaError]) -> None:
        for error in errors:
            self.add_error(error)

    def raise_for_errors(self) -> None:
        """Raise every collected diagnostic at once."""
        if self.errors:
            raise SchemaCompilationError(self.errors)
