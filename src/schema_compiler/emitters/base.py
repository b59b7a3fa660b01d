"""Base emitter class for rendering collection descriptors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.schema_compiler.collection import CollectionDescriptor


@dataclass(frozen=True)
class OutputFragment:
    """One piece of generated source, produced by one emitter for one collection.

    ``collection_path`` is None for fragments emitted once per compilation
    unit (e.g. the preamble).
    """

    emitter: str
    collection_path: str | None
    content: str


class Emitter(ABC):
    """Abstract emitter for one generated artifact.

    Subclasses set ``name`` and implement render(). Override accepts() to
    skip collections the artifact does not apply to.

    Usage:
        class SummaryEmitter(Emitter):
            name = "summary"

            def render(self, collection):
                return f"# {collection.path}"
    """

    name: str = ""

    def accepts(self, collection: CollectionDescriptor) -> bool:
        """Whether this emitter produces output for the collection."""
        return True

    @abstractmethod
    def render(self, collection: CollectionDescriptor) -> str:
        """Render the artifact for one collection."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class SourceWriter:
    """Accumulates indented source lines."""

    def __init__(self, indent: str = "    "):
        self._lines: list[str] = []
        self._indent = indent
        self._level = 0

    def line(self, text: str = "") -> SourceWriter:
        self._lines.append(f"{self._indent * self._level}{text}" if text else "")
        return self

    def indent(self) -> SourceWriter:
        self._level += 1
        return self

    def dedent(self) -> SourceWriter:
        self._level = max(0, self._level - 1)
        return self

    def render(self) -> str:
        return "\n".join(self._lines) + "\n"
