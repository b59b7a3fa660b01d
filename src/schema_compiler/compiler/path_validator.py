"""Collection path validation.

A collection path is a ``/``-delimited list of segments alternating between
collection names (literals) and ``*`` wildcards (any document id):

    movies                  root collection
    movies/*/comments       sub-collection of each movie document

The segment count is always odd: a path names a collection, never a document.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from src.schema_compiler.errors import ErrorCode, PathError

WILDCARD = "*"
SEPARATOR = "/"

_ALLOWED_CHARACTERS = re.compile(r"[0-9a-zA-Z/*_-]+")


class PathSegmentKind(str, Enum):
    """Role of a path segment."""

    LITERAL = "literal"
    WILDCARD = "wildcard"


@dataclass(frozen=True)
class PathSegment:
    """One ``/``-delimited piece of a collection path."""

    value: str
    kind: PathSegmentKind


@dataclass(frozen=True)
class ValidatedPath:
    """A collection path that passed validate_path()."""

    raw: str
    segments: tuple[PathSegment, ...]

    def __str__(self) -> str:
        return self.raw

    @property
    def is_nested(self) -> bool:
        return any(s.kind == PathSegmentKind.WILDCARD for s in self.segments)

    @property
    def literals(self) -> tuple[str, ...]:
        return tuple(s.value for s in self.segments if s.kind == PathSegmentKind.LITERAL)

    @property
    def last_literal(self) -> str:
        return self.segments[-1].value

    @property
    def parent_path(self) -> str | None:
        """Path of the owning collection, or None for roots.

        From "movies/*/comments/*/likes" obtains "movies/*/comments".
        """
        return parent_path_of(self.raw)


def parent_path_of(path: str) -> str | None:
    """Strip everything from the last ``/*/`` onwards, None when absent."""
    index = path.rfind(f"{SEPARATOR}{WILDCARD}{SEPARATOR}")
    if index < 0:
        return None
    return path[:index]


def validate_path(path: str, *, element: str = "") -> ValidatedPath:
    """Validate a collection path and classify its segments.

    Args:
        path: Raw path string from a collection declaration.
        element: Declaration site reported with any error.

    Returns:
        The validated path.

    Raises:
        PathError: IllegalCharacter, PointsToDocument or InvalidCollectionName.
    """
    if not _ALLOWED_CHARACTERS.fullmatch(path):
        raise PathError(
            ErrorCode.ILLEGAL_CHARACTER,
            f'Received "{path}" as collection path, but the path contains '
            "illegal characters.",
            element=element,
            todo="Only use letters, digits, '_', '-', '/' and '*'.",
        )

    parts = path.split(SEPARATOR)
    if len(parts) % 2 == 0:
        raise PathError(
            ErrorCode.POINTS_TO_DOCUMENT,
            f'Received "{path}" as collection path, but this path points to a '
            "document instead of a collection.",
            element=element,
            todo="Remove the trailing document segment or add a collection name.",
        )

    segments: list[PathSegment] = []
    for index, part in enumerate(parts):
        if not part:
            raise PathError(
                ErrorCode.INVALID_COLLECTION_NAME,
                f'Received "{path}" as collection path, but it contains an empty segment.',
                element=element,
                todo="Remove leading, trailing or doubled '/'.",
            )
        if index % 2 == 0:
            if part == WILDCARD:
                raise PathError(
                    ErrorCode.INVALID_COLLECTION_NAME,
                    f'Received "{path}" as collection path, but {part} is not a '
                    "valid collection name.",
                    element=element,
                    todo="Collection segments must be names; '*' only stands for document ids.",
                )
            segments.append(PathSegment(part, PathSegmentKind.LITERAL))
        else:
            kind = PathSegmentKind.WILDCARD if part == WILDCARD else PathSegmentKind.LITERAL
            segments.append(PathSegment(part, kind))

    return ValidatedPath(raw=path, segments=tuple(segments))
