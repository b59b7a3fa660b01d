"""In-memory stand-in for the Firestore client used by generated code.

Implements only the calls the built-in emitters render: collection and
document references, add/set/update/delete/get, and where/order_by/limit
queries over the documents directly under one collection.

Usage:
    from tests.fake_firestore import FakeFirestore, load_generated

    firestore = FakeFirestore()
    namespace = load_generated(output.render(), Movie=Movie)
    movies = namespace["MovieCollectionReference"](firestore)
"""

import operator
from itertools import count
from typing import Any

_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "array_contains": lambda field, value: value in field,
    "array_contains_any": lambda field, values: any(value in field for value in values),
}


class FakeFirestore:
    """Document store keyed by full document path."""

    def __init__(self):
        self.documents: dict[str, dict[str, Any]] = {}
        self._ids = count(1)

    def collection(self, path: str) -> "FakeCollectionReference":
        return FakeCollectionReference(self, path)

    def next_id(self) -> str:
        return f"doc{next(self._ids)}"


class FakeDocumentSnapshot:
    def __init__(self, reference: "FakeDocumentReference", data: dict[str, Any] | None):
        self.reference = reference
        self._data = data

    @property
    def id(self) -> str:
        return self.reference.id

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> dict[str, Any] | None:
        return dict(self._data) if self._data is not None else None


class FakeDocumentReference:
    def __init__(self, store: FakeFirestore, path: str):
        self._store = store
        self.path = path

    @property
    def id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def parent(self) -> "FakeCollectionReference":
        return FakeCollectionReference(self._store, self.path.rsplit("/", 1)[0])

    def collection(self, name: str) -> "FakeCollectionReference":
        return FakeCollectionReference(self._store, f"{self.path}/{name}")

    def get(self) -> FakeDocumentSnapshot:
        return FakeDocumentSnapshot(self, self._store.documents.get(self.path))

    def set(self, data: dict[str, Any]) -> None:
        self._store.documents[self.path] = dict(data)

    def update(self, data: dict[str, Any]) -> None:
        if self.path not in self._store.documents:
            raise KeyError(f"No document to update: {self.path}")
        self._store.documents[self.path].update(data)

    def delete(self) -> None:
        self._store.documents.pop(self.path, None)


class FakeQuery:
    def __init__(self, store: FakeFirestore, path: str, filters=(), order=None, limit_count=None):
        self._store = store
        self.path = path
        self._filters = tuple(filters)
        self._order = order
        self._limit = limit_count

    def _derive(self, **changes) -> "FakeQuery":
        state = {"filters": self._filters, "order": self._order, "limit_count": self._limit}
        state.update(changes)
        return FakeQuery(self._store, self.path, **state)

    def where(self, field: str, op: str, value: Any) -> "FakeQuery":
        return self._derive(filters=(*self._filters, (field, op, value)))

    def order_by(self, field: str, direction: str = "ASCENDING") -> "FakeQuery":
        return self._derive(order=(field, direction))

    def limit(self, count: int) -> "FakeQuery":
        return self._derive(limit_count=count)

    def get(self) -> list[FakeDocumentSnapshot]:
        prefix = f"{self.path}/"
        snapshots = []
        for path, data in self._store.documents.items():
            if not path.startswith(prefix) or "/" in path[len(prefix):]:
                continue
            if all(field in data and _OPERATORS[op](data[field], value) for field, op, value in self._filters):
                snapshots.append(FakeDocumentSnapshot(FakeDocumentReference(self._store, path), data))

        if self._order is not None:
            field, direction = self._order
            snapshots.sort(key=lambda s: s.to_dict()[field], reverse=direction == "DESCENDING")
        if self._limit is not None:
            snapshots = snapshots[: self._limit]
        return snapshots


class FakeCollectionReference(FakeQuery):
    def __init__(self, store: FakeFirestore, path: str):
        super().__init__(store, path)

    @property
    def parent(self) -> FakeDocumentReference | None:
        if "/" not in self.path:
            return None
        return FakeDocumentReference(self._store, self.path.rsplit("/", 1)[0])

    def document(self, document_id: str | None = None) -> FakeDocumentReference:
        return FakeDocumentReference(self._store, f"{self.path}/{document_id or self._store.next_id()}")

    def add(self, data: dict[str, Any]) -> tuple[None, FakeDocumentReference]:
        reference = self.document()
        reference.set(data)
        return None, reference


def load_generated(source: str, **symbols: Any) -> dict[str, Any]:
    """Execute generated source with the given record types and derived codecs in scope."""
    namespace: dict[str, Any] = dict(symbols)
    exec(compile(source, "<generated>", "exec"), namespace)
    return namespace
