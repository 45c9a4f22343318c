"""
In-memory document store with Firestore-like semantics.

Documents are addressed by slash-separated paths that alternate collection
and document ids: ``users/u1`` is a document, ``users/u1/cart`` a collection,
``users/u1/cart/metadata`` a document again.

Supported primitives (the only ones the functions rely on):
- create/overwrite a document (``set``) or add one with an auto id (``add``)
- partial update of an existing document, with ``Increment`` for atomic
  numeric changes and ``SERVER_TIMESTAMP`` for the store's clock
- range queries on a single collection with ordering and a limit
- write batches that apply all-or-nothing

Design decisions:
- A single lock guards every commit, so a batch is atomic even when handlers
  run on FastAPI's threadpool
- Reads return deep copies; callers can never mutate stored state in place
- A ``DocumentCreated`` event goes out on the event bus for every document
  that did not exist before the commit (after the lock is released)
- Faults can be injected per operation for testing failure paths
"""

import copy
import logging
import operator
import threading
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, Callable, Optional
from uuid import uuid4

from shared.clock import Clock, utc_now
from shared.event_bus import EventBus, document_created

logger = logging.getLogger("document_store")


# =============================================================================
# Sentinels and field transforms
# =============================================================================

class _ServerTimestamp:
    """Placeholder resolved to the store's clock when a write commits."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Increment:
    """Atomically add ``amount`` to a numeric field (missing or non-numeric counts as 0)."""
    amount: float


# =============================================================================
# Errors
# =============================================================================

class StoreError(Exception):
    """Base error for document store failures."""


class DocumentNotFoundError(StoreError):
    """An update targeted a document that does not exist."""

    def __init__(self, path: str):
        super().__init__(f"No document to update: {path}")
        self.path = path


class InvalidPathError(StoreError, ValueError):
    """A path had the wrong shape for the operation."""


# =============================================================================
# Paths and snapshots
# =============================================================================

def split_path(path: str) -> list[str]:
    segments = path.strip("/").split("/")
    if not segments or any(not s for s in segments):
        raise InvalidPathError(f"Invalid path: {path!r}")
    return segments


def is_document_path(path: str) -> bool:
    return len(split_path(path)) % 2 == 0


def _require_document_path(path: str) -> str:
    segments = split_path(path)
    if len(segments) % 2 != 0:
        raise InvalidPathError(f"Not a document path: {path!r}")
    return "/".join(segments)


def _require_collection_path(path: str) -> str:
    segments = split_path(path)
    if len(segments) % 2 != 1:
        raise InvalidPathError(f"Not a collection path: {path!r}")
    return "/".join(segments)


@dataclass
class DocumentSnapshot:
    """
    A document as read at one point in time.

    ``data`` is None when the document does not exist.
    """
    path: str
    data: Optional[dict[str, Any]]

    @property
    def id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def ref(self) -> str:
        return self.path

    @property
    def exists(self) -> bool:
        return self.data is not None

    def to_dict(self) -> Optional[dict[str, Any]]:
        return copy.deepcopy(self.data)

    def get(self, field_name: str, default: Any = None) -> Any:
        if self.data is None:
            return default
        return self.data.get(field_name, default)


# =============================================================================
# Writes and batches
# =============================================================================

@dataclass
class _Write:
    kind: str  # "set" | "update" | "delete"
    path: str
    data: Optional[dict[str, Any]] = None


class WriteBatch:
    """
    A group of writes committed all-or-nothing.

    Example:
        batch = store.batch()
        batch.update("products/p1", {"stock": Increment(-3)})
        batch.delete("notifications/n1")
        batch.commit()
    """

    def __init__(self, store: "DocumentStore"):
        self._store = store
        self._writes: list[_Write] = []
        self._committed = False

    def __len__(self) -> int:
        return len(self._writes)

    def set(self, path: str, data: dict[str, Any]) -> "WriteBatch":
        self._writes.append(_Write("set", _require_document_path(path), copy.deepcopy(data)))
        return self

    def update(self, path: str, data: dict[str, Any]) -> "WriteBatch":
        self._writes.append(_Write("update", _require_document_path(path), copy.deepcopy(data)))
        return self

    def delete(self, path: str) -> "WriteBatch":
        self._writes.append(_Write("delete", _require_document_path(path)))
        return self

    def commit(self) -> list[DocumentSnapshot]:
        """
        Apply every write, or none of them.

        Returns:
            Snapshots of the documents created by this commit

        Raises:
            DocumentNotFoundError: An update targets a missing document
            StoreError: The commit failed (nothing was written)
        """
        if self._committed:
            raise StoreError("Batch already committed")
        created = self._store._apply(self._writes, operation="commit")
        self._committed = True
        return created


# =============================================================================
# Queries
# =============================================================================

_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "<": operator.lt,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
}

_INEQUALITY_OPERATORS = {"<", "<=", "!=", ">", ">="}

ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"


@dataclass(frozen=True)
class _Filter:
    field_name: str
    op: str
    value: Any

    def matches(self, data: dict[str, Any]) -> bool:
        # Documents without the field never match, same for incomparable types
        if self.field_name not in data:
            return False
        try:
            return bool(_OPERATORS[self.op](data[self.field_name], self.value))
        except TypeError:
            return False


@dataclass(frozen=True)
class Query:
    """
    Immutable query over the direct children of one collection.

    With an inequality filter and no explicit ordering, results come back
    ordered by the filtered field, then by document id.
    """
    store: "DocumentStore"
    collection: str
    filters: tuple[_Filter, ...] = ()
    orders: tuple[tuple[str, str], ...] = ()
    max_results: Optional[int] = None

    def where(self, field_name: str, op: str, value: Any) -> "Query":
        if op not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {op}")
        return Query(
            self.store, self.collection,
            self.filters + (_Filter(field_name, op, value),),
            self.orders, self.max_results,
        )

    def order_by(self, field_name: str, direction: str = ASCENDING) -> "Query":
        if direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Unsupported direction: {direction}")
        return Query(
            self.store, self.collection, self.filters,
            self.orders + ((field_name, direction),), self.max_results,
        )

    def limit(self, count: int) -> "Query":
        if count < 0:
            raise ValueError("limit must be >= 0")
        return Query(self.store, self.collection, self.filters, self.orders, count)

    def get(self) -> list[DocumentSnapshot]:
        return self.store._run_query(self)

    def effective_orders(self) -> tuple[tuple[str, str], ...]:
        if self.orders:
            return self.orders
        for f in self.filters:
            if f.op in _INEQUALITY_OPERATORS:
                return ((f.field_name, ASCENDING),)
        return ()


# =============================================================================
# Store
# =============================================================================

def _auto_id() -> str:
    return uuid4().hex[:20]


class DocumentStore:
    """
    The document database handle passed to every function.

    Args:
        event_bus: Bus that receives ``DocumentCreated`` events (new one if omitted)
        clock: Source of server timestamps
        id_factory: Generates ids for ``add``
    """

    def __init__(
        self,
        event_bus: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.event_bus = event_bus or EventBus()
        self.clock = clock or utc_now
        self._id_factory = id_factory or _auto_id
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.RLock()
        self._faults: dict[str, deque[Exception]] = defaultdict(deque)

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, path: str) -> DocumentSnapshot:
        path = _require_document_path(path)
        with self._lock:
            self._raise_injected_fault("get")
            return DocumentSnapshot(path, copy.deepcopy(self._documents.get(path)))

    def exists(self, path: str) -> bool:
        return self.get(path).exists

    def list_documents(self, collection: str) -> list[DocumentSnapshot]:
        """All documents directly under ``collection``, ordered by id."""
        return Query(self, _require_collection_path(collection)).get()

    def collection(self, collection: str) -> Query:
        """Start a query on ``collection``."""
        return Query(self, _require_collection_path(collection))

    def count(self, collection: str) -> int:
        return len(self.list_documents(collection))

    # =========================================================================
    # Single writes
    # =========================================================================

    def set(self, path: str, data: dict[str, Any]) -> DocumentSnapshot:
        """Create or overwrite the document at ``path``."""
        path = _require_document_path(path)
        self._apply([_Write("set", path, copy.deepcopy(data))], operation="set")
        return self.get(path)

    def add(self, collection: str, data: dict[str, Any]) -> DocumentSnapshot:
        """Create a document with an auto-generated id in ``collection``."""
        path = f"{_require_collection_path(collection)}/{self._id_factory()}"
        self._apply([_Write("set", path, copy.deepcopy(data))], operation="add")
        return self.get(path)

    def update(self, path: str, data: dict[str, Any]) -> DocumentSnapshot:
        """
        Merge ``data`` into an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        path = _require_document_path(path)
        self._apply([_Write("update", path, copy.deepcopy(data))], operation="update")
        return self.get(path)

    def delete(self, path: str) -> None:
        path = _require_document_path(path)
        self._apply([_Write("delete", path)], operation="delete")

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    # =========================================================================
    # Fault injection
    # =========================================================================

    def fail_next(self, operation: str, error: Optional[Exception] = None) -> None:
        """
        Make the next ``operation`` fail without touching any data.

        Args:
            operation: One of "get", "set", "add", "update", "delete",
                       "commit" (batch commit) or "query"
            error: Exception to raise (a StoreError by default)
        """
        self._faults[operation].append(error or StoreError(f"Simulated {operation} failure"))

    def clear_faults(self) -> None:
        self._faults.clear()

    def _raise_injected_fault(self, operation: str) -> None:
        pending = self._faults.get(operation)
        if pending:
            error = pending.popleft()
            logger.warning(f"Injected {operation} failure: {error}")
            raise error

    # =========================================================================
    # Internals
    # =========================================================================

    def _apply(self, writes: list[_Write], operation: str) -> list[DocumentSnapshot]:
        with self._lock:
            self._raise_injected_fault(operation)
            now = self.clock()

            # Stage against a private view so a failing write leaves nothing behind
            staged: dict[str, Optional[dict[str, Any]]] = {}
            for write in writes:
                current = staged[write.path] if write.path in staged else self._documents.get(write.path)
                if write.kind == "set":
                    staged[write.path] = self._resolve(write.data, {}, now)
                elif write.kind == "update":
                    if current is None:
                        raise DocumentNotFoundError(write.path)
                    staged[write.path] = self._resolve(write.data, current, now)
                else:
                    staged[write.path] = None

            created_paths = [
                path for path, doc in staged.items()
                if doc is not None and path not in self._documents
            ]
            for path, doc in staged.items():
                if doc is None:
                    self._documents.pop(path, None)
                else:
                    self._documents[path] = doc

            created = [DocumentSnapshot(p, copy.deepcopy(self._documents[p])) for p in created_paths]

        if writes:
            logger.debug(f"{operation}: applied {len(writes)} write(s)")

        for snapshot in created:
            self.event_bus.publish(document_created(snapshot.path, snapshot.to_dict()))
        return created

    def _resolve(self, changes: dict[str, Any], base: dict[str, Any], now) -> dict[str, Any]:
        document = copy.deepcopy(base)
        for key, value in changes.items():
            if isinstance(value, _ServerTimestamp):
                document[key] = now
            elif isinstance(value, Increment):
                existing = document.get(key)
                if not isinstance(existing, (int, float)) or isinstance(existing, bool):
                    existing = 0
                document[key] = existing + value.amount
            elif isinstance(value, dict):
                document[key] = self._resolve(value, {}, now)
            else:
                document[key] = copy.deepcopy(value)
        return document

    def _run_query(self, query: Query) -> list[DocumentSnapshot]:
        prefix = query.collection + "/"
        with self._lock:
            self._raise_injected_fault("query")
            matches = [
                (path, doc) for path, doc in self._documents.items()
                if path.startswith(prefix)
                and "/" not in path[len(prefix):]
                and all(f.matches(doc) for f in query.filters)
            ]
            orders = query.effective_orders()
            # Ordering by a field drops documents that lack it
            for field_name, _ in orders:
                matches = [(p, d) for p, d in matches if field_name in d]

            matches.sort(key=lambda item: item[0])
            for field_name, direction in reversed(orders):
                matches.sort(key=lambda item: item[1][field_name], reverse=direction == DESCENDING)

            if query.max_results is not None:
                matches = matches[:query.max_results]
            return [DocumentSnapshot(p, copy.deepcopy(d)) for p, d in matches]
