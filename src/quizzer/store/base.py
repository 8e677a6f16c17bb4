"""Record store contract consumed by the quiz engine."""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, TypeVar, Union

__all__ = [
    "OrderBy",
    "RecordNotFound",
    "RecordStore",
    "StoreError",
    "StoreUnavailable",
    "UnknownEntityType",
]

E = TypeVar("E")
OrderBy = Union[str, Sequence[str], None]


class StoreError(RuntimeError):
    """Base class for record store failures."""


class StoreUnavailable(StoreError):
    """Raised when the backing database cannot be opened or prepared."""


class RecordNotFound(StoreError):
    """Raised when saving an entity that was never inserted."""


class UnknownEntityType(StoreError):
    """Raised when an entity type has no storage mapping."""


class RecordStore(Protocol):
    """Durable keyed storage for quiz entities.

    Criteria are keyword equality filters on entity fields. ``order_by``
    accepts a field name or a sequence of names; a leading ``-`` sorts
    descending. Results default to id order.
    """

    def find(self, entity_type: type[E], **criteria: Any) -> Optional[E]:
        ...

    def query(
        self,
        entity_type: type[E],
        *,
        order_by: OrderBy = None,
        limit: Optional[int] = None,
        **criteria: Any,
    ) -> list[E]:
        ...

    def insert(self, entity: object) -> int:
        ...

    def save(self, entity: object) -> None:
        ...

    def count(self, entity_type: type, **criteria: Any) -> int:
        ...
