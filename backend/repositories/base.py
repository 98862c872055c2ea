"""
Base repository class providing common store operations.
"""

from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

import repositories.db_models as db_models
from repositories.memory_store import MemStorage, Table

T = TypeVar("T", bound=db_models.Record)


def _matches(record: db_models.Record, filters: dict[str, Any]) -> bool:
    """AND-only exact match; keys the record does not have never match."""
    for key, expected in filters.items():
        if key not in type(record).model_fields:
            return False
        if getattr(record, key) != expected:
            return False
    return True


def _contains(value: Any, needle: str) -> bool:
    if value is None:
        return False
    if isinstance(value, (list, tuple)):
        return any(_contains(item, needle) for item in value)
    return needle in str(value).lower()


class BaseRepository(Generic[T]):
    """
    Base repository providing common CRUD operations.

    Type parameter T should be a record model from ``db_models``.
    """

    def __init__(self, store: MemStorage, table: Table[T]):
        """
        Initialize repository.

        Args:
            store: The entity store
            table: Table holding this repository's records
        """
        self.store = store
        self.table = table

    def get_by_id(self, id: int) -> T | None:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity if found, None otherwise
        """
        return self.table.get(id)

    def get_all(self, skip: int = 0, limit: int | None = None) -> list[T]:
        """
        Get all entities in insertion order.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return (all when None)

        Returns:
            List of entities
        """
        records = self.table.values()[skip:]
        return records if limit is None else records[:limit]

    def filter_by(self, filters: dict[str, Any] | None = None) -> list[T]:
        """
        Exact-match filter.

        Every provided key must equal the record's attribute. With no filters
        all records are returned.

        Args:
            filters: Field name to expected value

        Returns:
            Matching entities in insertion order
        """
        records = self.table.values()
        if not filters:
            return records
        return [record for record in records if _matches(record, filters)]

    def create(self, data: dict[str, Any]) -> T:
        """
        Create new entity.

        The store stamps the id and the model's defaults.

        Args:
            data: Insertable fields

        Returns:
            Created entity
        """
        return self.table.insert(data)

    def update(self, id: int, changes: dict[str, Any]) -> T:
        """
        Shallow-merge changes into an existing entity.

        Raises:
            RecordNotFoundException: If the entity does not exist
        """
        return self.table.update(id, changes)

    def delete(self, id: int) -> bool:
        """
        Delete entity.

        Returns:
            True if a record was removed
        """
        return self.table.delete(id)

    def count(self) -> int:
        return len(self.table)

    def _search(
        self,
        query: str,
        fields: Iterable[str],
        primary: str,
        tie_break: Callable[[list[T]], list[T]],
        records: list[T] | None = None,
        limit: int | None = None,
    ) -> list[T]:
        """
        Case-insensitive substring search with title-first ranking.

        Records whose ``primary`` field contains the query come first; within
        each group ``tie_break`` decides the order.

        Args:
            query: Free-text query
            fields: Fields searched for the query
            primary: Field whose match outranks all other fields
            tie_break: Orders records within a rank group
            records: Candidates (defaults to all records)
            limit: Truncate to this many results

        Returns:
            Ranked matches
        """
        needle = query.strip().lower()
        if not needle:
            return []

        candidates = self.table.values() if records is None else records
        fields = list(fields)

        primary_hits: list[T] = []
        secondary_hits: list[T] = []
        for record in candidates:
            if _contains(getattr(record, primary), needle):
                primary_hits.append(record)
            elif any(_contains(getattr(record, field), needle) for field in fields):
                secondary_hits.append(record)

        ranked = tie_break(primary_hits) + tie_break(secondary_hits)
        return ranked if limit is None else ranked[:limit]


def newest_first(attribute: str) -> Callable[[list[T]], list[T]]:
    """Tie-break ordering records by a datetime attribute, most recent first."""

    def order(records: list[T]) -> list[T]:
        return sorted(
            records, key=lambda r: (getattr(r, attribute), r.id), reverse=True
        )

    return order
