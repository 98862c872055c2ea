"""
In-memory entity store.

One ``Table`` per entity type, each a dict keyed by an auto-incrementing id
(ids are per table, not globally unique). ``MemStorage`` owns the tables, the
first-admin id and a re-entrant lock. State is volatile: nothing survives a
process restart.

FastAPI runs sync endpoints on a threadpool, so every table operation and every
read-modify-write takes the store lock. ``MemStorage.atomic()`` gives callers
an all-or-nothing block for multi-step writes.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from loguru import logger

import repositories.db_models as db_models
from models.exceptions import RecordNotFoundException

T = TypeVar("T", bound=db_models.Record)


class Table(Generic[T]):
    """A map of records of one kind plus its id counter."""

    def __init__(self, kind: str, model: type[T], lock: threading.RLock):
        self.kind = kind
        self.model = model
        self._lock = lock
        self._rows: dict[int, T] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._rows)

    def insert(self, data: dict[str, Any]) -> T:
        """
        Assign the next id to ``data`` and store the resulting record.

        Defaults (timestamps, counters) come from the record model.
        """
        with self._lock:
            record = self.model(id=self._next_id, **data)
            self._rows[record.id] = record
            self._next_id += 1
            return record

    def get(self, record_id: int) -> T | None:
        return self._rows.get(record_id)

    def values(self) -> list[T]:
        """Snapshot of all records in insertion order."""
        with self._lock:
            return list(self._rows.values())

    def update(self, record_id: int, changes: dict[str, Any]) -> T:
        """
        Shallow-merge ``changes`` into an existing record.

        Raises:
            RecordNotFoundException: If no record has this id
        """
        return self.apply(record_id, lambda _: changes)

    def apply(self, record_id: int, compute: Callable[[T], dict[str, Any]]) -> T:
        """
        Read-modify-write: merge the changes computed from the current record.

        Raises:
            RecordNotFoundException: If no record has this id
        """
        with self._lock:
            existing = self._rows.get(record_id)
            if existing is None:
                raise RecordNotFoundException(self.kind, record_id)
            updated = existing.model_copy(update=compute(existing))
            self._rows[record_id] = updated
            return updated

    def delete(self, record_id: int) -> bool:
        with self._lock:
            return self._rows.pop(record_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()
            self._next_id = 1

    def snapshot(self) -> tuple[dict[int, T], int]:
        return dict(self._rows), self._next_id

    def restore(self, state: tuple[dict[int, T], int]) -> None:
        self._rows, self._next_id = dict(state[0]), state[1]


class MemStorage:
    """
    The process-wide entity store.

    Constructed once at startup, attached to ``app.state.store`` and handed to
    repositories through the ``get_store`` dependency.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.first_admin_id: int | None = None
        self._tables: list[Table] = []

        self.users = self._table("User", db_models.User)
        self.papers = self._table("Paper", db_models.Paper)
        self.resources = self._table("Resource", db_models.Resource)
        self.discussion_posts = self._table("Discussion post", db_models.DiscussionPost)
        self.discussion_replies = self._table(
            "Discussion reply", db_models.DiscussionReply
        )
        self.discussion_comments = self._table(
            "Discussion comment", db_models.DiscussionComment
        )
        self.study_groups = self._table("Study group", db_models.StudyGroup)
        self.study_group_members = self._table(
            "Study group member", db_models.StudyGroupMember
        )
        self.study_sessions = self._table("Study session", db_models.StudySession)
        self.activities = self._table("Activity", db_models.Activity)
        self.group_chat_messages = self._table(
            "Group chat message", db_models.GroupChatMessage
        )
        self.friend_requests = self._table("Friend request", db_models.FriendRequest)
        self.friendships = self._table("Friendship", db_models.Friendship)
        self.admin_actions = self._table("Admin action", db_models.AdminAction)
        self.direct_messages = self._table("Direct message", db_models.DirectMessage)

    def _table(self, kind: str, model: type[T]) -> Table[T]:
        table = Table(kind, model, self.lock)
        self._tables.append(table)
        return table

    @contextmanager
    def atomic(self, *tables: Table) -> Iterator["MemStorage"]:
        """
        Run a multi-step write as one unit.

        Holds the store lock for the whole block. Only ``tables`` are
        snapshotted (every table when none are named), so callers list the
        tables the block writes to. If the block raises, those tables and the
        first-admin id are restored to their state at entry and the exception
        propagates.
        """
        touched = tables or tuple(self._tables)
        with self.lock:
            saved_tables = [table.snapshot() for table in touched]
            saved_first_admin = self.first_admin_id
            try:
                yield self
            except BaseException:
                for table, state in zip(touched, saved_tables):
                    table.restore(state)
                self.first_admin_id = saved_first_admin
                logger.warning("Store transaction rolled back")
                raise

    def reset(self) -> None:
        """Drop all records and reset every id counter."""
        with self.lock:
            for table in self._tables:
                table.clear()
            self.first_admin_id = None

