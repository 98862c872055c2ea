"""
Discussion forum repositories: posts, replies and comments.

The forum is a three-level tree (post, reply, comment) stored flat and joined
on read by ``DiscussionService``.
"""

from typing import List, Optional

import repositories.db_models as db_models
from models.exceptions import (
    DiscussionCommentNotFoundException,
    DiscussionPostNotFoundException,
    DiscussionReplyNotFoundException,
)
from repositories.memory_store import MemStorage

from .base import BaseRepository

SEARCH_FIELDS = ("title", "content", "course", "tags")


def _by_votes_then_recent(
    posts: List[db_models.DiscussionPost],
) -> List[db_models.DiscussionPost]:
    return sorted(posts, key=lambda p: (p.votes, p.created_at, p.id), reverse=True)


class DiscussionPostRepository(BaseRepository[db_models.DiscussionPost]):
    """Repository for discussion posts."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.discussion_posts)

    def get_all_recent(self) -> List[db_models.DiscussionPost]:
        """All posts, newest first."""
        return sorted(
            self.table.values(), key=lambda p: (p.created_at, p.id), reverse=True
        )

    def vote(self, post_id: int, value: int) -> db_models.DiscussionPost:
        """
        Add ``value`` to the vote counter.

        Raises:
            DiscussionPostNotFoundException: If the post does not exist
        """
        with self.store.lock:
            if self.get_by_id(post_id) is None:
                raise DiscussionPostNotFoundException(post_id)
            return self.table.apply(post_id, lambda post: {"votes": post.votes + value})

    def delete(self, id: int) -> bool:
        """
        Delete a post. Its replies and comments are left in place.

        Raises:
            DiscussionPostNotFoundException: If the post does not exist
        """
        if not super().delete(id):
            raise DiscussionPostNotFoundException(id)
        return True

    def search(
        self, query: str, limit: Optional[int] = None
    ) -> List[db_models.DiscussionPost]:
        """
        Search posts.

        Title matches first, then by votes, then most recent.
        """
        return self._search(
            query,
            fields=SEARCH_FIELDS,
            primary="title",
            tie_break=_by_votes_then_recent,
            limit=limit,
        )


class DiscussionReplyRepository(BaseRepository[db_models.DiscussionReply]):
    """Repository for replies to discussion posts."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.discussion_replies)

    def get_for_post(self, post_id: int) -> List[db_models.DiscussionReply]:
        """Replies of a post in creation order."""
        return self.filter_by({"post_id": post_id})

    def vote(self, reply_id: int, value: int) -> db_models.DiscussionReply:
        """
        Add ``value`` to the vote counter.

        Raises:
            DiscussionReplyNotFoundException: If the reply does not exist
        """
        with self.store.lock:
            if self.get_by_id(reply_id) is None:
                raise DiscussionReplyNotFoundException(reply_id)
            return self.table.apply(
                reply_id, lambda reply: {"votes": reply.votes + value}
            )

    def accept(self, reply_id: int) -> db_models.DiscussionReply:
        """
        Mark a reply as the accepted answer of its post.

        Any previously accepted reply on the same post is unmarked.

        Raises:
            DiscussionReplyNotFoundException: If the reply does not exist
        """
        with self.store.lock:
            reply = self.get_by_id(reply_id)
            if reply is None:
                raise DiscussionReplyNotFoundException(reply_id)
            for sibling in self.get_for_post(reply.post_id):
                if sibling.is_accepted and sibling.id != reply_id:
                    self.update(sibling.id, {"is_accepted": False})
            return self.update(reply_id, {"is_accepted": True})


class DiscussionCommentRepository(BaseRepository[db_models.DiscussionComment]):
    """Repository for comments on replies."""

    def __init__(self, store: MemStorage):
        super().__init__(store, store.discussion_comments)

    def get_for_reply(self, reply_id: int) -> List[db_models.DiscussionComment]:
        """Comments of a reply, oldest first."""
        comments = self.filter_by({"reply_id": reply_id})
        return sorted(comments, key=lambda c: (c.created_at, c.id))

    def delete(self, id: int) -> bool:
        """
        Delete a comment.

        Raises:
            DiscussionCommentNotFoundException: If the comment does not exist
        """
        if not super().delete(id):
            raise DiscussionCommentNotFoundException(id)
        return True
