"""
Discussion Service

Forum posts, replies and comments, and the nested post view.

A post view is assembled on read: the post, its replies (in creation order)
and each reply's comments (oldest first), every level annotated with the
author's display name and avatar. Missing authors fall back to "Unknown" and
the default avatar; a missing author never fails the view.
"""

from typing import Any, List, Optional

from loguru import logger

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.sanitization import sanitize_html, sanitize_plain_text, sanitize_tags
from helpers.user_display import avatar_url, display_name
from models.exceptions import (
    DiscussionCommentNotFoundException,
    DiscussionPostNotFoundException,
    DiscussionReplyNotFoundException,
    InsufficientPermissionsException,
    ValidationException,
)
from repositories.discussion_repository import (
    DiscussionCommentRepository,
    DiscussionPostRepository,
    DiscussionReplyRepository,
)
from repositories.memory_store import MemStorage
from repositories.user_repository import UserRepository
from services.activity_service import ActivityService

VALID_VOTES = (1, -1)


class DiscussionService:
    """Service for the discussion forum."""

    @staticmethod
    def _with_author(
        user_repo: UserRepository, record: db_models.Record
    ) -> dict[str, Any]:
        author = user_repo.get_by_id(record.author_id)  # type: ignore[attr-defined]
        return {
            **record.model_dump(),
            "author_name": display_name(author),
            "author_avatar": avatar_url(author),
        }

    @staticmethod
    def _check_vote(value: int) -> None:
        if value not in VALID_VOTES:
            raise ValidationException("Vote value must be 1 or -1")

    # Posts

    @staticmethod
    def create_post(
        store: MemStorage, post_data: schemas.DiscussionPostCreate, author_id: int
    ) -> db_models.DiscussionPost:
        with store.atomic(store.discussion_posts, store.activities):
            post = DiscussionPostRepository(store).create(
                {
                    "title": sanitize_plain_text(post_data.title),
                    "content": sanitize_html(post_data.content),
                    "course": sanitize_plain_text(post_data.course),
                    "tags": sanitize_tags(post_data.tags),
                    "author_id": author_id,
                }
            )
            ActivityService.record(
                store,
                user_id=author_id,
                activity_type=db_models.ActivityType.POST_CREATED,
                target_id=post.id,
                target_type="discussion",
                metadata={"title": post.title},
            )

        logger.info(f"Discussion post {post.id} created by user {author_id}")
        return post

    @staticmethod
    def get_posts(
        store: MemStorage, course: Optional[str] = None
    ) -> List[dict[str, Any]]:
        """Posts (newest first) with their author."""
        posts = DiscussionPostRepository(store).get_all_recent()
        if course:
            posts = [p for p in posts if p.course == course]
        user_repo = UserRepository(store)
        return [DiscussionService._with_author(user_repo, p) for p in posts]

    @staticmethod
    def get_discussion_post(
        store: MemStorage, post_id: int
    ) -> Optional[dict[str, Any]]:
        """
        Materialize a post with its replies and their comments.

        Returns:
            The nested view, or None if the post does not exist
        """
        post = DiscussionPostRepository(store).get_by_id(post_id)
        if post is None:
            return None

        user_repo = UserRepository(store)
        comment_repo = DiscussionCommentRepository(store)

        replies = []
        for reply in DiscussionReplyRepository(store).get_for_post(post_id):
            reply_view = DiscussionService._with_author(user_repo, reply)
            reply_view["comments"] = [
                DiscussionService._with_author(user_repo, comment)
                for comment in comment_repo.get_for_reply(reply.id)
            ]
            replies.append(reply_view)

        post_view = DiscussionService._with_author(user_repo, post)
        post_view["replies"] = replies
        return post_view

    @staticmethod
    def vote_post(
        store: MemStorage, post_id: int, value: int
    ) -> db_models.DiscussionPost:
        """
        Raises:
            ValidationException: If value is not 1 or -1
            DiscussionPostNotFoundException: If the post does not exist
        """
        DiscussionService._check_vote(value)
        return DiscussionPostRepository(store).vote(post_id, value)

    # Replies

    @staticmethod
    def create_reply(
        store: MemStorage,
        post_id: int,
        reply_data: schemas.DiscussionReplyCreate,
        author_id: int,
    ) -> db_models.DiscussionReply:
        """
        Raises:
            DiscussionPostNotFoundException: If the post does not exist
            DiscussionReplyNotFoundException: If the parent reply is missing
                or belongs to another post
        """
        reply_repo = DiscussionReplyRepository(store)
        with store.lock:
            if DiscussionPostRepository(store).get_by_id(post_id) is None:
                raise DiscussionPostNotFoundException(post_id)
            if reply_data.parent_reply_id is not None:
                parent = reply_repo.get_by_id(reply_data.parent_reply_id)
                if parent is None or parent.post_id != post_id:
                    raise DiscussionReplyNotFoundException(reply_data.parent_reply_id)
            reply = reply_repo.create(
                {
                    "content": sanitize_html(reply_data.content),
                    "post_id": post_id,
                    "parent_reply_id": reply_data.parent_reply_id,
                    "author_id": author_id,
                }
            )
        logger.info(f"Reply {reply.id} added to post {post_id} by user {author_id}")
        return reply

    @staticmethod
    def get_discussion_replies(
        store: MemStorage, post_id: int
    ) -> List[dict[str, Any]]:
        user_repo = UserRepository(store)
        return [
            DiscussionService._with_author(user_repo, reply)
            for reply in DiscussionReplyRepository(store).get_for_post(post_id)
        ]

    @staticmethod
    def get_discussion_reply(store: MemStorage, reply_id: int) -> dict[str, Any]:
        reply = DiscussionReplyRepository(store).get_by_id(reply_id)
        if reply is None:
            raise DiscussionReplyNotFoundException(reply_id)
        return DiscussionService._with_author(UserRepository(store), reply)

    @staticmethod
    def vote_reply(
        store: MemStorage, reply_id: int, value: int
    ) -> db_models.DiscussionReply:
        DiscussionService._check_vote(value)
        return DiscussionReplyRepository(store).vote(reply_id, value)

    @staticmethod
    def accept_reply(
        store: MemStorage, reply_id: int, user_id: int
    ) -> db_models.DiscussionReply:
        """
        Mark a reply as the accepted answer.

        Raises:
            DiscussionReplyNotFoundException: If the reply does not exist
            DiscussionPostNotFoundException: If its post no longer exists
            InsufficientPermissionsException: If the caller did not write the post
        """
        reply_repo = DiscussionReplyRepository(store)
        with store.lock:
            reply = reply_repo.get_by_id(reply_id)
            if reply is None:
                raise DiscussionReplyNotFoundException(reply_id)
            post = DiscussionPostRepository(store).get_by_id(reply.post_id)
            if post is None:
                raise DiscussionPostNotFoundException(reply.post_id)
            if post.author_id != user_id:
                logger.warning(
                    f"User {user_id} tried to accept reply {reply_id} on post {post.id}"
                )
                raise InsufficientPermissionsException(
                    "Only the author of the post can accept a reply"
                )
            return reply_repo.accept(reply_id)

    # Comments

    @staticmethod
    def create_comment(
        store: MemStorage,
        comment_data: schemas.DiscussionCommentCreate,
        author_id: int,
    ) -> db_models.DiscussionComment:
        """
        Raises:
            DiscussionPostNotFoundException: If the post does not exist
            DiscussionReplyNotFoundException: If the reply is missing or
                belongs to another post
        """
        with store.lock:
            if DiscussionPostRepository(store).get_by_id(comment_data.post_id) is None:
                raise DiscussionPostNotFoundException(comment_data.post_id)
            if comment_data.reply_id is not None:
                reply = DiscussionReplyRepository(store).get_by_id(
                    comment_data.reply_id
                )
                if reply is None or reply.post_id != comment_data.post_id:
                    raise DiscussionReplyNotFoundException(comment_data.reply_id)
            comment = DiscussionCommentRepository(store).create(
                {
                    "content": sanitize_html(comment_data.content),
                    "post_id": comment_data.post_id,
                    "reply_id": comment_data.reply_id,
                    "author_id": author_id,
                }
            )
        return comment

    @staticmethod
    def get_discussion_comment(store: MemStorage, comment_id: int) -> dict[str, Any]:
        comment = DiscussionCommentRepository(store).get_by_id(comment_id)
        if comment is None:
            raise DiscussionCommentNotFoundException(comment_id)
        return DiscussionService._with_author(UserRepository(store), comment)

    @staticmethod
    def delete_comment(store: MemStorage, comment_id: int, user_id: int) -> None:
        """
        Delete a comment written by the caller.

        Raises:
            DiscussionCommentNotFoundException: If the comment does not exist
            InsufficientPermissionsException: If the caller is not the author
        """
        comment_repo = DiscussionCommentRepository(store)
        with store.lock:
            comment = comment_repo.get_by_id(comment_id)
            if comment is None:
                raise DiscussionCommentNotFoundException(comment_id)
            if comment.author_id != user_id:
                raise InsufficientPermissionsException(
                    "You can only delete your own comments"
                )
            comment_repo.delete(comment_id)
        logger.info(f"Comment {comment_id} deleted by its author {user_id}")
