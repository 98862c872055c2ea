"""Tests for DiscussionService."""

import pytest

import models.schemas as schemas
from models.config import settings
from models.exceptions import (
    DiscussionPostNotFoundException,
    DiscussionReplyNotFoundException,
    InsufficientPermissionsException,
    ValidationException,
)
from repositories.activity_repository import ActivityRepository
from repositories.memory_store import MemStorage
from services.discussion_service import DiscussionService


@pytest.fixture
def alice(user_factory):
    return user_factory("alice", display_name="Alice")


@pytest.fixture
def bob(user_factory):
    return user_factory("bob", display_name="Bob")


def create_post(store: MemStorage, author_id: int, title: str = "Q1", **extra):
    return DiscussionService.create_post(
        store,
        schemas.DiscussionPostCreate(title=title, content="How?", **extra),
        author_id,
    )


def create_reply(store: MemStorage, post_id: int, author_id: int, content: str):
    return DiscussionService.create_reply(
        store, post_id, schemas.DiscussionReplyCreate(content=content), author_id
    )


class TestNestedPost:
    """Test cases for the nested post view."""

    def test_post_with_reply_and_comment(self, store: MemStorage, alice, bob):
        """Alice asks, Bob replies, Alice comments on the reply."""
        post = create_post(store, alice.id)
        reply = create_reply(store, post.id, bob.id, "R1")
        DiscussionService.create_comment(
            store,
            schemas.DiscussionCommentCreate(
                content="C1", post_id=post.id, reply_id=reply.id
            ),
            alice.id,
        )

        view = DiscussionService.get_discussion_post(store, post.id)

        assert (alice.id, bob.id, post.id, reply.id) == (1, 2, 1, 1)
        assert view["title"] == "Q1"
        assert view["author_name"] == "Alice"
        assert len(view["replies"]) == 1
        reply_view = view["replies"][0]
        assert reply_view["content"] == "R1"
        assert reply_view["author_name"] == "Bob"
        assert [c["content"] for c in reply_view["comments"]] == ["C1"]
        assert reply_view["comments"][0]["author_name"] == "Alice"

    def test_missing_post_returns_none(self, store: MemStorage):
        assert DiscussionService.get_discussion_post(store, 1) is None

    def test_missing_author_falls_back(self, store: MemStorage, alice):
        """Deleted authors render as Unknown with the default avatar."""
        post = create_post(store, alice.id)
        create_reply(store, post.id, 999, "R1")

        view = DiscussionService.get_discussion_post(store, post.id)

        assert view["replies"][0]["author_name"] == "Unknown"
        assert view["replies"][0]["author_avatar"] == settings.DEFAULT_AVATAR_URL

    def test_comments_ordered_oldest_first(self, store: MemStorage, alice, bob):
        post = create_post(store, alice.id)
        reply = create_reply(store, post.id, bob.id, "R1")
        for content in ("first", "second"):
            DiscussionService.create_comment(
                store,
                schemas.DiscussionCommentCreate(
                    content=content, post_id=post.id, reply_id=reply.id
                ),
                alice.id,
            )

        view = DiscussionService.get_discussion_post(store, post.id)

        comments = view["replies"][0]["comments"]
        assert [c["content"] for c in comments] == ["first", "second"]


class TestPosts:
    """Test cases for posts and voting."""

    def test_create_post_records_activity(self, store: MemStorage, alice):
        post = create_post(store, alice.id, tags=["exams", "exams", " "])

        assert post.tags == ["exams"]
        activities = ActivityRepository(store).get_for_user(alice.id)
        assert [a.type for a in activities] == ["post_created"]
        assert activities[0].target_id == post.id

    def test_create_post_strips_scripts(self, store: MemStorage, alice):
        post = DiscussionService.create_post(
            store,
            schemas.DiscussionPostCreate(
                title="<b>Q1</b>", content="<script>x()</script><p>ok</p>"
            ),
            alice.id,
        )

        assert post.title == "Q1"
        assert "<script>" not in post.content
        assert "<p>ok</p>" in post.content

    def test_get_posts_filters_by_course(self, store: MemStorage, alice):
        create_post(store, alice.id, title="A", course="MATH101")
        create_post(store, alice.id, title="B", course="PHYS101")

        posts = DiscussionService.get_posts(store, course="MATH101")

        assert [p["title"] for p in posts] == ["A"]

    def test_get_posts_newest_first(self, store: MemStorage, alice):
        create_post(store, alice.id, title="older")
        create_post(store, alice.id, title="newer")

        posts = DiscussionService.get_posts(store)

        assert [p["title"] for p in posts] == ["newer", "older"]

    def test_vote_post(self, store: MemStorage, alice):
        post = create_post(store, alice.id)

        DiscussionService.vote_post(store, post.id, 1)
        DiscussionService.vote_post(store, post.id, 1)
        result = DiscussionService.vote_post(store, post.id, -1)

        assert result.votes == 1

    def test_invalid_vote_value(self, store: MemStorage, alice):
        post = create_post(store, alice.id)

        with pytest.raises(ValidationException):
            DiscussionService.vote_post(store, post.id, 5)

    def test_vote_missing_post(self, store: MemStorage):
        with pytest.raises(DiscussionPostNotFoundException):
            DiscussionService.vote_post(store, 42, 1)


class TestReplies:
    """Test cases for replies and accepted answers."""

    def test_reply_to_missing_post(self, store: MemStorage, bob):
        with pytest.raises(DiscussionPostNotFoundException):
            create_reply(store, 7, bob.id, "R1")

    def test_parent_reply_must_belong_to_post(self, store: MemStorage, alice, bob):
        first = create_post(store, alice.id, title="Q1")
        second = create_post(store, alice.id, title="Q2")
        reply = create_reply(store, first.id, bob.id, "R1")

        with pytest.raises(DiscussionReplyNotFoundException):
            DiscussionService.create_reply(
                store,
                second.id,
                schemas.DiscussionReplyCreate(content="R2", parent_reply_id=reply.id),
                bob.id,
            )

    def test_accepting_moves_the_accepted_mark(self, store: MemStorage, alice, bob):
        post = create_post(store, alice.id)
        first = create_reply(store, post.id, bob.id, "R1")
        second = create_reply(store, post.id, bob.id, "R2")

        DiscussionService.accept_reply(store, first.id, alice.id)
        DiscussionService.accept_reply(store, second.id, alice.id)

        replies = DiscussionService.get_discussion_replies(store, post.id)
        assert [r["is_accepted"] for r in replies] == [False, True]

    def test_only_post_author_accepts(self, store: MemStorage, alice, bob):
        post = create_post(store, alice.id)
        reply = create_reply(store, post.id, bob.id, "R1")

        with pytest.raises(InsufficientPermissionsException):
            DiscussionService.accept_reply(store, reply.id, bob.id)

    def test_vote_reply(self, store: MemStorage, alice, bob):
        post = create_post(store, alice.id)
        reply = create_reply(store, post.id, bob.id, "R1")

        assert DiscussionService.vote_reply(store, reply.id, -1).votes == -1

    def test_get_missing_reply(self, store: MemStorage):
        with pytest.raises(DiscussionReplyNotFoundException):
            DiscussionService.get_discussion_reply(store, 3)


class TestComments:
    """Test cases for comments."""

    def test_comment_on_reply_of_other_post(self, store: MemStorage, alice, bob):
        first = create_post(store, alice.id, title="Q1")
        second = create_post(store, alice.id, title="Q2")
        reply = create_reply(store, first.id, bob.id, "R1")

        with pytest.raises(DiscussionReplyNotFoundException):
            DiscussionService.create_comment(
                store,
                schemas.DiscussionCommentCreate(
                    content="C1", post_id=second.id, reply_id=reply.id
                ),
                alice.id,
            )

    def test_delete_own_comment(self, store: MemStorage, alice):
        post = create_post(store, alice.id)
        comment = DiscussionService.create_comment(
            store,
            schemas.DiscussionCommentCreate(content="C1", post_id=post.id),
            alice.id,
        )

        DiscussionService.delete_comment(store, comment.id, alice.id)

        assert store.discussion_comments.get(comment.id) is None

    def test_cannot_delete_others_comment(self, store: MemStorage, alice, bob):
        post = create_post(store, alice.id)
        comment = DiscussionService.create_comment(
            store,
            schemas.DiscussionCommentCreate(content="C1", post_id=post.id),
            alice.id,
        )

        with pytest.raises(InsufficientPermissionsException):
            DiscussionService.delete_comment(store, comment.id, bob.id)
