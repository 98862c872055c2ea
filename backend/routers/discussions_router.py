"""Discussion forum endpoints: posts, replies and comments."""

from typing import List, Optional

from fastapi import APIRouter, Depends, status

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import DiscussionPostNotFoundException
from repositories.database import get_store
from repositories.memory_store import MemStorage
from services.discussion_service import DiscussionService

router = APIRouter(prefix="/discussions", tags=["discussions"])


# Replies and comments by id (registered before the /{post_id} routes)


@router.get("/replies/{reply_id}", response_model=schemas.DiscussionReplyWithAuthor)
def get_reply(reply_id: int, store: MemStorage = Depends(get_store)):
    return DiscussionService.get_discussion_reply(store, reply_id)


@router.post("/replies/{reply_id}/vote", response_model=schemas.DiscussionReply)
def vote_reply(
    reply_id: int,
    vote: schemas.VoteRequest,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.DiscussionReply:
    """Vote a reply up (1) or down (-1)."""
    return DiscussionService.vote_reply(store, reply_id, vote.value)


@router.post("/replies/{reply_id}/accept", response_model=schemas.DiscussionReply)
def accept_reply(
    reply_id: int,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.DiscussionReply:
    """Mark a reply as the answer. Only the post author may do this."""
    return DiscussionService.accept_reply(store, reply_id, current_user.id)


@router.post(
    "/comments",
    response_model=schemas.DiscussionComment,
    status_code=status.HTTP_201_CREATED,
)
def create_comment(
    comment: schemas.DiscussionCommentCreate,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.DiscussionComment:
    return DiscussionService.create_comment(store, comment, current_user.id)


@router.get(
    "/comments/{comment_id}", response_model=schemas.DiscussionCommentWithAuthor
)
def get_comment(comment_id: int, store: MemStorage = Depends(get_store)):
    return DiscussionService.get_discussion_comment(store, comment_id)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(
    comment_id: int,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> None:
    """Delete one of the caller's comments."""
    DiscussionService.delete_comment(store, comment_id, current_user.id)


# Posts


@router.post(
    "", response_model=schemas.DiscussionPost, status_code=status.HTTP_201_CREATED
)
def create_post(
    post: schemas.DiscussionPostCreate,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.DiscussionPost:
    return DiscussionService.create_post(store, post, current_user.id)


@router.get("", response_model=List[schemas.DiscussionPostWithAuthor])
def get_posts(course: Optional[str] = None, store: MemStorage = Depends(get_store)):
    """List posts, newest first."""
    return DiscussionService.get_posts(store, course=course)


@router.get("/{post_id}", response_model=schemas.DiscussionPostDetail)
def get_post(
    post_id: int,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
):
    """Get a post with its replies and their comments."""
    post = DiscussionService.get_discussion_post(store, post_id)
    if post is None:
        raise DiscussionPostNotFoundException(post_id)
    return post


@router.post(
    "/{post_id}/replies",
    response_model=schemas.DiscussionReply,
    status_code=status.HTTP_201_CREATED,
)
def create_reply(
    post_id: int,
    reply: schemas.DiscussionReplyCreate,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.DiscussionReply:
    return DiscussionService.create_reply(store, post_id, reply, current_user.id)


@router.get(
    "/{post_id}/replies", response_model=List[schemas.DiscussionReplyWithAuthor]
)
def get_replies(post_id: int, store: MemStorage = Depends(get_store)):
    return DiscussionService.get_discussion_replies(store, post_id)


@router.post("/{post_id}/vote", response_model=schemas.DiscussionPost)
def vote_post(
    post_id: int,
    vote: schemas.VoteRequest,
    current_user: db_models.User = Depends(auth.get_current_active_user),
    store: MemStorage = Depends(get_store),
) -> db_models.DiscussionPost:
    """Vote a post up (1) or down (-1)."""
    return DiscussionService.vote_post(store, post_id, vote.value)
