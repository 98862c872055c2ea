"""
Custom domain exceptions for the application.

These exceptions are raised by repositories and services and converted to HTTP
responses by centralized exception handlers in main.py, so the data-access and
business layers stay HTTP-agnostic (they are also used by the seed routine).

Every exception carries a correlation id for log and Sentry lookups.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        # Use request correlation ID if available, otherwise generate new one
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested record is not found."""

    pass


class PermissionDeniedException(DomainException):
    """Raised when the caller lacks required permissions."""

    pass


class ValidationException(DomainException):
    """Raised when input validation fails."""

    pass


class ConflictException(DomainException):
    """Raised when an operation conflicts with existing data."""

    pass


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    pass


class AlreadyExistsException(DomainException):
    """Raised when trying to create a record that already exists."""

    pass


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    pass


# Store-level exceptions


class RecordNotFoundException(NotFoundException):
    """
    Raised by the entity store when an update targets a missing id.

    Attributes:
        kind: Record kind, e.g. "User" or "Discussion post".
        record_id: The id that was not found.
    """

    def __init__(self, kind: str, record_id: int):
        super().__init__(f"{kind} with ID {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class UserNotFoundException(RecordNotFoundException):
    """User not found."""

    def __init__(self, user_id: int):
        super().__init__("User", user_id)


class PaperNotFoundException(RecordNotFoundException):
    """Paper not found."""

    def __init__(self, paper_id: int):
        super().__init__("Paper", paper_id)


class ResourceNotFoundException(RecordNotFoundException):
    """Study resource not found."""

    def __init__(self, resource_id: int):
        super().__init__("Resource", resource_id)


class DiscussionPostNotFoundException(RecordNotFoundException):
    """Discussion post not found."""

    def __init__(self, post_id: int):
        super().__init__("Discussion post", post_id)


class DiscussionReplyNotFoundException(RecordNotFoundException):
    """Discussion reply not found."""

    def __init__(self, reply_id: int):
        super().__init__("Discussion reply", reply_id)


class DiscussionCommentNotFoundException(RecordNotFoundException):
    """Discussion comment not found."""

    def __init__(self, comment_id: int):
        super().__init__("Discussion comment", comment_id)


class StudyGroupNotFoundException(RecordNotFoundException):
    """Study group not found."""

    def __init__(self, group_id: int):
        super().__init__("Study group", group_id)


class FriendRequestNotFoundException(RecordNotFoundException):
    """Friend request not found."""

    def __init__(self, request_id: int):
        super().__init__("Friend request", request_id)


class MembershipNotFoundException(NotFoundException):
    """User is not a member of the study group."""

    def __init__(self, group_id: int, user_id: int):
        super().__init__(f"User {user_id} is not a member of study group {group_id}")
        self.group_id = group_id
        self.user_id = user_id


# Auth and accounts


class UserAlreadyExistsException(AlreadyExistsException):
    """Username or email already registered."""

    pass


class InvalidCredentialsException(AuthenticationException):
    """Invalid username or password."""

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


class InsufficientPermissionsException(PermissionDeniedException):
    """User doesn't have sufficient permissions."""

    pass


class UserBannedException(PermissionDeniedException):
    """Raised when a banned user signs in or calls an authenticated endpoint."""

    def __init__(self, reason: str | None = None):
        if reason:
            message = f"Account is banned. Reason: {reason}"
        else:
            message = "Account is banned"
        super().__init__(message)
        self.reason = reason


# First-admin state machine


class NotFirstAdminException(PermissionDeniedException):
    """Only the first admin can grant or revoke admin permissions."""

    def __init__(
        self, message: str = "Only the first admin can manage admin permissions"
    ):
        super().__init__(message)


class FirstAdminProtectedException(ConflictException):
    """The first admin cannot lose admin permissions."""

    def __init__(
        self, message: str = "Cannot remove admin permissions from the first admin"
    ):
        super().__init__(message)


class AdminAlreadyExistsException(PermissionDeniedException):
    """Bootstrap setup refused because an admin already exists."""

    def __init__(self, message: str = "Admin already exists"):
        super().__init__(message)


# Social


class FriendRequestExistsException(ConflictException):
    """A friend request between the two users already exists."""

    def __init__(self, message: str = "Friend request already exists"):
        super().__init__(message)


class AlreadyFriendsException(ConflictException):
    """The two users are already friends."""

    def __init__(self, message: str = "Users are already friends"):
        super().__init__(message)


class AlreadyMemberException(ConflictException):
    """User already belongs to the study group."""

    def __init__(self, group_id: int, user_id: int):
        super().__init__(
            f"User {user_id} is already a member of study group {group_id}"
        )
        self.group_id = group_id
        self.user_id = user_id


# Uploads


class InvalidUploadException(ValidationException):
    """Uploaded file is missing, too large, or of a disallowed type."""

    pass
