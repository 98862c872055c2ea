"""
Request correlation ids.

Every request gets a short id that is echoed in the ``X-Correlation-ID``
response header, attached to every log line and to every error payload, so a
student reporting a failure can quote it.
"""

import uuid
from contextvars import ContextVar

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """
    Generate a short correlation id.

    Returns:
        8 hexadecimal characters (e.g. "4f1c09ab").
    """
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    """Return the correlation id of the current request, or "" outside one."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Bind a correlation id to the current request context."""
    correlation_id_var.set(correlation_id)
