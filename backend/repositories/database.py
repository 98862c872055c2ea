"""
Store wiring for request handlers.

The in-memory store is created once in the application lifespan and kept on
``app.state.store``; handlers receive it through ``get_store``.
"""

from fastapi import Request

from repositories.memory_store import MemStorage


def create_store() -> MemStorage:
    """Create an empty store."""
    return MemStorage()


def get_store(request: Request) -> MemStorage:
    """Get the application store."""
    return request.app.state.store
