"""
Standardized query parameters for list endpoints.
"""

from typing import Annotated, Optional

from fastapi import Query

# Standard pagination for most list endpoints
PaginationSkip = Annotated[int, Query(ge=0, description="Number of records to skip")]

# Pagination for endpoints with larger datasets (admin panels)
PaginationLimitLarge = Annotated[
    int, Query(ge=1, le=200, description="Maximum number of records to return")
]

# Optional trailing/leading window for feeds; None returns everything
FeedLimit = Annotated[
    Optional[int],
    Query(ge=1, le=200, description="Maximum number of entries to return"),
]

# Chat history window; None uses the configured default
ChatLimit = Annotated[
    Optional[int],
    Query(ge=1, le=500, description="Number of most recent messages to return"),
]

# Search result cap
SearchLimit = Annotated[
    Optional[int],
    Query(ge=1, le=100, description="Maximum number of results"),
]
