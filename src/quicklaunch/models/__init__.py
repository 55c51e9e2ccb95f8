"""Data models for the launcher core."""

from .command import GENERIC_PLACEHOLDERS, Command, CommandGroup, CommandType
from .query import QueryState
from .search import (
    CATEGORY_PRIORITY,
    ActionType,
    Payload,
    RankedResults,
    ResultGroup,
    ResultType,
    SearchResult,
)

__all__ = [
    # Commands
    "Command",
    "CommandGroup",
    "CommandType",
    "GENERIC_PLACEHOLDERS",
    # Results
    "ActionType",
    "Payload",
    "SearchResult",
    "ResultType",
    "ResultGroup",
    "RankedResults",
    "CATEGORY_PRIORITY",
    # Query
    "QueryState",
]
