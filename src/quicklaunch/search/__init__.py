"""Fuzzy matching, candidate sources, ranking and the search engine."""

from .aggregator import aggregate, deduplicate, group, rank
from .engine import SearchEngine
from .payload import resolve_payload
from .scoring import Match, best_match, fuzzy_match
from .sources import (
    ApplicationSource,
    Candidate,
    CandidateSource,
    ClipboardHistory,
    CommandSource,
    FileSource,
    RecentFiles,
)

__all__ = [
    "SearchEngine",
    "aggregate",
    "rank",
    "deduplicate",
    "group",
    "resolve_payload",
    "Match",
    "fuzzy_match",
    "best_match",
    "Candidate",
    "CandidateSource",
    "CommandSource",
    "ApplicationSource",
    "FileSource",
    "RecentFiles",
    "ClipboardHistory",
]
