"""Search engine: one query in, one ranked result set out."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from ..config import ConfigProvider, LauncherConfig
from ..interpreters.dispatcher import GrammarDispatcher
from ..models.command import Command
from ..models.search import ActionType, Payload, RankedResults, ResultType, SearchResult
from .aggregator import aggregate, rank
from .payload import resolve_payload
from .scoring import best_match
from .sources import (
    ApplicationSource,
    CandidateSource,
    ClipboardHistory,
    CommandSource,
    FileSource,
    RecentFiles,
)

logger = logging.getLogger(__name__)

DEFAULT_LISTING_SCORE = 0.5
QR_HINT_SCORE = 0.3
QR_MAX_CHARS = 2000
QR_GROUP = "QR Code"


class SearchEngine:
    """Runs grammar classification and fuzzy matching for a query.

    Classification and every candidate source run concurrently; the
    aggregator merges them into a single ranked, grouped list.
    """

    def __init__(
        self,
        config_provider: ConfigProvider,
        dispatcher: Optional[GrammarDispatcher] = None,
        sources: Optional[Sequence[CandidateSource]] = None,
        command_source: Optional[CommandSource] = None,
        clipboard: Optional[ClipboardHistory] = None,
        recent_files: Optional[RecentFiles] = None,
    ):
        self.config_provider = config_provider
        self.command_source = command_source or CommandSource()
        self.clipboard = clipboard if clipboard is not None else ClipboardHistory()
        self.recent_files = recent_files if recent_files is not None else RecentFiles()
        if dispatcher is None:
            dispatcher = GrammarDispatcher.from_settings(config_provider.snapshot().settings)
        self.dispatcher = dispatcher
        if sources is None:
            sources = [
                self.command_source,
                ApplicationSource(),
                FileSource(),
                self.recent_files,
                self.clipboard,
            ]
        self.sources = list(sources)

    async def search(self, text: str) -> RankedResults:
        config = self.config_provider.snapshot()
        query = text.strip()
        if not query:
            return self.default_results(config)

        classification, matched = await asyncio.gather(
            self.dispatcher.classify(text),
            self._match_sources(query, config),
        )

        results: list[SearchResult] = list(classification.results)
        results.extend(matched)
        qr_hint = self._qr_hint(query, config)
        if qr_hint is not None:
            results.append(qr_hint)

        return aggregate(
            results,
            config.settings.max_results,
            warnings=classification.warnings,
            interpreter=classification.interpreter,
        )

    def default_results(self, config: LauncherConfig) -> RankedResults:
        """Listing shown for an empty query: custom then built-in commands."""
        results = [
            self.command_source.candidate_for(config, command).to_result(DEFAULT_LISTING_SCORE)
            for command in self.command_source.commands(config)
        ]
        return aggregate(results, config.settings.max_results)

    def find_command(self, keyword: str) -> Optional[Command]:
        return self.command_source.find(self.config_provider.snapshot(), keyword)

    def render_param(self, keyword: str, param: str) -> RankedResults:
        """Single-result listing for a command in parameter mode."""
        config = self.config_provider.snapshot()
        command = self.command_source.find(config, keyword)
        if command is None:
            return RankedResults()
        candidate = self.command_source.candidate_for(config, command)
        payload = resolve_payload(command, param)
        result = SearchResult(
            title=f"{command.keyword} {param}",
            subtitle=payload.target,
            group_label=candidate.group_label,
            result_type=candidate.result_type,
            payload=payload,
            score=1.0,
            command=command,
        )
        return aggregate([result], 1)

    async def _match_sources(self, query: str, config: LauncherConfig) -> list[SearchResult]:
        active = [s for s in self.sources if len(query) >= s.min_query_length]
        per_source = await asyncio.gather(*(self._match_source(s, query, config) for s in active))
        return [result for results in per_source for result in results]

    async def _match_source(
        self,
        source: CandidateSource,
        query: str,
        config: LauncherConfig,
    ) -> list[SearchResult]:
        scored: list[SearchResult] = []
        for candidate in await source.candidates(config):
            match = best_match(query, candidate.title, candidate.extra_keys)
            if match is not None:
                scored.append(candidate.to_result(match.score, match.indices))
        scored = rank(scored)
        if source.max_results is not None:
            scored = scored[: source.max_results]
        logger.debug(f"{source.name}: {len(scored)} matches for {query!r}")
        return scored

    def _qr_hint(self, query: str, config: LauncherConfig) -> Optional[SearchResult]:
        if len(query) <= config.settings.qr_threshold or len(query) > QR_MAX_CHARS:
            return None
        return SearchResult(
            title="Generate QR code",
            subtitle=f"{len(query)} characters",
            group_label=QR_GROUP,
            result_type=ResultType.QR_CODE,
            payload=Payload(action=ActionType.GENERATE_QR_CODE, target=query),
            score=QR_HINT_SCORE,
        )
