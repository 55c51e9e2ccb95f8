"""Query orchestration: debounce, cancellation, and parameter mode.

Normal mode runs a debounced search for every text change. Only the newest
query may publish; an older query that finishes late is dropped. Tab on a
command that takes a parameter switches to parameter mode, where the text
is that command's argument and results are rendered without searching.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional, Protocol

from .models.query import QueryState
from .models.search import Payload, RankedResults
from .search.engine import SearchEngine
from .search.payload import resolve_payload

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.03


class ExecutionSink(Protocol):
    def execute(self, payload: Payload) -> None:
        ...


class QueryOrchestrator:
    def __init__(
        self,
        engine: SearchEngine,
        sink: ExecutionSink,
        on_results: Optional[Callable[[RankedResults], None]] = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        self.engine = engine
        self.sink = sink
        self.on_results = on_results
        self.debounce_seconds = debounce_seconds
        self.state = QueryState()
        self.results = RankedResults()
        self._latest_id = 0
        self._pending: Optional[asyncio.Task] = None

    @property
    def latest_query_id(self) -> int:
        return self._latest_id

    def text_changed(self, text: str) -> Optional[asyncio.Task]:
        """Route an edit of the input box to the mode-appropriate handler."""
        if self.state.is_param_mode:
            self.update_param(text)
            return None
        return self.submit(text)

    def submit(self, text: str) -> asyncio.Task:
        """Start a debounced search for text, superseding any pending one."""
        qid = self._supersede()
        self.state = QueryState.normal(text)
        self._pending = asyncio.create_task(self._run(qid, text))
        return self._pending

    async def wait(self) -> Optional[RankedResults]:
        """Wait for the pending query, if any; None when it was superseded."""
        task = self._pending
        if task is None:
            return None
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled():
                return None
            raise

    async def _run(self, qid: int, text: str) -> Optional[RankedResults]:
        if self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
        if qid != self._latest_id:
            return None

        results = await self.engine.search(text)

        if qid != self._latest_id:
            logger.debug(f"Dropping stale results for query {qid}")
            return None
        self._publish(results)
        return results

    def tab(self) -> bool:
        """Enter parameter mode for the best result when it takes a parameter."""
        if self.state.is_param_mode:
            return False
        best = self.results.best
        command = best.command if best is not None else None
        if command is None or not command.enabled or not command.accepts_param:
            return False

        self._supersede()
        self.state = QueryState.param_mode(command.keyword)
        self._publish(self.engine.render_param(command.keyword, ""))
        logger.debug(f"Parameter mode for {command.keyword!r}")
        return True

    def update_param(self, param: str) -> None:
        if not self.state.is_param_mode:
            raise RuntimeError("update_param requires parameter mode")
        self._supersede()
        keyword = self.state.command_keyword
        self.state = QueryState.param_mode(keyword, param)
        self._publish(self.engine.render_param(keyword, param))

    def escape(self) -> bool:
        """Leave parameter mode (or clear the query). Returns True if the mode changed."""
        was_param_mode = self.state.is_param_mode
        self.clear()
        return was_param_mode

    def backspace(self) -> bool:
        """Handle Backspace in parameter mode.

        Deletes the last parameter character, or returns to normal mode with
        the keyword as the query when the parameter is already empty.
        """
        if not self.state.is_param_mode:
            return False
        param = self.state.command_param
        if param:
            self.update_param(param[:-1])
            return True
        self.submit(self.state.command_keyword)
        return True

    def enter(self, index: int = 0) -> Optional[Payload]:
        """Execute the parameterized command or the selected result."""
        if self.state.is_param_mode:
            command = self.engine.find_command(self.state.command_keyword)
            if command is None or not command.enabled:
                logger.warning(f"Command {self.state.command_keyword!r} is unavailable")
                return None
            payload = resolve_payload(command, self.state.command_param)
        else:
            if not 0 <= index < len(self.results.results):
                return None
            result = self.results.results[index]
            if result.command is not None and not result.command.enabled:
                return None
            payload = result.payload

        self.sink.execute(payload)
        self.clear()
        return payload

    def clear(self) -> None:
        self._supersede()
        self.state = QueryState()
        self._publish(RankedResults())

    def _supersede(self) -> int:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._latest_id += 1
        return self._latest_id

    def _publish(self, results: RankedResults) -> None:
        self.results = results
        if self.on_results is not None:
            self.on_results(results)
