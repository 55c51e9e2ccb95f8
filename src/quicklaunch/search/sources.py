"""Candidate providers for fuzzy matching.

Every source exposes ``async candidates(config)`` returning the full list of
things that can be matched; scoring happens in the engine. Filesystem
sources scan in a worker thread and skip directories that cannot be read.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional, Protocol, Sequence

from ..config import ApplicationSettings, FileSearchSettings, LauncherConfig
from ..errors import ScanFailure
from ..models.command import Command
from ..models.search import ActionType, Payload, ResultType, SearchResult
from .builtins import BUILTIN_COMMANDS
from .payload import resolve_payload

logger = logging.getLogger(__name__)

COMMANDS_GROUP = "Commands"
BUILTIN_GROUP = "Built-in"
APPLICATIONS_GROUP = "Applications"
FILES_GROUP = "Files"
RECENT_GROUP = "Recent"
CLIPBOARD_GROUP = "Clipboard"

APPLICATION_SUFFIXES = (".desktop", ".app", ".lnk")


@dataclass(frozen=True)
class Candidate:
    title: str
    subtitle: str
    group_label: str
    result_type: ResultType
    payload: Payload
    extra_keys: tuple[str, ...] = ()
    command: Optional[Command] = field(default=None, compare=False)

    def to_result(self, score: float, indices: tuple[int, ...] = ()) -> SearchResult:
        return SearchResult(
            title=self.title,
            subtitle=self.subtitle,
            group_label=self.group_label,
            result_type=self.result_type,
            payload=self.payload,
            score=score,
            matched_indices=indices,
            command=self.command,
        )


class CandidateSource(Protocol):
    name: str
    min_query_length: int
    # Per-source cap on scored results; None keeps everything.
    max_results: Optional[int]

    async def candidates(self, config: LauncherConfig) -> Sequence[Candidate]:
        ...


def command_candidate(command: Command, group_label: str) -> Candidate:
    result_type = ResultType.BUILTIN_COMMAND if command.is_builtin else ResultType.CUSTOM_COMMAND
    extra = tuple(k for k in (command.display_name, command.description) if k)
    return Candidate(
        title=command.keyword,
        subtitle=command.subtitle,
        group_label=group_label,
        result_type=result_type,
        payload=resolve_payload(command),
        extra_keys=extra,
        command=command,
    )


class CommandSource:
    """Enabled custom commands from the config snapshot, then built-ins."""

    name = "commands"
    min_query_length = 1
    max_results: Optional[int] = None

    def __init__(self, builtins: Sequence[Command] = BUILTIN_COMMANDS):
        self.builtins = tuple(builtins)

    def commands(self, config: LauncherConfig) -> list[Command]:
        custom = [c for c in config.commands if c.enabled]
        taken = {c.keyword.lower() for c in custom}
        builtin = [c for c in self.builtins if c.enabled and c.keyword.lower() not in taken]
        return custom + builtin

    def find(self, config: LauncherConfig, keyword: str) -> Optional[Command]:
        keyword = keyword.lower()
        for command in self.commands(config):
            if command.keyword.lower() == keyword:
                return command
        return None

    def candidate_for(self, config: LauncherConfig, command: Command) -> Candidate:
        if command.is_builtin:
            return command_candidate(command, BUILTIN_GROUP)
        return command_candidate(command, config.group_name(command.group_id) or COMMANDS_GROUP)

    async def candidates(self, config: LauncherConfig) -> Sequence[Candidate]:
        return [self.candidate_for(config, c) for c in self.commands(config)]


def _desktop_entry_name(path: Path) -> Optional[str]:
    """Read Name= from a .desktop file; None for hidden entries."""
    name: Optional[str] = None
    in_entry = False
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.strip()
            if line.startswith("["):
                in_entry = line == "[Desktop Entry]"
                continue
            if not in_entry:
                continue
            if line in ("NoDisplay=true", "Hidden=true"):
                return None
            if name is None and line.startswith("Name="):
                name = line[len("Name="):].strip()
    return name or path.stem


def _walk(directory: Path, recursive: bool) -> Iterator[Path]:
    try:
        entries = list(os.scandir(directory))
    except OSError as e:
        raise ScanFailure(f"cannot list {directory}: {e}") from e
    for entry in sorted(entries, key=lambda e: e.name.lower()):
        if entry.name.startswith("."):
            continue
        path = Path(entry.path)
        yield path
        if recursive and entry.is_dir(follow_symlinks=False) and path.suffix.lower() != ".app":
            try:
                yield from _walk(path, recursive)
            except ScanFailure as e:
                logger.debug(f"Skipping {path}: {e}")


class ApplicationSource:
    """Installed applications, cached between scans."""

    name = "applications"
    min_query_length = 2
    max_results: Optional[int] = 8

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._cache: Optional[list[Candidate]] = None
        self._cache_key: Optional[tuple] = None
        self._scanned_at = 0.0
        self._lock = asyncio.Lock()

    def scan(self, settings: ApplicationSettings) -> list[Candidate]:
        found: list[Candidate] = []
        seen: set[str] = set()
        for directory in settings.directories:
            if len(found) >= settings.max_items:
                break
            root = Path(directory).expanduser()
            if not root.is_dir():
                continue
            try:
                for path in _walk(root, recursive=True):
                    if len(found) >= settings.max_items:
                        break
                    if path.suffix.lower() not in APPLICATION_SUFFIXES:
                        continue
                    title = self._title(path)
                    if not title or title.lower() in seen:
                        continue
                    seen.add(title.lower())
                    found.append(
                        Candidate(
                            title=title,
                            subtitle=str(path),
                            group_label=APPLICATIONS_GROUP,
                            result_type=ResultType.APPLICATION,
                            payload=Payload(action=ActionType.LAUNCH_APPLICATION, target=str(path)),
                            extra_keys=(path.stem,),
                        )
                    )
            except ScanFailure as e:
                logger.debug(f"Skipping application directory {root}: {e}")
        logger.debug(f"Found {len(found)} applications")
        return found

    def _title(self, path: Path) -> Optional[str]:
        if path.suffix.lower() != ".desktop":
            return path.stem
        try:
            return _desktop_entry_name(path)
        except OSError as e:
            logger.debug(f"Unreadable desktop entry {path}: {e}")
            return None

    async def candidates(self, config: LauncherConfig) -> Sequence[Candidate]:
        settings = config.settings.applications
        if not settings.enabled:
            return []
        key = (tuple(settings.directories), settings.max_items)
        async with self._lock:
            expired = self._clock() - self._scanned_at > settings.cache_seconds
            if self._cache is None or expired or key != self._cache_key:
                self._cache = await asyncio.to_thread(self.scan, settings)
                self._cache_key = key
                self._scanned_at = self._clock()
            return list(self._cache)


class FileSource:
    """Files in the configured directories, rescanned for every query."""

    name = "files"
    min_query_length = 2

    def __init__(self):
        self.max_results: Optional[int] = 8

    def scan(self, settings: FileSearchSettings) -> list[Candidate]:
        found: list[Candidate] = []
        for directory in settings.directories:
            if len(found) >= settings.max_files:
                break
            root = Path(directory).expanduser()
            try:
                for path in _walk(root, settings.recursive):
                    if len(found) >= settings.max_files:
                        break
                    if not path.is_file():
                        continue
                    found.append(
                        Candidate(
                            title=path.name,
                            subtitle=str(path.parent),
                            group_label=FILES_GROUP,
                            result_type=ResultType.FILE,
                            payload=Payload(action=ActionType.OPEN_FILE, target=str(path)),
                        )
                    )
            except ScanFailure as e:
                logger.debug(f"Skipping file directory {root}: {e}")
        return found

    async def candidates(self, config: LauncherConfig) -> Sequence[Candidate]:
        settings = config.settings.files
        if not settings.enabled:
            return []
        self.max_results = settings.max_results
        return await asyncio.to_thread(self.scan, settings)


class RecentFiles:
    """Most-recent-first list of files the user opened."""

    name = "recent"
    min_query_length = 1
    max_results: Optional[int] = 5
    MAX_ITEMS = 30

    def __init__(self, paths: Sequence[str] = ()):
        self._paths: list[str] = []
        for path in reversed(list(paths)):
            self.add(path)

    def add(self, path: str) -> None:
        path = str(path)
        if path in self._paths:
            self._paths.remove(path)
        self._paths.insert(0, path)
        del self._paths[self.MAX_ITEMS:]

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    async def candidates(self, config: LauncherConfig) -> Sequence[Candidate]:
        result = []
        for raw in self._paths:
            path = Path(raw)
            result.append(
                Candidate(
                    title=path.name or raw,
                    subtitle=str(path.parent),
                    group_label=RECENT_GROUP,
                    result_type=ResultType.FILE,
                    payload=Payload(action=ActionType.OPEN_FILE, target=raw),
                )
            )
        return result


def clipboard_preview(text: str, limit: int = 80) -> str:
    line = " ".join(text.split())
    if len(line) <= limit:
        return line
    return line[: limit - 3] + "..."


class ClipboardHistory:
    """In-memory clipboard history, most recent first, without duplicates."""

    name = "clipboard"
    min_query_length = 1
    max_results: Optional[int] = 20
    MAX_ITEMS = 50

    def __init__(self):
        self._entries: list[str] = []

    def add(self, text: str) -> None:
        if not text.strip():
            return
        if text in self._entries:
            self._entries.remove(text)
        self._entries.insert(0, text)
        del self._entries[self.MAX_ITEMS:]

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    async def candidates(self, config: LauncherConfig) -> Sequence[Candidate]:
        return [
            Candidate(
                title=clipboard_preview(text),
                subtitle=f"{len(text)} characters",
                group_label=CLIPBOARD_GROUP,
                result_type=ResultType.CLIPBOARD_ENTRY,
                payload=Payload(action=ActionType.COPY_TEXT, target=text),
            )
            for text in self._entries
        ]
