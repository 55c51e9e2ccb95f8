from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .command import Command


class ResultType(str, Enum):
    CALCULATOR = "Calculator"
    UNIT_CONVERSION = "UnitConversion"
    CURRENCY_CONVERSION = "CurrencyConversion"
    COLOR_CONVERSION = "ColorConversion"
    TEXT_TOOL = "TextTool"
    WEB_SEARCH = "WebSearch"
    SHELL_COMMAND = "ShellCommand"
    CUSTOM_COMMAND = "CustomCommand"
    BUILTIN_COMMAND = "BuiltInCommand"
    APPLICATION = "Application"
    FILE = "File"
    CLIPBOARD_ENTRY = "ClipboardEntry"
    QR_CODE = "QRCode"


# Tie-break order for equal scores; earlier wins.
CATEGORY_PRIORITY: dict[ResultType, int] = {rt: i for i, rt in enumerate(ResultType)}


class ActionType(str, Enum):
    OPEN_URL = "OpenUrl"
    LAUNCH_PROGRAM = "LaunchProgram"
    RUN_SHELL = "RunShell"
    OPEN_DIRECTORY = "OpenDirectory"
    EVALUATE = "Evaluate"
    LAUNCH_APPLICATION = "LaunchApplication"
    OPEN_FILE = "OpenFile"
    COPY_TEXT = "CopyText"
    GENERATE_QR_CODE = "GenerateQRCode"


@dataclass(frozen=True)
class Payload:
    """Action descriptor handed to the execution sink."""

    action: ActionType
    target: str
    args: str = ""

    @property
    def dedup_key(self) -> tuple[str, str, str]:
        return (self.action.value, self.target, self.args)


@dataclass(frozen=True)
class SearchResult:
    title: str
    subtitle: str
    group_label: str
    result_type: ResultType
    payload: Payload
    score: float
    matched_indices: tuple[int, ...] = ()
    command: Optional["Command"] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"score out of range: {self.score}")
        indices = self.matched_indices
        if list(indices) != sorted(set(indices)):
            raise ValueError("matched_indices must be sorted and unique")
        if indices and (indices[0] < 0 or indices[-1] >= len(self.title)):
            raise ValueError("matched_indices must be offsets into title")


@dataclass(frozen=True)
class ResultGroup:
    label: str
    results: tuple[SearchResult, ...]


@dataclass(frozen=True)
class RankedResults:
    results: tuple[SearchResult, ...] = ()
    groups: tuple[ResultGroup, ...] = ()
    warnings: tuple[str, ...] = ()
    interpreter: Optional[str] = None

    @property
    def best(self) -> Optional[SearchResult]:
        return self.results[0] if self.results else None

    def __len__(self) -> int:
        return len(self.results)
