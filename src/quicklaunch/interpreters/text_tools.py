"""Prefix-tagged text tools: encoders, hashes, JSON formatting, web and shell."""

from __future__ import annotations

import base64
import binascii
import hashlib
import json
import re
from typing import Callable, Optional
from urllib.parse import quote, unquote

from ..errors import ParseFailure
from ..models.search import ActionType, Payload, ResultType, SearchResult
from .base import Interpreter

TEXT_GROUP = "Text"
WEB_GROUP = "Web"
SHELL_GROUP = "Shell"

PREVIEW_CHARS = 120
PERCENT_ESCAPE_RE = re.compile(r"%[0-9A-Fa-f]{2}")
SHELL_PREFIX_RE = re.compile(r"^>\s*(.+)$", re.DOTALL)


def _preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    line = " ".join(text.split())
    if len(line) <= limit:
        return line
    return line[: limit - 1] + "…"


def base64_encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def base64_decode(text: str) -> str:
    try:
        return base64.b64decode("".join(text.split()), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise ParseFailure(f"invalid base64 input: {e}") from e


def md5_hex(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def url_transform(text: str) -> tuple[str, str]:
    """Decode text that already contains %XX escapes, otherwise encode it."""
    if PERCENT_ESCAPE_RE.search(text):
        return unquote(text), "URL decoded"
    return quote(text, safe=""), "URL encoded"


def json_format(text: str) -> str:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseFailure(f"invalid JSON: {e.msg}") from e
    return json.dumps(parsed, indent=2, ensure_ascii=False)


# keyword -> (transform, label)
TEXT_TOOLS: dict[str, tuple[Callable[[str], str], str]] = {
    "base64": (base64_encode, "Base64 encoded"),
    "base64d": (base64_decode, "Base64 decoded"),
    "md5": (md5_hex, "MD5"),
    "sha256": (sha256_hex, "SHA-256"),
    "json": (json_format, "JSON"),
}


def split_prefix(text: str) -> Optional[tuple[str, str]]:
    """Return (keyword, argument) when text starts with a tool keyword."""
    stripped = text.lstrip()
    shell = SHELL_PREFIX_RE.match(stripped)
    if shell:
        command = shell.group(1).strip()
        return (">", command) if command else None
    parts = stripped.split(None, 1)
    if len(parts) != 2:
        return None
    keyword = parts[0].lower()
    if keyword in TEXT_TOOLS or keyword in ("url", "g"):
        argument = parts[1].strip()
        return (keyword, argument) if argument else None
    return None


class TextToolInterpreter(Interpreter):
    """Handles "base64", "base64d", "md5", "sha256", "url", "json", "g" and ">" prefixes."""

    name = "text_tools"

    def __init__(self, web_search_url: str = "https://www.google.com/search?q={query}"):
        self.web_search_url = web_search_url

    def accepts(self, text: str) -> bool:
        return split_prefix(text) is not None

    async def interpret(self, text: str) -> list[SearchResult]:
        split = split_prefix(text)
        if split is None:
            raise ParseFailure(f"no text tool prefix in {text!r}")
        keyword, argument = split

        if keyword == "g":
            url = self.web_search_url.replace("{query}", quote(argument, safe=""))
            return [
                SearchResult(
                    title=f"Search the web for \"{_preview(argument)}\"",
                    subtitle=url,
                    group_label=WEB_GROUP,
                    result_type=ResultType.WEB_SEARCH,
                    payload=Payload(action=ActionType.OPEN_URL, target=url),
                    score=1.0,
                )
            ]

        if keyword == ">":
            return [
                SearchResult(
                    title=_preview(argument),
                    subtitle="Run in shell",
                    group_label=SHELL_GROUP,
                    result_type=ResultType.SHELL_COMMAND,
                    payload=Payload(action=ActionType.RUN_SHELL, target=argument),
                    score=1.0,
                )
            ]

        if keyword == "url":
            output, label = url_transform(argument)
        else:
            transform, label = TEXT_TOOLS[keyword]
            output = transform(argument)

        if keyword == "json":
            lines = output.count("\n") + 1
            label = f"JSON formatted, {lines} lines"

        return [
            SearchResult(
                title=_preview(output),
                subtitle=label,
                group_label=TEXT_GROUP,
                result_type=ResultType.TEXT_TOOL,
                payload=Payload(action=ActionType.COPY_TEXT, target=output),
                score=1.0,
            )
        ]
