"""Resolve commands into execution payloads."""

from pathlib import Path
from urllib.parse import quote

from ..models.command import Command, CommandType
from ..models.search import ActionType, Payload


def substitute(template: str, command: Command, param: str) -> str:
    for token in command.placeholders():
        template = template.replace(token, param)
    return template


def resolve_payload(command: Command, param: str = "") -> Payload:
    """Build the payload for a command with its parameter substituted.

    URL parameters are percent-encoded; other types receive the raw text.
    """
    if command.type == CommandType.URL:
        target = substitute(command.path_template, command, quote(param, safe=""))
        return Payload(action=ActionType.OPEN_URL, target=target)
    if command.type == CommandType.PROGRAM:
        return Payload(
            action=ActionType.LAUNCH_PROGRAM,
            target=substitute(command.path_template, command, param),
            args=substitute(command.arguments, command, param),
        )
    if command.type == CommandType.SHELL:
        return Payload(action=ActionType.RUN_SHELL, target=substitute(command.path_template, command, param))
    if command.type == CommandType.DIRECTORY:
        directory = substitute(command.path_template, command, param)
        return Payload(action=ActionType.OPEN_DIRECTORY, target=str(Path(directory).expanduser()))
    if command.type == CommandType.CALCULATOR:
        return Payload(action=ActionType.EVALUATE, target=substitute(command.path_template, command, param))
    raise ValueError(f"Unsupported command type: {command.type}")
