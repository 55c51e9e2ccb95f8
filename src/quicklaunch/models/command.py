"""Pydantic models for configured and built-in commands."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

# Placeholder spellings that are always substituted, whatever the command's own
# placeholder is.
GENERIC_PLACEHOLDERS = ("{param}", "{query}", "{%p}")


class CommandType(str, Enum):
    """How a command's payload is executed."""

    URL = "Url"
    PROGRAM = "Program"
    SHELL = "Shell"
    DIRECTORY = "Directory"
    CALCULATOR = "Calculator"


class Command(BaseModel):
    """A user-defined (or built-in) launcher shortcut.

    Commands come from the configuration snapshot and are never mutated by
    the search core.
    """

    id: str = Field(description="Stable command identifier")
    keyword: str = Field(min_length=1, description="Short trigger typed by the user")
    display_name: str = Field(default="", description="Human readable name")
    type: CommandType = Field(description="Execution type")
    path_template: str = Field(default="", description="URL, program, directory or shell template")
    arguments: str = Field(default="", description="Extra argument template (Program commands)")
    param_placeholder: str = Field(default="{param}")
    group_id: Optional[str] = Field(default=None)
    enabled: bool = Field(default=True)
    hotkey: Optional[str] = Field(default=None)
    description: str = Field(default="")
    is_builtin: bool = Field(default=False)

    model_config = {"frozen": True}

    def placeholders(self) -> tuple[str, ...]:
        tokens = [self.param_placeholder] if self.param_placeholder else []
        tokens.extend(p for p in GENERIC_PLACEHOLDERS if p not in tokens)
        return tuple(tokens)

    @property
    def accepts_param(self) -> bool:
        """True when the path or arguments contain a parameter placeholder."""
        return any(
            token in self.path_template or token in self.arguments
            for token in self.placeholders()
        )

    @property
    def title(self) -> str:
        return self.keyword

    @property
    def subtitle(self) -> str:
        return self.display_name or self.description or self.path_template


class CommandGroup(BaseModel):
    """Named group used to label commands in result lists."""

    id: str
    name: str
    sort_order: int = Field(default=0)

    model_config = {"frozen": True}
