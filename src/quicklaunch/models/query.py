"""Query state owned by the orchestrator."""

from pydantic import BaseModel, Field, model_validator


class QueryState(BaseModel):
    """Current text and mode of the launcher input.

    In parameter mode the input is bound to a single command keyword and the
    rest of the text is that command's parameter.
    """

    raw_text: str = Field(default="")
    is_param_mode: bool = Field(default=False)
    command_keyword: str = Field(default="")
    command_param: str = Field(default="")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _keyword_required_in_param_mode(self) -> "QueryState":
        if self.is_param_mode and not self.command_keyword:
            raise ValueError("param mode requires a command keyword")
        return self

    @property
    def display_text(self) -> str:
        if self.is_param_mode:
            return f"{self.command_keyword} {self.command_param}"
        return self.raw_text

    @classmethod
    def normal(cls, raw_text: str = "") -> "QueryState":
        return cls(raw_text=raw_text)

    @classmethod
    def param_mode(cls, keyword: str, param: str = "") -> "QueryState":
        return cls(
            raw_text=f"{keyword} {param}",
            is_param_mode=True,
            command_keyword=keyword,
            command_param=param,
        )
