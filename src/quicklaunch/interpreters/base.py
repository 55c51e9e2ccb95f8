"""Interpreter interface for the grammar dispatcher."""

from abc import ABC, abstractmethod

from ..models.search import SearchResult

# Group label for interpreter results that should sit in the unlabeled bucket.
UNLABELED = ""


class Interpreter(ABC):
    """A grammar that can claim raw input and turn it into results.

    accepts() must be cheap and side-effect free; the dispatcher calls it on
    every keystroke. interpret() may raise any LauncherError subclass, which
    the dispatcher converts into an empty result.
    """

    name: str = "interpreter"

    @abstractmethod
    def accepts(self, text: str) -> bool:
        pass

    @abstractmethod
    async def interpret(self, text: str) -> list[SearchResult]:
        pass
