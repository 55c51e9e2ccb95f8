"""Grammar dispatcher: routes raw input to at most one interpreter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..config import LauncherSettings
from ..errors import (
    ConfigurationMissing,
    EvaluationError,
    NetworkFailure,
    ParseFailure,
)
from ..models.search import SearchResult
from .base import Interpreter
from .color import ColorInterpreter
from .currency import CurrencyConverter
from .expression import CalculatorInterpreter
from .text_tools import TextToolInterpreter
from .units import ConversionInterpreter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Outcome of dispatching one input.

    interpreter is the name of the interpreter that owned the input, even
    when it produced no results.
    """

    interpreter: Optional[str] = None
    results: tuple[SearchResult, ...] = ()
    warnings: tuple[str, ...] = ()


class GrammarDispatcher:
    """Tries interpreters in priority order; the first that accepts owns the input.

    Deterministic: the same text always selects the same interpreter.
    """

    def __init__(self, interpreters: Sequence[Interpreter]):
        self.interpreters = list(interpreters)

    @classmethod
    def from_settings(
        cls,
        settings: LauncherSettings,
        currency: Optional[CurrencyConverter] = None,
    ) -> "GrammarDispatcher":
        if currency is None:
            currency = CurrencyConverter.from_settings(settings.currency)
        return cls([
            TextToolInterpreter(web_search_url=settings.web_search_url),
            ColorInterpreter(),
            ConversionInterpreter(currency=currency),
            CalculatorInterpreter(),
        ])

    def select(self, text: str) -> Optional[Interpreter]:
        if not text.strip():
            return None
        for interpreter in self.interpreters:
            if interpreter.accepts(text):
                return interpreter
        return None

    async def classify(self, text: str) -> Classification:
        interpreter = self.select(text)
        if interpreter is None:
            return Classification()

        try:
            results = await interpreter.interpret(text)
        except (ParseFailure, EvaluationError) as e:
            logger.debug(f"{interpreter.name} rejected {text!r}: {e}")
            return Classification(interpreter=interpreter.name)
        except (ConfigurationMissing, NetworkFailure) as e:
            logger.warning(f"{interpreter.name} unavailable: {e}")
            return Classification(interpreter=interpreter.name, warnings=(str(e),))

        return Classification(interpreter=interpreter.name, results=tuple(results))
