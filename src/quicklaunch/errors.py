"""Error taxonomy for the launcher core.

Interpreter failures never leave the grammar dispatcher, and scan failures
never leave the directory loop that raised them. Only ConfigurationMissing
and NetworkFailure are surfaced to the user, as warnings.
"""


class LauncherError(Exception):
    """Base class for launcher errors."""


class ParseFailure(LauncherError):
    """Input has the shape of a grammar but cannot be parsed."""


class EvaluationError(LauncherError):
    """A parsed expression cannot be evaluated to a finite number."""


class DivisionByZero(EvaluationError):
    pass


class DomainError(EvaluationError):
    """Result is undefined, non-finite, or overflows."""


class ConfigurationMissing(LauncherError):
    """A required setting (such as the exchange-rate API key) is absent."""


class NetworkFailure(LauncherError):
    """Fetching remote data failed and no usable cached copy exists."""


class ScanFailure(LauncherError):
    """A candidate directory could not be enumerated."""
