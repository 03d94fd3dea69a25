"""
Exception hierarchy for the analysis engine.

Only configuration and precondition problems ever reach the caller.
Malformed source text degrades to best-effort metrics instead of raising.
"""


class CodescopeError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(CodescopeError, ValueError):
    """Invalid settings or preconditions, raised at engine or batch entry."""


class UnsupportedLanguageError(ConfigurationError):
    """A language id or file extension with no dialect rules."""

    def __init__(self, language_id: str):
        self.language_id = language_id
        super().__init__(f"Unsupported language: {language_id!r}")


class EstimatorError(CodescopeError):
    """An optional estimator failed, timed out, or returned an unusable value."""


class UnbalancedBlockError(CodescopeError):
    """A brace-delimited unit never closed.

    Raised inside function extraction and caught by the metrics extractor,
    which falls back to treating the whole file as a single unit.
    """

    def __init__(self, name: str, start_line: int):
        self.name = name
        self.start_line = start_line
        super().__init__(f"Unbalanced braces in '{name}' starting at line {start_line}")
