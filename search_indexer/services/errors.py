from __future__ import annotations


class SearchIndexerError(RuntimeError):
    pass


class ConfigurationError(SearchIndexerError):
    """A required setting is missing or empty."""


class InputValidationError(SearchIndexerError):
    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(f"{parameter}: {message}")
        self.parameter = parameter
        self.message = message


class OpenSearchError(SearchIndexerError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
