from __future__ import annotations


class LLMError(RuntimeError):
    pass


class TransportError(LLMError):
    """Network/connection failure before (or while streaming) a response."""


class BackendError(LLMError):
    """The backend answered with a non-success status."""

    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class MissingContentError(LLMError):
    """The response parsed, but the expected content field was absent or empty."""


class LLMValidationError(LLMError):
    """Raised when the model output cannot be validated against the requested schema."""


class JsonExtractionError(LLMValidationError):
    """No JSON value could be recovered from the model output."""


class UnsupportedProviderError(LLMError):
    pass


class MissingApiKeyError(LLMError):
    pass
