"""Custom exceptions for metadata provider errors."""


class APIError(Exception):
    """Base class for all metadata provider errors."""

    pass


class APIConfigurationError(APIError):
    """Provider configuration error (missing or invalid API key, etc.)."""

    pass


class ProviderUnavailableError(APIError):
    """A provider could not answer; the resolver moves to the next one."""

    pass


class APIConnectionError(ProviderUnavailableError):
    """Connection error to the provider (network, timeout, etc.)."""

    pass


class APIResponseError(ProviderUnavailableError):
    """Error in the provider response (bad status, invalid payload, etc.)."""

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code
