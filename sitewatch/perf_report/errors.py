"""Exceptions raised by the performance report pipeline."""


class ProviderError(RuntimeError):
    """The provider answered with a non-success HTTP status."""

    def __init__(self, status: int, message: str) -> None:
        """Store the HTTP status and response text."""
        super().__init__(f"Provider returned {status}: {message}")
        self.status = status
        self.message = message


class ExhaustedRetriesError(RuntimeError):
    """Every allowed attempt of an operation failed."""

    def __init__(self, description: str, attempts: int, last_error: Exception) -> None:
        """Store the attempt count and the error of the final attempt."""
        super().__init__(
            f"{description} failed after {attempts} attempt(s): "
            f"{type(last_error).__name__}: {last_error}"
        )
        self.description = description
        self.attempts = attempts
        self.last_error = last_error


class ResultStoreError(RuntimeError):
    """The persisted dataset exists but cannot be read."""
