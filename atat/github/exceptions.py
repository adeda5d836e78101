"""Contains exceptions raised while talking to GitHub."""

from atat.exceptions import AtatError


class GitHubRequestError(AtatError):
    """Raised when a GitHub request fails at the transport level or returns a non-2xx status."""

    def __init__(self, operation: str, status_code: int | None, message: str | None = None) -> None:
        """Initializes the exception with the failed operation and the HTTP status, if any."""
        detail = f"HTTP {status_code}" if status_code is not None else "no response"
        text = f"Failed to {operation}: {detail}"
        if message:
            text = f"{text} ({message})"
        super().__init__(text)
        self.operation = operation
        self.status_code = status_code


class MalformedResponseError(AtatError):
    """Raised when GitHub returns JSON that does not have the expected shape."""

    pass
