"""Contains exceptions raised by the device authorization flow."""

from atat.exceptions import AtatError


class DeviceFlowError(AtatError):
    """Raised when the provider answers a poll with a terminal error."""

    pass


class DeviceFlowTimeoutError(AtatError):
    """Raised when the user does not authorize the device before the caller's deadline."""

    def __init__(self, elapsed: float, timeout: float) -> None:
        """Initializes the exception with the elapsed time and the configured timeout, in seconds."""
        super().__init__(f"Authentication timed out after {int(timeout)} seconds. Please try `login` again.")
        self.elapsed = elapsed
        self.timeout = timeout
