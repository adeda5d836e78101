"""Contains exceptions raised when a synchronization precondition is not met."""

from atat.exceptions import AtatError


class AuthenticationRequiredError(AtatError):
    """Raised when no access token is stored."""

    def __init__(self) -> None:
        """Initializes the exception with a hint to log in."""
        super().__init__("Authentication required. Please run `login` first.")


class RepositoryNotConfiguredError(AtatError):
    """Raised when the project has no repository to synchronize with."""

    def __init__(self) -> None:
        """Initializes the exception with a hint to add a repository."""
        super().__init__("No repository configured. Please run `remote add <owner/repo>` first.")


class TodoFileNotFoundError(AtatError):
    """Raised when the checklist file does not exist."""

    def __init__(self, path: str) -> None:
        """Initializes the exception with the missing path."""
        super().__init__(f"{path} file not found")
        self.path = path
