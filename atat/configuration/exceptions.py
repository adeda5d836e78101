"""Contains exceptions raised when loading or validating configuration."""

from atat.exceptions import AtatError


class ProjectConfigError(AtatError):
    """Raised when the project configuration file cannot be parsed or has an unexpected shape."""

    pass


class InvalidRepositoryError(AtatError):
    """Raised when a repository name is not in the 'owner/repo' format."""

    pass
