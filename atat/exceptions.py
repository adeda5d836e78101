"""Base exception shared by every error atat raises."""


class AtatError(Exception):
    """Base class for all errors surfaced to the command line."""

    pass
