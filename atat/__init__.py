"""Synchronize a local TODO.md checklist with GitHub issues."""

__version__ = "0.1.0"
