"""Decoding of the authenticated user endpoint."""

from typing import Any

from pydantic import BaseModel, ValidationError

from atat.github.exceptions import MalformedResponseError


class UserResponse(BaseModel):
    """Subset of the GitHub `/user` response used by `whoami`."""

    login: str
    id: int


def extract_login_from_user_response(payload: Any) -> str:
    """Return the `login` field of a `/user` response, given as decoded JSON or raw text."""
    try:
        if isinstance(payload, (str, bytes)):
            user = UserResponse.model_validate_json(payload)
        else:
            user = UserResponse.model_validate(payload)
    except ValidationError as exc:
        raise MalformedResponseError(f"Failed to parse user response: {exc}") from exc
    return user.login
