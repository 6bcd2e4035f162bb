from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    invalid_credential = "invalid_credential"
    generation_failed = "generation_failed"
    response_parsing = "response_parsing"


class RecipeError(Exception):
    """A recipe request failed in a way the user should see."""

    kind: ErrorKind = ErrorKind.generation_failed
    default_message = "Could not generate the recipe. The service returned an unexpected error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


class InvalidCredentialError(RecipeError):
    kind = ErrorKind.invalid_credential
    default_message = (
        "Permission error: your API key is invalid or lacks the required "
        "permissions. Please check your configuration."
    )


class RecipeGenerationError(RecipeError):
    kind = ErrorKind.generation_failed


class ResponseParseError(RecipeError):
    kind = ErrorKind.response_parsing
    default_message = "Could not process the server response. The format is not valid."


__all__ = [
    "ErrorKind",
    "InvalidCredentialError",
    "RecipeError",
    "RecipeGenerationError",
    "ResponseParseError",
]
