"""Error taxonomy shared by the workflows and the CLI.

Flat on purpose: a run is either aborted (`MissingCredentialError`, server
start failure) or an optional step is skipped and logged.
"""

from __future__ import annotations


class ExampleError(Exception):
    """Base class for every error surfaced to the console."""


class MissingCredentialError(ExampleError):
    """A mandatory API key is not configured."""

    def __init__(self, variable: str, hint: str | None = None) -> None:
        message = f"{variable} not found in .env file or environment variables."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)
        self.variable = variable


class AutomationError(ExampleError):
    """A call into the automation server failed."""


class AIResponseError(ExampleError):
    """The chat-completion API returned an empty or unusable answer."""
