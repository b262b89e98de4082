from __future__ import annotations


class GeneratorError(Exception):
    """Base class for everything the generation path can raise."""


class ValidationError(GeneratorError, ValueError):
    """An access request field is missing or out of range."""


class CredentialMissingError(GeneratorError):
    """No API key is configured; raised before any network call."""


class CredentialError(GeneratorError):
    """The remote service rejected the API key."""


class CommunicationError(GeneratorError):
    """Any other failure reaching the model or reading its response."""
