# =============================================================
# AICodeExplainer — Error Taxonomy
# Raised by the controller and the generation service.
# =============================================================


class UserInputError(ValueError):
    """Source code is empty or whitespace only. No network call is made."""


class GenerationError(Exception):
    """Base class for failures reported by the text-generation service."""


class CredentialError(GenerationError):
    """The service rejected the call because the API key is missing, invalid or inactive."""


class TransportOrServiceError(GenerationError):
    """Any other failure: network, quota, malformed response."""


class SessionNotFoundError(KeyError):
    """No session is registered under the given id."""
