"""Typed errors raised by the pantry core and its adapters."""


class PantryError(Exception):
    """Base class for expected, recoverable pantry failures."""


class ValidationError(PantryError):
    """A single record or request failed validation."""


class NotFoundError(PantryError):
    """A record is absent or not owned by the requester."""


class ExternalServiceError(PantryError):
    """An external service was unavailable or returned an unusable payload."""


class RecipeParseError(ExternalServiceError):
    """The recipe generator output was not well-formed structured data."""
