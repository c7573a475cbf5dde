"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Transport adapters catch them and map each class to an HTTP status code
or a GraphQL error code through the shared table in api/errors.py.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist (or is not visible to the caller)."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class PermissionDeniedError(DomainError):
    """Caller is authenticated but lacks permission for the requested action."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InvalidCredentialsError(DomainError):
    """Login failed. The message never says whether the email exists."""


class UnauthenticatedError(DomainError):
    """Missing, invalid or expired token, or the token's subject is gone."""


class InternalError(DomainError):
    """A collaborator failed unexpectedly. Details stay server-side."""
