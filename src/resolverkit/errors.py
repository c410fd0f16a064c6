"""
Error taxonomy for resolver construction and execution.
"""

from sqlalchemy.exc import SQLAlchemyError

# Failures raised by the underlying store propagate unmodified.
StoreError = SQLAlchemyError


class ResolverKitError(Exception):
    """Base class for errors raised by resolverkit itself."""

    pass


class ConfigurationError(ResolverKitError, TypeError):
    """Raised when a resolver factory receives structurally invalid input."""

    pass


class ValidationError(ResolverKitError, ValueError):
    """Raised when resolve() is called with missing or malformed arguments."""

    pass


class NotFoundError(ResolverKitError, LookupError):
    """Raised when a mutation cannot locate the document it targets."""

    pass


class HookError(ResolverKitError):
    """Convenience base for errors raised by ``before_record_mutate`` hooks."""

    pass
