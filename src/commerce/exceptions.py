"""Errors raised by the storefront outside of domain validation.

Input and business-rule failures use ``protean.exceptions.ValidationError``,
like every aggregate in this package. The classes here cover what is left:
missing resources, untrusted webhook payloads and infrastructure failures.
"""


class StorefrontError(Exception):
    """Base class for storefront errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(StorefrontError):
    """A requested product or order does not exist (or is not visible)."""


class AuthenticationError(StorefrontError):
    """A webhook payload failed signature verification."""


class ProcessingError(StorefrontError):
    """The gateway or the datastore failed while handling a request.

    The message is safe to show to clients; the underlying cause is chained
    and logged where the error is raised.
    """


class AdminAccessError(StorefrontError):
    """Admin credentials are missing, wrong, or admin access is disabled."""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code
