"""Exceptions for the URL shortener service layer.

This module contains the exception hierarchy for the service layer,
providing domain-specific exceptions that abstract underlying implementation details.
A lookup miss is not an error and has no exception here.
"""


class ServiceError(Exception):
    """Base exception for all service-level errors."""
    pass


class URLError(ServiceError):
    """Base exception for URL-related errors."""
    pass


class URLValidationError(URLError):
    """Caller input failed validation checks."""
    pass


class InvalidURLError(URLValidationError):
    """The destination URL is missing or empty."""
    pass


class InvalidShortCodeError(URLValidationError):
    """The short code is missing or empty."""
    pass


class InvalidExpiryError(URLValidationError):
    """The number of days to add is not a positive integer."""
    pass


class URLPersistenceError(URLError):
    """The mapping store failed or could not complete the operation."""
    pass


class ShortCodeCollisionError(URLPersistenceError):
    """Every generated short code collided with an existing one."""
    pass


class ShortCodeGenerationError(URLError):
    """The short code generator could not produce a code."""
    pass


class CleanupError(ServiceError):
    """Base exception for cleanup-related errors."""
    pass


class ExpiredURLCleanupError(CleanupError):
    """Error occurred while cleaning up expired mappings."""
    pass
