"""
Custom Exceptions - Review Dashboard
review_dashboard/core/exceptions.py

Exception classes for the stores and the grant-platform integration.
The scoring engine never raises; these belong to the layers around it.
"""


class ReviewDashboardException(Exception):
    """Base exception for the review dashboard."""

    pass


class RepositoryException(ReviewDashboardException):
    """Base exception for store operations."""

    pass


class EntityNotFoundException(RepositoryException):
    """Entity not found in a store."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with ID {entity_id} not found")


class GrantPlatformException(ReviewDashboardException):
    """Request to the external grant-management platform failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GrantPlatformRateLimitException(GrantPlatformException):
    """Platform kept answering 429 after every retry."""

    def __init__(self, endpoint: str, attempts: int):
        self.endpoint = endpoint
        self.attempts = attempts
        super().__init__(
            f"Rate limited on {endpoint} after {attempts} attempts",
            status_code=429,
        )


class GrantPlatformConfigurationException(GrantPlatformException):
    """Platform client is missing required configuration."""

    def __init__(self, message: str = "GOODGRANTS_API_KEY is not set"):
        super().__init__(message)
