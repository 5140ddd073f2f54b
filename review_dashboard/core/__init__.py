"""
Core Package - Review Dashboard
review_dashboard/core/__init__.py

Core infrastructure: dependencies, exceptions.
"""

from review_dashboard.core.exceptions import (
    EntityNotFoundException,
    GrantPlatformConfigurationException,
    GrantPlatformException,
    GrantPlatformRateLimitException,
    RepositoryException,
    ReviewDashboardException,
)

__all__ = [
    "EntityNotFoundException",
    "GrantPlatformConfigurationException",
    "GrantPlatformException",
    "GrantPlatformRateLimitException",
    "RepositoryException",
    "ReviewDashboardException",
]
