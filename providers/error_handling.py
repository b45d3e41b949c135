"""
Error handling and fallback mechanisms for the Nearby Deals API
Provides ordered endpoint fallback when external providers fail
"""

import os
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeVar

from logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class DealsError(Exception):
    """Base exception for Nearby Deals errors."""
    pass


class APIError(DealsError):
    """Exception for provider-related errors."""
    def __init__(self, message: str, api_name: str, status_code: Optional[int] = None,
                 upstream_status: Optional[str] = None):
        super().__init__(message)
        self.api_name = api_name
        self.status_code = status_code
        self.upstream_status = upstream_status


class ProvidersExhaustedError(APIError):
    """Raised when every endpoint of a provider has failed."""
    def __init__(self, api_name: str, failures: List[Tuple[Any, str]]):
        super().__init__(f"All {len(failures)} {api_name} endpoints failed", api_name)
        self.failures = failures


class ConfigurationError(DealsError):
    """Exception for missing or invalid server configuration."""
    pass


class InvalidRequestError(DealsError):
    """Exception for malformed client input."""
    pass


def check_api_credentials() -> Dict[str, bool]:
    """
    Check which provider credentials are available.

    Returns:
        Dict mapping provider names to availability status
    """
    return {
        "google_places": bool(os.getenv("GOOGLE_PLACES_KEY")),
        "overpass": True,  # Overpass doesn't require credentials
    }


def try_in_order(candidates: Iterable[T], attempt: Callable[[T], R], api_name: str) -> R:
    """
    Run `attempt` against each candidate in order, returning the first success.

    A candidate fails when `attempt` raises APIError; the failure is logged and
    the next candidate is tried. Other exceptions propagate unchanged.

    Args:
        candidates: Ordered endpoints (or any other attempt targets)
        attempt: Callable performing one attempt against a candidate
        api_name: Provider name used in logs and errors

    Returns:
        The result of the first successful attempt

    Raises:
        ProvidersExhaustedError: if every candidate failed (or none were given)
    """
    failures: List[Tuple[Any, str]] = []
    for candidate in candidates:
        try:
            return attempt(candidate)
        except APIError as e:
            failures.append((candidate, str(e)))
            logger.warning(
                f"{api_name} endpoint {candidate} failed ({e}), advancing to next endpoint",
                extra={"api_name": api_name, "mirror": str(candidate), "error_type": "endpoint_failure"},
            )
    raise ProvidersExhaustedError(api_name, failures)
