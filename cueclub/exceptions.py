"""
Exception hierarchy for the cueclub package.

The pricing and conflict engines report domain outcomes (conflicts, odd
prices) as return values. Exceptions are reserved for broken configuration
and for booking requests rejected at the input boundary.
"""

from typing import List, Optional


class CueClubError(Exception):
    """Base exception for all cueclub errors."""

    pass


class ConfigurationError(CueClubError):
    """
    Raised when the pricing configuration cannot be loaded.

    Covers missing files, malformed YAML and schema violations.
    """

    pass


class BookingValidationError(CueClubError):
    """
    Raised when a booking request fails normalization or form rules.

    Attributes:
        errors: Every violated rule, in the order they were checked
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors: List[str] = list(errors or [])

    def __str__(self) -> str:
        if not self.errors:
            return super().__str__()
        return f"{super().__str__()}: {'; '.join(self.errors)}"
