"""Hierarchy of domain exceptions for utilkit.

Expected-invalid input is never an exception: validation operations return
a :class:`~utilkit.core.contracts.ValidationResult` instead.
"""

from __future__ import annotations


class UtilkitError(Exception):
    """Base exception for all utilkit errors."""


class InvalidSpecError(UtilkitError):
    """Caller-supplied options are malformed or self-contradictory."""


class PlatformUnavailableError(UtilkitError):
    """A platform collaborator (e.g. image decoding) failed or timed out."""


class OperationNotFoundError(UtilkitError):
    """Referenced operation is not registered."""
