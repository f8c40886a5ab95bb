"""Exceptions raised while validating and ordering composition tables."""

from __future__ import annotations


class OrderingError(ValueError):
    """Base class for errors raised by the sample ordering pipeline."""


class EmptyInputError(OrderingError):
    """Raised when no observations are supplied."""


class ValidationError(OrderingError):
    """Raised when an observation table is malformed."""


class InconsistentSampleError(ValidationError):
    """Raised when a sample has no usable observations."""
