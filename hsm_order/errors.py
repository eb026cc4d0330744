"""Arrangement errors. Raised before any scoring work starts."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """The arrangement request cannot proceed (dimensionality < 2, empty point set, bad mode)."""


class SelectorMismatchError(InvalidInputError):
    """The point-set selector names a cluster, sample or selection that does not exist."""
