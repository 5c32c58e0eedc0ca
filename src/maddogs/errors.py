"""Failures of a single dashboard action. None of them is fatal to the process."""

from __future__ import annotations


class DashboardError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchError(DashboardError):
    """Listing players failed; the previous snapshot stays on screen."""


class InsertError(DashboardError):
    """The data service rejected or failed an insert."""


class DeleteError(DashboardError):
    """The data service rejected or failed a delete."""


class ValidationError(DashboardError):
    """Form input rejected before any network call."""
