"""
Exception hierarchy for the Pudgy Pet service.
"""


class PudgyError(Exception):
    """Base class for errors raised by this package."""


class ValidationError(PudgyError):
    """A request is missing a required field; nothing was mutated."""


class StoreError(PudgyError):
    """The persistence backend failed to read or write a snapshot."""
