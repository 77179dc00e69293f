"""
Exception hierarchy for ModSentinel.
"""

from __future__ import annotations


class ModSentinelError(Exception):
    """Base class for all ModSentinel errors."""


class DatasetParseError(ModSentinelError):
    """The remote definitions document could not be turned into a dataset."""
