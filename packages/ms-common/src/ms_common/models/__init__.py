"""
Shared Pydantic data models for ModSentinel.

This package contains the reference dataset, classification, detection
event, and participant roster models.
"""

from ms_common.models.classification import ClassificationResult, EntryStatus
from ms_common.models.dataset import DatasetSource, DatasetStatus, ParsedDataset
from ms_common.models.detection import DisallowedDetectedEvent
from ms_common.models.participant import ParticipantRecord

__all__ = [
    "ClassificationResult",
    "DatasetSource",
    "DatasetStatus",
    "DisallowedDetectedEvent",
    "EntryStatus",
    "ParsedDataset",
    "ParticipantRecord",
]
