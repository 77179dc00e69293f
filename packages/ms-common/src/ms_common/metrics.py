"""
Prometheus metrics helpers for ModSentinel.

Shared metric definitions for the auditor service: classification
counters, detection counters, dataset load counters, and the cache
size gauge.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge

participants_classified_total = Counter(
    "participants_classified_total",
    "Total participant classifications performed",
)
disallowed_detections_total = Counter(
    "disallowed_detections_total",
    "Participants reported as carrying disallowed entries (once per session)",
)
dataset_loads_total = Counter(
    "dataset_loads_total",
    "Reference dataset loads by source",
    ["source"],
)
cached_participants = Gauge(
    "cached_participants",
    "Participants currently held in the classification cache",
)
