# src/httpprom/core/__init__.py
from __future__ import annotations

from httpprom.core.counter import (
    CounterPartition,
    CounterVec,
    LabelValues,
    MetricDescriptor,
    MetricFamilySnapshot,
    Registry,
    Sample,
    default_registry,
    register_counter,
)
from httpprom.core.errors import (
    DuplicateMetricName,
    EncodingIOFailure,
    InvalidMetricDescriptor,
    LabelCardinalityMismatch,
    MetricsError,
)
from httpprom.core.exposition import CONTENT_TYPE, encode, render, write_to
from httpprom.core.process import ProcessCollector

__all__ = [
    "CONTENT_TYPE",
    "CounterPartition",
    "CounterVec",
    "DuplicateMetricName",
    "EncodingIOFailure",
    "InvalidMetricDescriptor",
    "LabelCardinalityMismatch",
    "LabelValues",
    "MetricDescriptor",
    "MetricFamilySnapshot",
    "MetricsError",
    "ProcessCollector",
    "Registry",
    "Sample",
    "default_registry",
    "encode",
    "register_counter",
    "render",
    "write_to",
]
