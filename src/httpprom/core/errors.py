from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence


@dataclass
class MetricsError(Exception):
    """
    Typed metrics error carrying a stable machine-readable code.
    """

    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


class DuplicateMetricName(MetricsError):
    def __init__(self, name: str) -> None:
        super().__init__(
            code="duplicate_metric_name",
            message=f"metric {name!r} is already registered",
            details={"name": name},
        )


class InvalidMetricDescriptor(MetricsError):
    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(code="invalid_metric_descriptor", message=message, details=details)


class LabelCardinalityMismatch(MetricsError):
    def __init__(self, name: str, expected: Sequence[str], got: Sequence[str]) -> None:
        super().__init__(
            code="label_cardinality_mismatch",
            message=(
                f"metric {name!r} expects {len(expected)} label values "
                f"({', '.join(expected)}), got {len(got)}"
            ),
            details={"name": name, "expected": list(expected), "got": list(got)},
        )


class EncodingIOFailure(MetricsError):
    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(code="encoding_io_failure", message=message, details=details)
