# src/httpprom/core/exposition.py
from __future__ import annotations

import math
from typing import BinaryIO, Iterable, List, Optional, Tuple, Union

from httpprom.core.counter import MetricFamilySnapshot, Registry, default_registry
from httpprom.core.errors import EncodingIOFailure

# Prometheus text exposition format 0.0.4
CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def format_value(value: Union[int, float]) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(float(value))


def _render_family(fam: MetricFamilySnapshot, lines: List[str]) -> None:
    lines.append(f"# HELP {fam.name} {escape_help(fam.help)}")
    lines.append(f"# TYPE {fam.name} {fam.type}")
    for sample in fam.samples:
        if fam.label_names:
            inner = ",".join(
                f'{k}="{escape_label_value(v)}"' for k, v in zip(fam.label_names, sample.label_values)
            )
            lines.append(f"{fam.name}{{{inner}}} {format_value(sample.value)}")
        else:
            lines.append(f"{fam.name} {format_value(sample.value)}")


def encode(snapshot: Iterable[MetricFamilySnapshot]) -> bytes:
    """
    Serialize a registry snapshot into the text exposition format.

    - families in name order; samples in the order the snapshot lists them
    - families without samples are skipped
    - empty snapshot -> b""
    """
    lines: List[str] = []
    for fam in sorted(snapshot, key=lambda f: f.name):
        if not fam.samples:
            continue
        _render_family(fam, lines)
    if not lines:
        return b""
    return ("\n".join(lines) + "\n").encode("utf-8")


def _resolve(registry: Optional[Registry]) -> Registry:
    return default_registry() if registry is None else registry


def render(registry: Optional[Registry] = None) -> Tuple[bytes, str]:
    """
    Scrape helper: encoded body of the full registry plus its content type.
    """
    return encode(_resolve(registry).snapshot()), CONTENT_TYPE


def write_to(sink: BinaryIO, registry: Optional[Registry] = None) -> int:
    body = encode(_resolve(registry).snapshot())
    try:
        sink.write(body)
    except OSError as exc:
        raise EncodingIOFailure(
            f"failed to write metrics exposition: {exc}",
            details={"bytes": len(body)},
        ) from exc
    return len(body)
