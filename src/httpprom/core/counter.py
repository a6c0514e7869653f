# src/httpprom/core/counter.py
from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

from httpprom.core.errors import (
    DuplicateMetricName,
    InvalidMetricDescriptor,
    LabelCardinalityMismatch,
)
from httpprom.utils.logger import get_logger

logger = get_logger("httpprom.core")

# One observed label combination, positional with the descriptor's label names.
LabelValues = Tuple[str, ...]

_METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


@dataclass(frozen=True)
class MetricDescriptor:
    """
    Identity of a counter family: name, help text and the fixed label schema.
    """

    name: str
    help: str
    label_names: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # frozen dataclass: normalize list input via object.__setattr__
        object.__setattr__(self, "label_names", tuple(self.label_names))
        _validate_descriptor(self)


def _validate_descriptor(desc: MetricDescriptor) -> None:
    if not isinstance(desc.name, str) or not _METRIC_NAME_RE.match(desc.name):
        raise InvalidMetricDescriptor(f"invalid metric name: {desc.name!r}", details={"name": desc.name})

    seen: set[str] = set()
    for label in desc.label_names:
        if not isinstance(label, str) or not _LABEL_NAME_RE.match(label):
            raise InvalidMetricDescriptor(
                f"invalid label name {label!r} for metric {desc.name!r}",
                details={"name": desc.name, "label": label},
            )
        if label.startswith("__"):
            raise InvalidMetricDescriptor(
                f"label name {label!r} is reserved (leading '__')",
                details={"name": desc.name, "label": label},
            )
        if label in seen:
            raise InvalidMetricDescriptor(
                f"duplicate label name {label!r} for metric {desc.name!r}",
                details={"name": desc.name, "label": label},
            )
        seen.add(label)


@dataclass(frozen=True)
class Sample:
    label_values: LabelValues
    value: Union[int, float]


@dataclass(frozen=True)
class MetricFamilySnapshot:
    """
    Read-only copy of one metric family, the unit the encoder works on.
    """

    name: str
    help: str
    type: str
    label_names: Tuple[str, ...] = ()
    samples: Tuple[Sample, ...] = ()


class Collector(Protocol):
    """
    Anything that produces metric families on demand (e.g. process stats).
    """

    def describe(self) -> Sequence[str]:
        ...

    def collect(self) -> Iterable[MetricFamilySnapshot]:
        ...


class CounterPartition:
    """
    LabelValues -> int mapping owned by one descriptor.

    A single mutex guards the whole partition: increments are one dict update,
    so the critical section stays O(1). Entries keep first-observation order.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._values: Dict[LabelValues, int] = {}

    def add(self, key: LabelValues, amount: int) -> None:
        with self._lock:
            self._values[key] = self._values.get(key, 0) + amount

    def get(self, key: LabelValues) -> int:
        with self._lock:
            return self._values.get(key, 0)

    def items(self) -> List[Tuple[LabelValues, int]]:
        with self._lock:
            return list(self._values.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)


class CounterVec:
    """
    Handle to a registered counter family.

    NOTE:
    - Label cardinality is unbounded. Keep label spaces small; never use raw
      URLs or user input as label values.
    """

    def __init__(self, descriptor: MetricDescriptor) -> None:
        self.descriptor = descriptor
        self._partition = CounterPartition()

    @property
    def name(self) -> str:
        return self.descriptor.name

    def _key(self, label_values: Sequence[str]) -> LabelValues:
        key = tuple(label_values)
        if len(key) != len(self.descriptor.label_names):
            raise LabelCardinalityMismatch(self.name, self.descriptor.label_names, [str(v) for v in key])
        for v in key:
            if not isinstance(v, str):
                raise TypeError(f"label values must be str, got {type(v).__name__} for metric {self.name!r}")
            try:
                v.encode("utf-8")
            except UnicodeEncodeError as exc:
                # would poison every later scrape of the registry
                raise ValueError(f"label value {v!r} for metric {self.name!r} is not UTF-8 encodable") from exc
        return key

    def observe(self, label_values: Sequence[str]) -> None:
        self._partition.add(self._key(label_values), 1)

    def inc(self, label_values: Sequence[str], amount: int = 1) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValueError(f"counter increment must be a non-negative int, got {amount!r}")
        self._partition.add(self._key(label_values), amount)

    def observe_labels(self, labels: Mapping[str, str]) -> None:
        names = self.descriptor.label_names
        if set(labels.keys()) != set(names):
            raise LabelCardinalityMismatch(self.name, names, list(labels.keys()))
        self.observe([labels[n] for n in names])

    def get(self, label_values: Sequence[str]) -> int:
        return self._partition.get(self._key(label_values))

    def snapshot(self) -> List[Tuple[LabelValues, int]]:
        return self._partition.items()

    def collect(self) -> MetricFamilySnapshot:
        return MetricFamilySnapshot(
            name=self.descriptor.name,
            help=self.descriptor.help,
            type="counter",
            label_names=self.descriptor.label_names,
            samples=tuple(Sample(k, v) for k, v in self.snapshot()),
        )

    def __repr__(self) -> str:
        return f"CounterVec(name={self.name!r}, labels={list(self.descriptor.label_names)!r})"


@dataclass
class _CollectorEntry:
    collector: Collector
    names: Tuple[str, ...] = field(default_factory=tuple)


class Registry:
    """
    Set of registered counter families and collectors.

    Process-local: in multi-worker deployments scrape each worker.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: Dict[str, CounterVec] = {}
        self._collectors: List[_CollectorEntry] = []

    def _taken(self) -> set[str]:
        names = set(self._counters.keys())
        for entry in self._collectors:
            names.update(entry.names)
        return names

    def register(self, descriptor: MetricDescriptor) -> CounterVec:
        with self._lock:
            if descriptor.name in self._taken():
                raise DuplicateMetricName(descriptor.name)
            vec = CounterVec(descriptor)
            self._counters[descriptor.name] = vec
        logger.debug("METRIC_REGISTERED name=%s labels=%s", descriptor.name, ",".join(descriptor.label_names))
        return vec

    def register_collector(self, collector: Collector) -> None:
        names = tuple(collector.describe())
        with self._lock:
            taken = self._taken()
            for n in names:
                if n in taken:
                    raise DuplicateMetricName(n)
            self._collectors.append(_CollectorEntry(collector=collector, names=names))
        logger.debug("COLLECTOR_REGISTERED names=%s", ",".join(names))

    def unregister(self, name: str) -> bool:
        with self._lock:
            if self._counters.pop(name, None) is not None:
                return True
            for i, entry in enumerate(self._collectors):
                if name in entry.names:
                    del self._collectors[i]
                    return True
        return False

    def get(self, name: str) -> Optional[CounterVec]:
        with self._lock:
            return self._counters.get(name)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._taken())

    def snapshot(self) -> List[MetricFamilySnapshot]:
        """
        Copy every family, sorted by name.

        The registry lock is only held to list members; each partition is then
        copied under its own lock, one at a time.
        """
        with self._lock:
            counters = list(self._counters.values())
            collectors = [e.collector for e in self._collectors]

        families: List[MetricFamilySnapshot] = [c.collect() for c in counters]
        for col in collectors:
            families.extend(col.collect())
        families.sort(key=lambda f: f.name)
        return families

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._taken()

    def __len__(self) -> int:
        with self._lock:
            return len(self._taken())

    def __iter__(self) -> Iterator[CounterVec]:
        with self._lock:
            return iter(list(self._counters.values()))


# Process-wide registry for convenience callers
_registry = Registry()


def default_registry() -> Registry:
    return _registry


def register_counter(
    name: str,
    help: str,
    label_names: Sequence[str] = (),
    *,
    registry: Optional[Registry] = None,
) -> CounterVec:
    desc = MetricDescriptor(name=name, help=help, label_names=tuple(label_names))
    if registry is None:
        registry = default_registry()
    return registry.register(desc)
