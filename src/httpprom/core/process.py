# src/httpprom/core/process.py
from __future__ import annotations

import os
from typing import Callable, List, Optional, Sequence, Tuple, Union

from httpprom.core.counter import MetricFamilySnapshot, Sample

_PAGE_SIZE = os.sysconf("SC_PAGE_SIZE") if hasattr(os, "sysconf") else 4096
_CLK_TCK = os.sysconf("SC_CLK_TCK") if hasattr(os, "sysconf") else 100

# /proc/self/stat fields counted after "pid (comm)", i.e. field 3 (state) is index 0
_STAT_NUM_THREADS = 20 - 3
_STAT_STARTTIME = 22 - 3


def _read_stat_fields() -> Optional[List[str]]:
    try:
        with open("/proc/self/stat", "r", encoding="ascii", errors="replace") as f:
            raw = f.read()
    except OSError:
        return None
    # comm may contain spaces and parens; fields resume after the last ")"
    return raw[raw.rfind(")") + 1 :].split()


def _read_statm() -> Optional[Tuple[int, int]]:
    try:
        with open("/proc/self/statm", "r", encoding="ascii") as f:
            parts = f.read().split()
    except OSError:
        return None
    if len(parts) < 2:
        return None
    return int(parts[0]) * _PAGE_SIZE, int(parts[1]) * _PAGE_SIZE


def _read_boot_time() -> Optional[float]:
    try:
        with open("/proc/stat", "r", encoding="ascii") as f:
            for line in f:
                if line.startswith("btime "):
                    return float(line.split()[1])
    except OSError:
        return None
    return None


def _read_start_time() -> Optional[float]:
    fields = _read_stat_fields()
    boot = _read_boot_time()
    if fields is None or boot is None or len(fields) <= _STAT_STARTTIME:
        return None
    return boot + int(fields[_STAT_STARTTIME]) / _CLK_TCK


def _read_threads() -> Optional[int]:
    fields = _read_stat_fields()
    if fields is None or len(fields) <= _STAT_NUM_THREADS:
        return None
    return int(fields[_STAT_NUM_THREADS])


def _read_vms_bytes() -> Optional[int]:
    statm = _read_statm()
    return None if statm is None else statm[0]


def _read_rss_bytes() -> Optional[int]:
    statm = _read_statm()
    return None if statm is None else statm[1]


def _count_open_fds() -> Optional[int]:
    try:
        return len(os.listdir("/proc/self/fd"))
    except OSError:
        return None


def _max_fds() -> Optional[int]:
    try:
        import resource
    except ImportError:
        # not available on Windows
        return None
    soft, _hard = resource.getrlimit(resource.RLIMIT_NOFILE)
    return None if soft == resource.RLIM_INFINITY else int(soft)


def _cpu_seconds() -> float:
    t = os.times()
    return t.user + t.system


Reader = Callable[[], Optional[Union[int, float]]]

# suffix, type, help
_FAMILIES: Tuple[Tuple[str, str, str], ...] = (
    ("cpu_seconds_total", "counter", "Total user and system CPU time spent in seconds."),
    ("start_time_seconds", "gauge", "Start time of the process since unix epoch in seconds."),
    ("virtual_memory_bytes", "gauge", "Virtual memory size in bytes."),
    ("resident_memory_bytes", "gauge", "Resident memory size in bytes."),
    ("open_fds", "gauge", "Number of open file descriptors."),
    ("max_fds", "gauge", "Maximum number of open file descriptors."),
    ("threads", "gauge", "Number of OS threads in the process."),
)


class ProcessCollector:
    """
    Standard process_* metrics for the current process.

    Everything except CPU time is read from /proc or the fd rlimit; a
    family whose reader returns None is omitted from that scrape.
    """

    def __init__(
        self,
        namespace: str = "process",
        *,
        cpu_seconds: Callable[[], float] = _cpu_seconds,
        start_time: Reader = _read_start_time,
        vms_bytes: Reader = _read_vms_bytes,
        rss_bytes: Reader = _read_rss_bytes,
        open_fds: Reader = _count_open_fds,
        max_fds: Reader = _max_fds,
        threads: Reader = _read_threads,
    ) -> None:
        self.namespace = namespace
        self._readers: dict[str, Reader] = {
            "cpu_seconds_total": cpu_seconds,
            "start_time_seconds": start_time,
            "virtual_memory_bytes": vms_bytes,
            "resident_memory_bytes": rss_bytes,
            "open_fds": open_fds,
            "max_fds": max_fds,
            "threads": threads,
        }

    def _name(self, suffix: str) -> str:
        return f"{self.namespace}_{suffix}" if self.namespace else suffix

    def describe(self) -> Sequence[str]:
        return [self._name(suffix) for suffix, _, _ in _FAMILIES]

    def collect(self) -> List[MetricFamilySnapshot]:
        out: List[MetricFamilySnapshot] = []
        for suffix, kind, help_text in _FAMILIES:
            value = self._readers[suffix]()
            if value is None:
                continue
            if suffix in ("cpu_seconds_total", "start_time_seconds"):
                value = float(value)
            else:
                value = int(value)
            out.append(
                MetricFamilySnapshot(
                    name=self._name(suffix),
                    help=help_text,
                    type=kind,
                    samples=(Sample((), value),),
                )
            )
        return out
