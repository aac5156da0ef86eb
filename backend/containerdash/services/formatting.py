"""Turn raw container statistics into display-ready values.

Everything here is a pure function of its arguments. Only the newest sample of a
stats window is read; older samples are left for the chart renderer.
"""

from __future__ import annotations

import logging
from typing import Sequence

from containerdash.schemas.container import (
    UNLIMITED,
    ContainerSpec,
    ContainerStats,
    FsStats,
    MachineInfo,
    NetworkStats,
)


logger = logging.getLogger(__name__)

# (threshold, unit) in ascending order, each unit 1024x the previous
SIZE_UNITS: tuple[tuple[int, str], ...] = (
    (1, "B"),
    (1 << 10, "KB"),
    (1 << 20, "MB"),
    (1 << 30, "GB"),
    (1 << 40, "TB"),
    (1 << 50, "PB"),
    (1 << 60, "EB"),
    (1 << 70, "ZB"),
    (1 << 80, "YB"),
)

UNLIMITED_TEXT = "unlimited"


# Byte sizes ---------------------------------------------------------------

def scale_size(num_bytes: int) -> tuple[str, str]:
    """Return (value, unit) using the largest unit the value reaches.

    Values at or beyond the signed 64-bit maximum are the "no limit" sentinel
    and render as ("unlimited", "").
    """
    if num_bytes >= UNLIMITED:
        return UNLIMITED_TEXT, ""
    for threshold, unit in reversed(SIZE_UNITS):
        if num_bytes >= threshold:
            return f"{num_bytes / threshold:.2f}", unit
    return f"{num_bytes:.2f}", "B"


def print_size(num_bytes: int) -> str:
    return scale_size(num_bytes)[0]


def print_unit(num_bytes: int) -> str:
    return scale_size(num_bytes)[1]


def to_megabytes(num_bytes: int) -> float:
    return num_bytes / (1 << 20)


# CPU ----------------------------------------------------------------------

def _parse_core_token(token: str) -> range | None:
    bounds = token.split("-")
    try:
        if len(bounds) == 1:
            index = int(bounds[0])
            return range(index, index + 1)
        if len(bounds) == 2:
            return range(int(bounds[0]), int(bounds[1]) + 1)
    except ValueError:
        return None
    return None


def parse_core_spans(mask: str) -> list[range]:
    """Parse a mask like "0-2,5" into the ranges it names, without expanding them.

    Malformed entries are skipped.
    """
    spans: list[range] = []
    for token in mask.split(","):
        token = token.strip()
        if not token:
            continue
        span = _parse_core_token(token)
        if span is None:
            logger.debug("Ignoring malformed core mask entry %r", token)
            continue
        spans.append(span)
    return spans


def parse_core_mask(mask: str, num_cores: int | None = None) -> frozenset[int]:
    """Set of core indices named by a mask.

    With ``num_cores`` the result only holds indices in ``[0, num_cores)``.
    """
    cores: set[int] = set()
    for span in parse_core_spans(mask):
        if num_cores is not None:
            span = range(max(span.start, 0), min(span.stop, num_cores))
        cores.update(span)
    return frozenset(cores)


def core_activity_mask(mask: str, num_cores: int) -> list[bool]:
    spans = parse_core_spans(mask)
    return [any(index in span for span in spans) for index in range(num_cores)]


def format_cores(millicores: int) -> str:
    return f"{millicores / 1000:.3f}"


def format_shares(shares: int) -> str:
    return str(int(shares))


# Memory -------------------------------------------------------------------

def memory_percent(usage: int, limit: int, machine_capacity: int) -> int:
    """Percentage of the limit in use, with the limit capped at machine capacity.

    A zero effective limit yields 0. Negative usage is treated as 0.
    """
    effective_limit = min(limit, machine_capacity)
    if effective_limit <= 0:
        return 0
    return max(usage, 0) * 100 // effective_limit


def _latest(stats: Sequence[ContainerStats]) -> ContainerStats | None:
    return stats[-1] if stats else None


def memory_usage(stats: Sequence[ContainerStats]) -> str:
    """Latest memory usage in megabytes, two decimals."""
    latest = _latest(stats)
    if latest is None:
        return "0.0"
    return f"{to_megabytes(latest.memory.usage):.2f}"


def memory_usage_percent(
    spec: ContainerSpec, stats: Sequence[ContainerStats], machine: MachineInfo
) -> int:
    latest = _latest(stats)
    if latest is None:
        return 0
    return memory_percent(latest.memory.usage, spec.memory.limit, machine.memory_capacity)


def hot_memory_percent(
    spec: ContainerSpec, stats: Sequence[ContainerStats], machine: MachineInfo
) -> int:
    latest = _latest(stats)
    if latest is None:
        return 0
    return memory_percent(latest.memory.working_set, spec.memory.limit, machine.memory_capacity)


def cold_memory_percent(
    spec: ContainerSpec, stats: Sequence[ContainerStats], machine: MachineInfo
) -> int:
    latest = _latest(stats)
    if latest is None:
        return 0
    cold = latest.memory.usage - latest.memory.working_set
    return memory_percent(cold, spec.memory.limit, machine.memory_capacity)


# Filesystem and network -----------------------------------------------------

def latest_fs_stats(stats: Sequence[ContainerStats]) -> list[FsStats]:
    latest = _latest(stats)
    if latest is None:
        return []
    return list(latest.filesystem)


def fs_usage_percent(limit: int, used: int) -> int:
    """Percentage of a filesystem in use. A zero limit yields 0."""
    if limit <= 0:
        return 0
    return max(used, 0) * 100 // limit


def latest_network_stats(stats: Sequence[ContainerStats]) -> NetworkStats | None:
    latest = _latest(stats)
    return latest.network if latest else None


class PageFormatters:
    """Named formatter lookups the presentation layer binds to."""

    scale_size = staticmethod(scale_size)
    print_size = staticmethod(print_size)
    print_unit = staticmethod(print_unit)
    print_mask = staticmethod(core_activity_mask)
    print_cores = staticmethod(format_cores)
    print_shares = staticmethod(format_shares)
    get_memory_usage = staticmethod(memory_usage)
    get_memory_usage_percent = staticmethod(memory_usage_percent)
    get_hot_memory_percent = staticmethod(hot_memory_percent)
    get_cold_memory_percent = staticmethod(cold_memory_percent)
    get_fs_stats = staticmethod(latest_fs_stats)
    get_fs_usage_percent = staticmethod(fs_usage_percent)
    get_network_stats = staticmethod(latest_network_stats)
