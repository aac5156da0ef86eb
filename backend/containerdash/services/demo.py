from __future__ import annotations

from datetime import datetime, timedelta, timezone

from containerdash.schemas.container import (
    UNLIMITED,
    ContainerInfo,
    ContainerReference,
    ContainerSpec,
    ContainerStats,
    CpuSpec,
    FsStats,
    MachineInfo,
    MemorySpec,
    MemoryStats,
    NetworkStats,
)
from containerdash.services.manager import InMemoryManager


GB = 1 << 30
MB = 1 << 20

DEMO_MACHINE = MachineInfo(num_cores=8, memory_capacity=16 * GB)

# name -> (children, cpu mask, millicores, memory limit, base memory usage)
DEMO_TREE: dict[str, tuple[list[str], str, int, int, int]] = {
    "/": (["/docker", "/system.slice"], "0-7", 8000, UNLIMITED, 6 * GB),
    "/docker": (["/docker/web", "/docker/db"], "0-7", 6000, 8 * GB, 3 * GB),
    "/docker/web": ([], "0-1", 1500, 512 * MB, 300 * MB),
    "/docker/db": ([], "2-5", 4000, 4 * GB, 2 * GB),
    "/system.slice": ([], "0,7", 500, 2 * GB, 700 * MB),
}


def _samples(base_usage: int, count: int, now: datetime) -> list[ContainerStats]:
    samples: list[ContainerStats] = []
    for i in range(count):
        usage = base_usage + (i % 5) * MB
        samples.append(
            ContainerStats(
                timestamp=now - timedelta(seconds=count - i),
                memory=MemoryStats(usage=usage, working_set=usage * 3 // 4),
                network=NetworkStats(rx_bytes=i * 4096, tx_bytes=i * 2048),
                filesystem=[FsStats(device="/dev/sda1", limit=100 * GB, usage=42 * GB + i * MB)],
            )
        )
    return samples


def build_demo_manager(num_samples: int = 60) -> InMemoryManager:
    now = datetime.now(timezone.utc)
    containers: dict[str, ContainerInfo] = {}
    for name, (children, mask, millicores, limit, usage) in DEMO_TREE.items():
        containers[name] = ContainerInfo(
            reference=ContainerReference(name=name),
            subcontainers=[ContainerReference(name=child) for child in children],
            spec=ContainerSpec(
                has_cpu=True,
                cpu=CpuSpec(limit=1024, max_limit=millicores, mask=mask),
                has_memory=True,
                memory=MemorySpec(limit=limit),
                has_network=name != "/system.slice",
                has_filesystem=True,
            ),
            stats=_samples(usage, num_samples, now),
        )
    return InMemoryManager(DEMO_MACHINE, containers)
