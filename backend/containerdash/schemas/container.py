from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


# Largest signed 64-bit value; limits at or above it mean "no limit configured".
UNLIMITED = (1 << 63) - 1


class ContainerReference(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    aliases: list[str] = Field(default_factory=list)
    namespace: str | None = None


class CpuSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int = 0  # relative shares
    max_limit: int = 0  # millicores
    mask: str = ""


class MemorySpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int = UNLIMITED
    reservation: int = 0
    swap_limit: int = 0


class ContainerSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_cpu: bool = False
    cpu: CpuSpec = Field(default_factory=CpuSpec)
    has_memory: bool = False
    memory: MemorySpec = Field(default_factory=MemorySpec)
    has_network: bool = False
    has_filesystem: bool = False


class CpuUsage(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total: int = 0
    per_cpu: list[int] = Field(default_factory=list, alias="per_cpu_usage")
    user: int = 0
    system: int = 0


class CpuStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    usage: CpuUsage = Field(default_factory=CpuUsage)


class MemoryStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    usage: int = 0
    working_set: int = 0  # hot pages; usage - working_set is reclaimable


class NetworkStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    rx_bytes: int = 0
    rx_packets: int = 0
    rx_errors: int = 0
    rx_dropped: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_errors: int = 0
    tx_dropped: int = 0


class FsStats(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    device: str = ""
    limit: int = Field(default=0, alias="capacity")
    usage: int = 0


class ContainerStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    cpu: CpuStats = Field(default_factory=CpuStats)
    memory: MemoryStats = Field(default_factory=MemoryStats)
    network: NetworkStats = Field(default_factory=NetworkStats)
    filesystem: list[FsStats] = Field(default_factory=list)


class ContainerInfoRequest(BaseModel):
    num_stats: int = 60


class ContainerInfo(BaseModel):
    reference: ContainerReference
    subcontainers: list[ContainerReference] = Field(default_factory=list)
    spec: ContainerSpec = Field(default_factory=ContainerSpec)
    stats: list[ContainerStats] = Field(default_factory=list)  # oldest first


class MachineInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    num_cores: int = 0
    memory_capacity: int = 0
