from __future__ import annotations

from pydantic import BaseModel, Field

from containerdash.schemas.container import (
    ContainerSpec,
    ContainerStats,
    MachineInfo,
    NetworkStats,
)


class Link(BaseModel):
    text: str
    link: str


class SizeReading(BaseModel):
    value: str
    unit: str


class CpuReading(BaseModel):
    cores: str = "0.000"
    shares: str = "0"
    core_mask: list[bool] = Field(default_factory=list)


class MemoryReading(BaseModel):
    limit: SizeReading
    usage_mb: str = "0.0"
    usage_percent: int = 0
    hot_percent: int = 0
    cold_percent: int = 0


class FilesystemReading(BaseModel):
    device: str
    limit: SizeReading
    usage: SizeReading
    usage_percent: int = 0


class PageMetrics(BaseModel):
    cpu: CpuReading | None = None
    memory: MemoryReading | None = None
    filesystems: list[FilesystemReading] = Field(default_factory=list)
    network: NetworkStats | None = None


class PageData(BaseModel):
    display_name: str
    container_name: str
    parent_containers: list[Link]
    subcontainers: list[Link]
    spec: ContainerSpec
    stats: list[ContainerStats]
    machine_info: MachineInfo
    resources_available: bool = False
    cpu_available: bool = False
    memory_available: bool = False
    network_available: bool = False
    fs_available: bool = False
    metrics: PageMetrics = Field(default_factory=PageMetrics)
