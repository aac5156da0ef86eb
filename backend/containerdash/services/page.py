from __future__ import annotations

import logging
import time
from typing import Sequence

from containerdash.config import Settings
from containerdash.schemas.container import (
    ContainerInfoRequest,
    ContainerSpec,
    ContainerStats,
    MachineInfo,
)
from containerdash.schemas.page import (
    CpuReading,
    FilesystemReading,
    MemoryReading,
    PageData,
    PageMetrics,
    SizeReading,
)
from containerdash.services.formatting import PageFormatters
from containerdash.services.hierarchy import (
    build_breadcrumbs,
    build_child_links,
    container_display_name,
)
from containerdash.services.manager import ContainerManager


logger = logging.getLogger(__name__)


class PageAssembler:
    """Builds the container page payload from a manager snapshot."""

    def __init__(
        self,
        manager: ContainerManager,
        settings: Settings,
        formatters: PageFormatters | None = None,
    ):
        self.manager = manager
        self.settings = settings
        self.formatters = formatters or PageFormatters()

    def render(self, container_name: str) -> PageData:
        start = time.perf_counter()

        request = ContainerInfoRequest(num_stats=self.settings.num_stats)
        info = self.manager.get_container_info(container_name, request)
        machine = self.manager.get_machine_info()

        spec = info.spec
        page_root = self.settings.containers_page
        data = PageData(
            display_name=container_display_name(info.reference),
            container_name=info.reference.name,
            parent_containers=build_breadcrumbs(info.reference.name, page_root),
            subcontainers=build_child_links(info.subcontainers, page_root),
            spec=spec,
            stats=info.stats,
            machine_info=machine,
            resources_available=(
                spec.has_cpu or spec.has_memory or spec.has_network or spec.has_filesystem
            ),
            cpu_available=spec.has_cpu,
            memory_available=spec.has_memory,
            network_available=spec.has_network,
            fs_available=spec.has_filesystem,
            metrics=self.build_metrics(spec, info.stats, machine),
        )

        logger.debug("Rendering %s took %.1fms", container_name, (time.perf_counter() - start) * 1000)
        return data

    def build_metrics(
        self,
        spec: ContainerSpec,
        stats: Sequence[ContainerStats],
        machine: MachineInfo,
    ) -> PageMetrics:
        fmt = self.formatters
        metrics = PageMetrics()

        if spec.has_cpu:
            metrics.cpu = CpuReading(
                cores=fmt.print_cores(spec.cpu.max_limit),
                shares=fmt.print_shares(spec.cpu.limit),
                core_mask=fmt.print_mask(spec.cpu.mask, machine.num_cores),
            )

        if spec.has_memory:
            metrics.memory = MemoryReading(
                limit=self._size(spec.memory.limit),
                usage_mb=fmt.get_memory_usage(stats),
                usage_percent=fmt.get_memory_usage_percent(spec, stats, machine),
                hot_percent=fmt.get_hot_memory_percent(spec, stats, machine),
                cold_percent=fmt.get_cold_memory_percent(spec, stats, machine),
            )

        if spec.has_filesystem:
            metrics.filesystems = [
                FilesystemReading(
                    device=fs.device,
                    limit=self._size(fs.limit),
                    usage=self._size(fs.usage),
                    usage_percent=fmt.get_fs_usage_percent(fs.limit, fs.usage),
                )
                for fs in fmt.get_fs_stats(stats)
            ]

        if spec.has_network:
            metrics.network = fmt.get_network_stats(stats)

        return metrics

    def _size(self, num_bytes: int) -> SizeReading:
        value, unit = self.formatters.scale_size(num_bytes)
        return SizeReading(value=value, unit=unit)
