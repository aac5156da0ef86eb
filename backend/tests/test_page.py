"""Tests for container page assembly."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from containerdash.config import Settings
from containerdash.errors import ContainerNotFoundError, UpstreamError
from containerdash.schemas.container import (
    ContainerInfo,
    ContainerInfoRequest,
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
from containerdash.schemas.page import Link, SizeReading
from containerdash.services.demo import build_demo_manager
from containerdash.services.manager import InMemoryManager
from containerdash.services.page import PageAssembler


GB = 1 << 30
MB = 1 << 20
START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_sample(offset, usage, working_set, rx_bytes=0):
    return ContainerStats(
        timestamp=START + timedelta(seconds=offset),
        memory=MemoryStats(usage=usage, working_set=working_set),
        network=NetworkStats(rx_bytes=rx_bytes),
        filesystem=[FsStats(device="/dev/sda1", limit=200, usage=50)],
    )


@pytest.fixture
def manager():
    web_spec = ContainerSpec(
        has_cpu=True,
        cpu=CpuSpec(limit=1024, max_limit=1500, mask="0-1"),
        has_memory=True,
        memory=MemorySpec(limit=2 * GB),
        has_network=True,
        has_filesystem=True,
    )
    containers = {
        "/": ContainerInfo(
            reference=ContainerReference(name="/"),
            subcontainers=[ContainerReference(name="/docker")],
        ),
        "/docker": ContainerInfo(
            reference=ContainerReference(name="/docker"),
            subcontainers=[ContainerReference(name="/docker/web")],
        ),
        "/docker/web": ContainerInfo(
            reference=ContainerReference(name="/docker/web"),
            spec=web_spec,
            stats=[
                make_sample(0, 900 * MB, 100 * MB, rx_bytes=1),
                make_sample(1, 768 * MB, 512 * MB, rx_bytes=2),
                make_sample(2, 512 * MB, 256 * MB, rx_bytes=3),
            ],
        ),
    }
    return InMemoryManager(MachineInfo(num_cores=4, memory_capacity=1 * GB), containers)


@pytest.fixture
def settings():
    return Settings(num_stats=2, containers_page="/containers/")


class TestInMemoryManager:
    """Test the in-memory container source."""

    def test_trims_to_newest_samples(self, manager):
        """Only the newest num_stats samples are returned."""
        info = manager.get_container_info("/docker/web", ContainerInfoRequest(num_stats=2))
        assert [s.network.rx_bytes for s in info.stats] == [2, 3]

    def test_does_not_mutate_stored_snapshot(self, manager):
        """Trimming returns a copy of the stored info."""
        manager.get_container_info("/docker/web", ContainerInfoRequest(num_stats=1))
        assert len(manager.containers["/docker/web"].stats) == 3

    def test_unknown_container(self, manager):
        """Unknown names raise ContainerNotFoundError."""
        with pytest.raises(ContainerNotFoundError) as exc_info:
            manager.get_container_info("/nope", ContainerInfoRequest())
        assert exc_info.value.name == "/nope"

    def test_empty_name_is_root(self, manager):
        """An empty name resolves to the root container."""
        info = manager.get_container_info("", ContainerInfoRequest())
        assert info.reference.name == "/"


class TestPageAssembler:
    """Test PageAssembler.render()."""

    def test_hierarchy(self, manager, settings):
        """Breadcrumbs and child links are built from the container name."""
        data = PageAssembler(manager, settings).render("/docker")
        assert data.display_name == "docker"
        assert data.container_name == "/docker"
        assert data.parent_containers == [
            Link(text="root", link="/containers/"),
            Link(text="docker", link="/containers/docker"),
        ]
        assert data.subcontainers == [Link(text="web", link="/containers/docker/web")]

    def test_stats_window_uses_configured_size(self, manager, settings):
        """The stats window is limited by num_stats."""
        data = PageAssembler(manager, settings).render("/docker/web")
        assert len(data.stats) == 2
        assert data.stats[-1].memory.usage == 512 * MB

    def test_availability_flags(self, manager, settings):
        """Flags mirror the container spec."""
        data = PageAssembler(manager, settings).render("/docker/web")
        assert data.resources_available is True
        assert data.cpu_available is True
        assert data.memory_available is True
        assert data.network_available is True
        assert data.fs_available is True

    def test_cpu_metrics(self, manager, settings):
        """CPU metrics render cores, shares and the active-core mask."""
        cpu = PageAssembler(manager, settings).render("/docker/web").metrics.cpu
        assert cpu.cores == "1.500"
        assert cpu.shares == "1024"
        assert cpu.core_mask == [True, True, False, False]

    def test_memory_metrics_saturate_to_machine(self, manager, settings):
        """A 2GB limit on a 1GB machine is measured against 1GB."""
        memory = PageAssembler(manager, settings).render("/docker/web").metrics.memory
        assert memory.limit == SizeReading(value="2.00", unit="GB")
        assert memory.usage_mb == "512.00"
        assert memory.usage_percent == 50
        assert memory.hot_percent == 25
        assert memory.cold_percent == 25

    def test_filesystem_metrics(self, manager, settings):
        """Each mount in the latest sample gets sizes and a percentage."""
        filesystems = PageAssembler(manager, settings).render("/docker/web").metrics.filesystems
        assert len(filesystems) == 1
        assert filesystems[0].device == "/dev/sda1"
        assert filesystems[0].limit == SizeReading(value="200.00", unit="B")
        assert filesystems[0].usage == SizeReading(value="50.00", unit="B")
        assert filesystems[0].usage_percent == 25

    def test_network_metrics(self, manager, settings):
        """Network counters come from the latest sample."""
        network = PageAssembler(manager, settings).render("/docker/web").metrics.network
        assert network.rx_bytes == 3

    def test_no_resources(self, manager, settings):
        """A container with no resources has no derived metrics."""
        data = PageAssembler(manager, settings).render("/")
        assert data.resources_available is False
        assert data.metrics.cpu is None
        assert data.metrics.memory is None
        assert data.metrics.filesystems == []
        assert data.metrics.network is None

    def test_empty_stats_window(self, settings):
        """A container without samples renders zero readings."""
        info = ContainerInfo(
            reference=ContainerReference(name="/idle"),
            spec=ContainerSpec(has_memory=True, has_filesystem=True, has_network=True),
        )
        manager = InMemoryManager(MachineInfo(num_cores=1, memory_capacity=GB), {"/idle": info})
        metrics = PageAssembler(manager, settings).render("/idle").metrics
        assert metrics.memory.usage_mb == "0.0"
        assert metrics.memory.usage_percent == 0
        assert metrics.memory.hot_percent == 0
        assert metrics.memory.cold_percent == 0
        assert metrics.memory.limit == SizeReading(value="unlimited", unit="")
        assert metrics.filesystems == []
        assert metrics.network is None

    def test_render_is_repeatable(self, manager, settings):
        """Rendering the same snapshot twice gives the same payload."""
        assembler = PageAssembler(manager, settings)
        assert assembler.render("/docker/web") == assembler.render("/docker/web")

    def test_not_found_propagates(self, manager, settings):
        """Unknown containers propagate ContainerNotFoundError."""
        with pytest.raises(ContainerNotFoundError):
            PageAssembler(manager, settings).render("/missing")

    def test_upstream_failure_propagates(self, settings):
        """Machine info failures propagate without retry."""
        upstream = MagicMock()
        upstream.get_container_info.return_value = ContainerInfo(reference=ContainerReference(name="/"))
        upstream.get_machine_info.side_effect = UpstreamError("agent down")

        with pytest.raises(UpstreamError):
            PageAssembler(upstream, settings).render("/")
        upstream.get_machine_info.assert_called_once()

    def test_requests_configured_sample_count(self, settings):
        """The manager is asked for num_stats samples."""
        upstream = MagicMock()
        upstream.get_container_info.return_value = ContainerInfo(reference=ContainerReference(name="/"))
        upstream.get_machine_info.return_value = MachineInfo(num_cores=1, memory_capacity=GB)

        PageAssembler(upstream, settings).render("/")
        upstream.get_container_info.assert_called_once_with("/", ContainerInfoRequest(num_stats=2))


class TestDemoManager:
    """Test the built-in demo hierarchy."""

    def test_demo_hierarchy_renders(self, settings):
        """Every demo container renders and links to its children."""
        demo = build_demo_manager(num_samples=5)
        assembler = PageAssembler(demo, settings)
        root = assembler.render("/")
        assert [link.text for link in root.subcontainers] == ["docker", "system.slice"]
        for name in demo.containers:
            assert assembler.render(name).container_name == name

    def test_demo_sample_count(self):
        """Demo containers carry the requested number of samples."""
        demo = build_demo_manager(num_samples=5)
        info = demo.get_container_info("/docker/web", ContainerInfoRequest(num_stats=60))
        assert len(info.stats) == 5
