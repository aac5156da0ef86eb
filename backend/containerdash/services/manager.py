from __future__ import annotations

import logging
from typing import Mapping, Protocol

from containerdash.errors import ContainerNotFoundError
from containerdash.schemas.container import ContainerInfo, ContainerInfoRequest, MachineInfo


logger = logging.getLogger(__name__)


class ContainerManager(Protocol):
    """Source of container snapshots consumed by the page assembler."""

    def get_container_info(self, name: str, request: ContainerInfoRequest) -> ContainerInfo:
        ...

    def get_machine_info(self) -> MachineInfo:
        ...


class InMemoryManager:
    """Serves a fixed set of container snapshots.

    Used for demo data and tests. Stats windows are trimmed to the newest
    ``num_stats`` samples, matching what the agent would return.
    """

    def __init__(self, machine: MachineInfo, containers: Mapping[str, ContainerInfo]):
        self.machine = machine
        self.containers = dict(containers)

    def get_container_info(self, name: str, request: ContainerInfoRequest) -> ContainerInfo:
        info = self.containers.get(name or "/")
        if info is None:
            raise ContainerNotFoundError(name)
        if request.num_stats <= 0:
            stats = []
        else:
            stats = info.stats[-request.num_stats:]
        return info.model_copy(update={"stats": stats})

    def get_machine_info(self) -> MachineInfo:
        return self.machine
