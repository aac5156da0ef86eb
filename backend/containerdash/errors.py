"""Exceptions raised while fetching container data for a page."""

from __future__ import annotations


class ContainerDashError(RuntimeError):
    """Base class for data-source failures."""
    pass


class ContainerNotFoundError(ContainerDashError):
    """The requested container does not exist in the data source."""

    def __init__(self, name: str):
        super().__init__(f"Container {name!r} not found")
        self.name = name


class UpstreamError(ContainerDashError):
    """Fetching container or machine info failed for any other reason."""
    pass
