from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from containerdash.config import Settings
from containerdash.errors import ContainerNotFoundError, UpstreamError
from containerdash.schemas.container import (
    ContainerInfo,
    ContainerInfoRequest,
    ContainerReference,
    ContainerSpec,
    ContainerStats,
    MachineInfo,
)
from containerdash.services.cache import TimedCache


logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1.0"


class RemoteManager:
    """Reads container and machine info from the monitoring agent's REST API."""

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self.settings = settings
        self.transport = transport
        self.machine_cache = TimedCache[MachineInfo](ttl_seconds=settings.cache_ttl_seconds)

    def get_container_info(self, name: str, request: ContainerInfoRequest) -> ContainerInfo:
        if not name.startswith("/"):
            name = f"/{name}"
        data = self._request("POST", f"{API_PREFIX}/containers{name}", name, json=request.model_dump())
        try:
            return self._parse_container_info(name, data)
        except ValidationError as exc:
            raise UpstreamError(f"Malformed container info for {name!r}: {exc}") from exc

    def get_machine_info(self, force_refresh: bool = False) -> MachineInfo:
        def builder() -> MachineInfo:
            data = self._request("GET", f"{API_PREFIX}/machine")
            try:
                return MachineInfo.model_validate(data)
            except ValidationError as exc:
                raise UpstreamError(f"Malformed machine info: {exc}") from exc

        return self.machine_cache.get(builder, force_refresh=force_refresh)

    # Internal HTTP helpers -------------------------------------------

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.settings.cadvisor_url,
            timeout=self.settings.request_timeout,
            transport=self.transport,
        )

    def _request(self, method: str, url: str, container: str | None = None, **kwargs: Any) -> Any:
        try:
            with self._client() as client:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as exc:
            if container is not None and exc.response.status_code == 404:
                raise ContainerNotFoundError(container) from exc
            logger.error(f"Agent returned {exc.response.status_code} for {method} {url}")
            raise UpstreamError(f"Agent request {method} {url} failed: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error(f"Agent request {method} {url} failed: {exc}")
            raise UpstreamError(f"Agent request {method} {url} failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamError(f"Agent returned invalid JSON for {method} {url}") from exc

    @staticmethod
    def _parse_container_info(name: str, data: dict[str, Any]) -> ContainerInfo:
        reference = ContainerReference(
            name=data.get("name") or name,
            aliases=data.get("aliases") or [],
            namespace=data.get("namespace"),
        )
        return ContainerInfo(
            reference=reference,
            subcontainers=[
                ContainerReference.model_validate(sub) for sub in data.get("subcontainers") or []
            ],
            spec=ContainerSpec.model_validate(data.get("spec") or {}),
            stats=[ContainerStats.model_validate(sample) for sample in data.get("stats") or []],
        )
