from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import Iterable, Iterator

from containerdash.schemas.container import ContainerReference
from containerdash.schemas.page import Link


ROOT_DISPLAY_NAME = "root"


@dataclass(frozen=True)
class ContainerPath:
    """A container name split once into its non-empty path segments."""

    segments: tuple[str, ...] = ()

    @classmethod
    def parse(cls, raw: str | None) -> "ContainerPath":
        if not raw:
            return cls()
        return cls(tuple(part for part in raw.split("/") if part))

    @classmethod
    def parse_trail(cls, raw: str | None) -> "ContainerPath":
        """Segments after the first split part, which the synthetic root entry stands for."""
        if not raw:
            return cls()
        return cls(tuple(part for part in raw.split("/")[1:] if part))

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def name(self) -> str:
        return self.segments[-1] if self.segments else ROOT_DISPLAY_NAME

    def prefixes(self) -> Iterator[tuple[str, ...]]:
        """Yield the cumulative segment tuples, shortest first."""
        for depth in range(1, len(self.segments) + 1):
            yield self.segments[:depth]

    def link(self, page_root: str) -> str:
        return join_link(page_root, self.segments)


def join_link(page_root: str, segments: Iterable[str]) -> str:
    # Cleaned like a URL path: no trailing slash, "." and ".." resolved
    return posixpath.normpath(posixpath.join(page_root, *segments))


def build_breadcrumbs(full_path: str | None, page_root: str) -> list[Link]:
    """Breadcrumb trail from the synthetic root entry down to the container itself."""
    path = ContainerPath.parse_trail(full_path)
    crumbs = [Link(text=ROOT_DISPLAY_NAME, link=page_root)]
    for prefix in path.prefixes():
        crumbs.append(Link(text=prefix[-1], link=join_link(page_root, prefix)))
    return crumbs


def container_display_name(reference: ContainerReference) -> str:
    return ContainerPath.parse(reference.name).name


def build_child_links(children: Iterable[ContainerReference], page_root: str) -> list[Link]:
    links: list[Link] = []
    for child in children:
        links.append(
            Link(
                text=container_display_name(child),
                link=ContainerPath.parse(child.name).link(page_root),
            )
        )
    return links
