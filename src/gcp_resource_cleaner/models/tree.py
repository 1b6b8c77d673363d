"""Entries, folder nodes, and the resource tree."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EntryKind(str, Enum):
    """Kind of cloud resource."""

    PROJECT = "project"
    FOLDER = "folder"


class Entry(BaseModel):
    """A single cloud resource.

    Identity is ``(kind, id)``; the display name is informational only.
    """

    model_config = ConfigDict(frozen=True)

    kind: EntryKind
    id: str
    name: str = ""

    @classmethod
    def folder(cls, id: str, name: str = "") -> Entry:
        return cls(kind=EntryKind.FOLDER, id=id, name=name)

    @classmethod
    def project(cls, id: str, name: str = "") -> Entry:
        return cls(kind=EntryKind.PROJECT, id=id, name=name)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entry):
            return NotImplemented
        return self.kind == other.kind and self.id == other.id

    def __hash__(self) -> int:
        return hash((self.kind, self.id))

    @property
    def label(self) -> str:
        if self.name and self.name != self.id:
            return f"{self.id} ({self.name})"
        return self.id


class Node(BaseModel):
    """One folder and its direct contents."""

    current: Entry
    direct_projects: list[Entry] = Field(default_factory=list)
    children: list[Node] = Field(default_factory=list)

    def add_child(self, node: Node) -> None:
        self.children.append(node)

    def iter_nodes(self) -> Iterator[Node]:
        """Yield this node and every descendant, parents first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    def count(self) -> tuple[int, int]:
        """Return ``(folders, projects)`` in this subtree, this folder included."""
        folders = projects = 0
        for node in self.iter_nodes():
            folders += 1
            projects += len(node.direct_projects)
        return folders, projects


class Tree(BaseModel):
    """The discovered resource tree. ``root`` is None when nothing was found."""

    root: Node | None = None

    @property
    def is_empty(self) -> bool:
        return self.root is None

    def post_order(self) -> list[Entry]:
        """Flatten the tree so every entry follows everything it contains.

        For each node: its children (in order), then its direct projects,
        then the node's own folder entry.
        """
        result: list[Entry] = []
        if self.root is not None:
            _post_order(self.root, result)
        return result


def _post_order(node: Node, out: list[Entry]) -> None:
    for child in node.children:
        _post_order(child, out)
    out.extend(node.direct_projects)
    out.append(node.current)
