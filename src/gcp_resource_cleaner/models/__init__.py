"""Pydantic data models for the resource tree."""

from gcp_resource_cleaner.models.tree import Entry, EntryKind, Node, Tree

__all__ = [
    "Entry",
    "EntryKind",
    "Node",
    "Tree",
]
