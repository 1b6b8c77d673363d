"""Rich rendering of the discovered resource tree."""

from __future__ import annotations

from rich.markup import escape
from rich.tree import Tree as RichTree

from gcp_resource_cleaner.models.tree import Node, Tree


def _add_node(node: Node, branch: RichTree) -> None:
    for project in node.direct_projects:
        branch.add(f"[green]{escape(project.label)}[/] [dim]project[/]")
    for child in node.children:
        _add_node(child, branch.add(f"[bold cyan]{escape(child.current.label)}/[/]"))


def render_tree(tree: Tree) -> RichTree:
    """Build a Rich tree: folders as branches, projects as leaves."""
    if tree.root is None:
        return RichTree("[yellow](nothing discovered)[/]")
    root = RichTree(f"[bold cyan]{escape(tree.root.current.label)}/[/]")
    _add_node(tree.root, root)
    return root


def tree_summary(tree: Tree) -> str:
    if tree.root is None:
        return "0 folders, 0 projects"
    folders, projects = tree.root.count()
    return f"{folders} folder{'s' if folders != 1 else ''}, {projects} project{'s' if projects != 1 else ''}"
