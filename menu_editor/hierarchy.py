"""Derive the menu forest from the flat entry list.

The forest is rebuilt from scratch every time it is needed and is never fed back
into the flat list. Malformed parent links degrade to extra roots instead of
raising: flagging the mess is the integrity analyzer's job.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Sequence

from .models import HierarchyNode, MenuEntry

logger = logging.getLogger(__name__)


def parent_links(entries: Sequence[MenuEntry]) -> dict[str, str | None]:
    """Map each key to the key its ``parent`` names, before any cycle checks."""
    by_identifier: dict[Any, MenuEntry] = {}
    for entry in entries:
        if entry.has_identifier:
            by_identifier[entry.identifier] = entry  # last write wins

    raw: dict[str, str | None] = {}
    for entry in entries:
        key = entry.parent_key
        target = by_identifier.get(key) if key is not None else None
        if target is None or target.uid == entry.uid:
            raw[entry.uid] = None
        else:
            raw[entry.uid] = target.uid
    return raw


def chain_contains(raw: dict[str, str | None], start: str | None, uid: str) -> bool:
    visited: set[str] = set()
    current = start
    while current is not None and current not in visited:
        if current == uid:
            return True
        visited.add(current)
        current = raw.get(current)
    return False


def resolve_parents(entries: Sequence[MenuEntry]) -> dict[str, str | None]:
    """Map each key to its parent's key, or None for entries that end up as roots."""
    raw = parent_links(entries)
    resolved: dict[str, str | None] = {}
    for uid, parent_uid in raw.items():
        if parent_uid is not None and chain_contains(raw, raw.get(parent_uid), uid):
            parent_uid = None
        resolved[uid] = parent_uid
    return resolved


def _sort_siblings(roots: list[HierarchyNode]) -> None:
    pending = [(roots, 0)]
    while pending:
        nodes, depth = pending.pop()
        nodes.sort(key=lambda node: node.entry.effective_weight)  # stable
        for node in nodes:
            node.depth = depth
            if node.children:
                pending.append((node.children, depth + 1))


def build(entries: Sequence[MenuEntry]) -> list[HierarchyNode]:
    """Build a weight-sorted forest. Every entry appears exactly once."""
    nodes: dict[str, HierarchyNode] = {}
    order: list[HierarchyNode] = []
    for entry in entries:
        if entry.uid in nodes:
            continue
        node = HierarchyNode(entry=entry)
        nodes[entry.uid] = node
        order.append(node)

    parents = resolve_parents([node.entry for node in order])
    roots: list[HierarchyNode] = []
    attached: set[str] = set()
    for node in order:
        if node.uid in attached:
            continue
        attached.add(node.uid)
        parent_uid = parents.get(node.uid)
        if parent_uid is None:
            roots.append(node)
            continue
        node.parent_uid = parent_uid
        nodes[parent_uid].children.append(node)

    _sort_siblings(roots)
    logger.debug("Built forest: %d entries, %d roots", len(order), len(roots))
    return roots


def walk(forest: Iterable[HierarchyNode]) -> Iterator[HierarchyNode]:
    """Depth-first, pre-order iteration over a forest."""
    stack = list(forest)
    stack.reverse()
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def count_nodes(forest: Iterable[HierarchyNode]) -> int:
    return sum(1 for _ in walk(forest))


def find_node(forest: Iterable[HierarchyNode], uid: str) -> HierarchyNode | None:
    for node in walk(forest):
        if node.uid == uid:
            return node
    return None


def ancestors(entries: Sequence[MenuEntry], uid: str) -> list[str]:
    """Keys of the resolved ancestors of ``uid``, nearest first."""
    parents = resolve_parents(entries)
    chain: list[str] = []
    current = parents.get(uid)
    while current is not None and current not in chain:
        chain.append(current)
        current = parents.get(current)
    return chain


def descendants(entries: Sequence[MenuEntry], uid: str) -> set[str]:
    """Keys of every entry below ``uid`` in the derived forest."""
    children: dict[str, list[str]] = {}
    for child_uid, parent_uid in resolve_parents(entries).items():
        if parent_uid is not None:
            children.setdefault(parent_uid, []).append(child_uid)

    found: set[str] = set()
    queue = list(children.get(uid, []))
    while queue:
        current = queue.pop(0)
        if current in found:
            continue
        found.add(current)
        queue.extend(children.get(current, []))
    return found
