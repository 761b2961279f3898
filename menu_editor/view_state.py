"""Expansion, search and scroll state for the tree view.

Kept separate from the entry list and keyed by synthetic key, so renaming or
duplicating identifiers never changes what is expanded.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from .hierarchy import ancestors, build, walk
from .models import HierarchyNode, MenuEntry


@dataclass(frozen=True)
class ViewState:
    expanded: frozenset[str] = frozenset()
    search: str = ""
    scroll_target: str | None = None

    def is_expanded(self, uid: str) -> bool:
        return uid in self.expanded


def initial_view_state(entries: Sequence[MenuEntry]) -> ViewState:
    return ViewState(expanded=frozenset(node.uid for node in build(entries)))


def toggle(state: ViewState, uid: str) -> ViewState:
    return replace(state, expanded=state.expanded ^ {uid})


def expand_all(state: ViewState, entries: Sequence[MenuEntry]) -> ViewState:
    return replace(state, expanded=frozenset(entry.uid for entry in entries))


def collapse_all(state: ViewState, entries: Sequence[MenuEntry]) -> ViewState:
    return replace(state, expanded=frozenset(node.uid for node in build(entries)))


def reveal(state: ViewState, entries: Sequence[MenuEntry], uid: str) -> ViewState:
    """Expand every ancestor of ``uid`` and make it the scroll target."""
    return replace(
        state,
        expanded=state.expanded | set(ancestors(entries, uid)),
        scroll_target=uid,
    )


def prune(state: ViewState, entries: Sequence[MenuEntry]) -> ViewState:
    """Forget keys that are no longer in the list."""
    present = {entry.uid for entry in entries}
    target = state.scroll_target if state.scroll_target in present else None
    return replace(state, expanded=state.expanded & present, scroll_target=target)


def with_search(state: ViewState, term: str) -> ViewState:
    return replace(state, search=term or "")


def _matches(node: HierarchyNode, term: str) -> bool:
    entry = node.entry
    for value in (entry.name, entry.identifier, entry.url):
        if value is not None and term in str(value).lower():
            return True
    return False


def filter_forest(forest: Iterable[HierarchyNode], term: str) -> list[HierarchyNode]:
    """Keep nodes that match ``term`` or have a matching descendant."""
    forest = list(forest)
    if not term:
        return forest
    needle = term.lower()

    # Reversed pre-order visits every child before its parent.
    copies: dict[str, HierarchyNode] = {}
    for node in reversed(list(walk(forest))):
        children = [copies[child.uid] for child in node.children if child.uid in copies]
        if children or _matches(node, needle):
            copies[node.uid] = replace(node, children=children)
    return [copies[node.uid] for node in forest if node.uid in copies]


def visible_count(forest: Iterable[HierarchyNode], state: ViewState) -> int:
    count = 0
    stack = list(forest)
    while stack:
        node = stack.pop()
        count += 1
        if node.children and state.is_expanded(node.uid):
            stack.extend(node.children)
    return count
