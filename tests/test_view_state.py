"""Tests for expansion, search and scroll state."""

from __future__ import annotations

import pytest

from menu_editor.hierarchy import build, count_nodes
from menu_editor.view_state import (
    ViewState,
    collapse_all,
    expand_all,
    filter_forest,
    initial_view_state,
    prune,
    reveal,
    toggle,
    visible_count,
    with_search,
)


@pytest.fixture
def tree_entries(make_entries):
    return make_entries(
        {"name": "Docs", "identifier": "docs", "url": "/docs"},
        {"name": "Guide", "identifier": "guide", "parent": "docs"},
        {"name": "Install", "identifier": "install", "parent": "guide", "url": "/docs/install"},
        {"name": "Blog", "identifier": "blog"},
    )


def test_initial_state_expands_roots(tree_entries):
    docs, _, _, blog = tree_entries
    assert initial_view_state(tree_entries).expanded == {docs.uid, blog.uid}


def test_toggle(tree_entries):
    uid = tree_entries[1].uid
    state = toggle(ViewState(), uid)
    assert state.is_expanded(uid)
    assert not toggle(state, uid).is_expanded(uid)


def test_expand_and_collapse_all(tree_entries):
    expanded = expand_all(ViewState(), tree_entries)
    assert expanded.expanded == {e.uid for e in tree_entries}
    collapsed = collapse_all(expanded, tree_entries)
    assert collapsed.expanded == {tree_entries[0].uid, tree_entries[3].uid}


def test_reveal_expands_ancestors_and_targets(tree_entries):
    docs, guide, install, _ = tree_entries
    state = reveal(ViewState(), tree_entries, install.uid)
    assert state.expanded == {docs.uid, guide.uid}
    assert state.scroll_target == install.uid


def test_prune_drops_missing_keys(tree_entries):
    state = ViewState(expanded=frozenset({"gone", tree_entries[0].uid}), scroll_target="gone")
    pruned = prune(state, tree_entries)
    assert pruned.expanded == {tree_entries[0].uid}
    assert pruned.scroll_target is None


def test_filter_keeps_matching_branches(tree_entries):
    forest = build(tree_entries)
    filtered = filter_forest(forest, "INSTALL")
    assert [node.entry.name for node in filtered] == ["Docs"]
    assert [node.entry.name for node in filtered[0].children] == ["Guide"]
    assert [node.entry.name for node in filtered[0].children[0].children] == ["Install"]
    # The unfiltered forest is left alone.
    assert [node.entry.name for node in forest] == ["Docs", "Blog"]


def test_filter_matches_url_and_empty_term(tree_entries):
    forest = build(tree_entries)
    assert [node.entry.name for node in filter_forest(forest, "/docs")] == ["Docs"]
    assert filter_forest(forest, "") == forest
    assert filter_forest(forest, "nothing-matches") == []


def test_visible_count(tree_entries):
    forest = build(tree_entries)
    assert visible_count(forest, initial_view_state(tree_entries)) == 3
    assert visible_count(forest, expand_all(ViewState(), tree_entries)) == 4
    assert visible_count(forest, ViewState()) == 2


def test_with_search():
    assert with_search(ViewState(), "home").search == "home"
    assert with_search(ViewState(search="x"), None).search == ""


def test_deep_chain_filters_and_counts(deep_chain):
    depth = len(deep_chain)
    forest = build(deep_chain)
    filtered = filter_forest(forest, f"n{depth - 1}")
    assert count_nodes(filtered) == depth
    assert visible_count(forest, expand_all(ViewState(), deep_chain)) == depth
    assert visible_count(forest, initial_view_state(deep_chain)) == 2
