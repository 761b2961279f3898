from __future__ import annotations

from menu_editor.suggestions import parent_options, parent_suggestions


def _entries(make_entries):
    return make_entries(
        {"name": "Docs", "identifier": "docs"},
        {"name": "Guide", "identifier": "guide", "parent": "docs"},
        {"name": "Install", "identifier": "install", "parent": "guide"},
        {"name": "Downloads"},
        {"name": "About", "identifier": "about-docs"},
    )


def test_suggestions_match_name_or_identifier(make_entries):
    entries = _entries(make_entries)
    values = [s.value for s in parent_suggestions(entries, "DOC")]
    assert values == ["docs", "about-docs"]


def test_suggestions_exclude_self_and_descendants(make_entries):
    entries = _entries(make_entries)
    guide = entries[1]
    values = [s.value for s in parent_suggestions(entries, "i", editing_uid=guide.uid)]
    assert "guide" not in values
    assert "install" not in values


def test_suggestions_respect_limit_and_empty_query(make_entries):
    entries = _entries(make_entries)
    assert len(parent_suggestions(entries, "s", limit=2)) == 2
    assert parent_suggestions(entries, "") == []


def test_suggestion_payload(make_entries):
    entries = _entries(make_entries)
    (suggestion,) = parent_suggestions(entries, "guide")
    assert suggestion.to_dict() == {
        "value": "guide",
        "label": "Guide (guide)",
        "display_name": "Guide",
        "uid": entries[1].uid,
    }


def test_parent_options(make_entries):
    entries = _entries(make_entries)
    options = parent_options(entries, editing_uid=entries[0].uid)
    assert options == [("about-docs", "About (about-docs)")]
