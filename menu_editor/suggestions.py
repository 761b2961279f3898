from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from .hierarchy import descendants
from .models import MenuEntry


@dataclass(frozen=True)
class ParentSuggestion:
    value: Any  # identifier to write into `parent`
    label: str
    display_name: Any
    uid: str

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "label": self.label, "display_name": self.display_name, "uid": self.uid}


def _candidates(entries: Sequence[MenuEntry], editing_uid: str | None) -> list[MenuEntry]:
    # Only entries with an identifier can be a parent target, and offering the
    # edited entry or one of its descendants would create a cycle.
    excluded = (descendants(entries, editing_uid) | {editing_uid}) if editing_uid else set()
    return [entry for entry in entries if entry.has_identifier and entry.uid not in excluded]


def parent_suggestions(
    entries: Sequence[MenuEntry],
    query: str,
    editing_uid: str | None = None,
    limit: int = 10,
) -> list[ParentSuggestion]:
    if not query:
        return []
    needle = query.strip().lower()
    matches: list[ParentSuggestion] = []
    for entry in _candidates(entries, editing_uid):
        haystack = (str(entry.name or ""), str(entry.identifier))
        if any(needle in value.lower() for value in haystack):
            matches.append(ParentSuggestion(entry.identifier, entry.label, entry.name, entry.uid))
            if len(matches) >= limit:
                break
    return matches


def parent_options(entries: Sequence[MenuEntry], editing_uid: str | None = None) -> list[tuple[Any, str]]:
    return [(entry.identifier, entry.label) for entry in _candidates(entries, editing_uid)]
