"""Integrity findings over the flat entry list. Pure queries, no state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from .hierarchy import chain_contains, parent_links
from .models import COMPARED_FIELDS, DuplicateFinding, MenuEntry

DIFF_FIELDS = ("name", "identifier", "url", "pre", "parent", "weight")


def _identical(entries: Sequence[MenuEntry]) -> bool:
    first = entries[0]
    return all(
        getattr(first, name) == getattr(other, name)
        for other in entries[1:]
        for name in COMPARED_FIELDS
    )


def find_duplicate_identifiers(entries: Sequence[MenuEntry]) -> list[DuplicateFinding]:
    groups: dict[Any, list[MenuEntry]] = {}
    for entry in entries:
        if entry.has_identifier:
            groups.setdefault(entry.identifier, []).append(entry)
    return [
        DuplicateFinding(identifier=ident, entries=tuple(group), are_byte_identical=_identical(group))
        for ident, group in groups.items()
        if len(group) > 1
    ]


def find_missing_identifiers(entries: Sequence[MenuEntry]) -> list[MenuEntry]:
    return [entry for entry in entries if not entry.has_identifier]


def find_unresolved_parents(entries: Sequence[MenuEntry]) -> list[MenuEntry]:
    """Entries whose ``parent`` does not name any identifier in the list."""
    known = {entry.identifier for entry in entries if entry.has_identifier}
    unresolved: list[MenuEntry] = []
    for entry in entries:
        if not entry.has_parent:
            continue
        key = entry.parent_key
        if key is None or key not in known:
            unresolved.append(entry)
    return unresolved


def find_cyclic_entries(entries: Sequence[MenuEntry]) -> list[MenuEntry]:
    """Entries whose parent chain leads back to themselves (self-parents included)."""
    raw = parent_links(entries)
    cyclic: list[MenuEntry] = []
    for entry in entries:
        if entry.has_identifier and entry.parent_key == entry.identifier:
            cyclic.append(entry)
        elif chain_contains(raw, raw.get(entry.uid), entry.uid):
            cyclic.append(entry)
    return cyclic


def refresh_finding(finding: DuplicateFinding, entries: Sequence[MenuEntry]) -> DuplicateFinding | None:
    """Recompute ``finding`` against the current list.

    Returns None once at most one entry still carries the identifier, which
    closes the finding whether the others were deleted or renamed.
    """
    group = [entry for entry in entries if entry.has_identifier and entry.identifier == finding.identifier]
    if len(group) <= 1:
        return None
    return DuplicateFinding(
        identifier=finding.identifier,
        entries=tuple(group),
        are_byte_identical=_identical(group),
    )


@dataclass(frozen=True)
class FieldDiff:
    left: Any
    right: Any

    @property
    def changed(self) -> bool:
        return self.left != self.right


def diff_entries(left: MenuEntry, right: MenuEntry) -> dict[str, FieldDiff]:
    return {name: FieldDiff(getattr(left, name), getattr(right, name)) for name in DIFF_FIELDS}


@dataclass(frozen=True)
class IntegrityReport:
    duplicates: list[DuplicateFinding] = field(default_factory=list)
    missing: list[MenuEntry] = field(default_factory=list)
    unresolved_parents: list[MenuEntry] = field(default_factory=list)
    cyclic: list[MenuEntry] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.duplicates or self.missing or self.unresolved_parents or self.cyclic)

    def to_dict(self) -> dict[str, Any]:
        return {
            "clean": self.is_clean,
            "duplicates": [finding.to_dict() for finding in self.duplicates],
            "missing_identifiers": [entry.to_dict() for entry in self.missing],
            "unresolved_parents": [entry.to_dict() for entry in self.unresolved_parents],
            "cyclic": [entry.to_dict() for entry in self.cyclic],
        }


def analyze(entries: Sequence[MenuEntry]) -> IntegrityReport:
    return IntegrityReport(
        duplicates=find_duplicate_identifiers(entries),
        missing=find_missing_identifiers(entries),
        unresolved_parents=find_unresolved_parents(entries),
        cyclic=find_cyclic_entries(entries),
    )
