"""Editing session over one loaded menu document.

Holds the working document, the baseline captured at load time, the tree view
state and the duplicate currently being resolved. All data changes go through
the functions in ``mutations``; this class only swaps in their results, so a
failed edit leaves the session exactly as it was.
"""

from __future__ import annotations

import logging
from itertools import count
from typing import Any, Mapping, Sequence

from . import view_state as views
from .codec import document_to_data, dump_document, load_document
from .errors import InvalidOperationError
from .hierarchy import build
from .integrity import IntegrityReport, analyze, refresh_finding
from .models import Document, DuplicateFinding, HierarchyNode, MenuEntry
from .mutations import add_entry, delete_entry, merge_identical_duplicates, reset_entries, update_entry
from .suggestions import ParentSuggestion, parent_suggestions

logger = logging.getLogger(__name__)


class MenuEditor:
    def __init__(self) -> None:
        self.document: Document | None = None
        self.baseline: tuple[MenuEntry, ...] = ()
        self.view = views.ViewState()
        self.resolving: DuplicateFinding | None = None
        self._load_tokens = count(1)
        self._latest_load = 0

    @property
    def loaded(self) -> bool:
        return self.document is not None

    @property
    def entries(self) -> tuple[MenuEntry, ...]:
        return self.document.entries if self.document else ()

    def _require_document(self) -> Document:
        if self.document is None:
            raise InvalidOperationError("No menu document is loaded.")
        return self.document

    # Loading

    def begin_load(self) -> int:
        """Start a load. Any load started earlier becomes stale."""
        self._latest_load = next(self._load_tokens)
        return self._latest_load

    def finish_load(self, token: int, text: str) -> bool:
        """Adopt the parsed ``text`` unless a newer load has started since ``token``."""
        if token != self._latest_load:
            logger.debug("Discarding stale load %d (latest is %d)", token, self._latest_load)
            return False
        self.adopt(load_document(text))
        return True

    def load_text(self, text: str) -> Document:
        self.finish_load(self.begin_load(), text)
        return self._require_document()

    def adopt(self, document: Document) -> None:
        self.document = document
        self.baseline = document.entries
        self.view = views.initial_view_state(document.entries)
        self.resolving = None

    def clear(self) -> None:
        self.document = None
        self.baseline = ()
        self.view = views.ViewState()
        self.resolving = None

    # Edits

    def _commit(self, entries: Sequence[MenuEntry]) -> None:
        self.document = self._require_document().with_entries(entries)
        if self.resolving is not None:
            self.resolving = refresh_finding(self.resolving, self.document.entries)

    def add(self, data: Mapping[str, Any]) -> MenuEntry:
        entries, entry = add_entry(self._require_document().entries, data)
        self._commit(entries)
        self.view = views.reveal(self.view, entries, entry.uid)
        return entry

    def update(self, uid: str, patch: Mapping[str, Any]) -> MenuEntry:
        entries = update_entry(self._require_document().entries, uid, patch)
        self._commit(entries)
        self.view = views.reveal(views.prune(self.view, entries), entries, uid)
        return next(entry for entry in entries if entry.uid == uid)

    def delete(self, uid: str) -> None:
        entries = delete_entry(self._require_document().entries, uid)
        self._commit(entries)
        self.view = views.prune(self.view, entries)

    def merge_duplicates(self, finding: DuplicateFinding) -> None:
        entries = merge_identical_duplicates(self._require_document().entries, finding)
        self._commit(entries)
        self.view = views.prune(self.view, entries)

    def reset(self) -> bool:
        """Throw away every edit since the document was loaded."""
        if self.document is None:
            return False
        self._commit(reset_entries(self.baseline))
        self.view = views.initial_view_state(self.baseline)
        self.resolving = None
        return True

    # Duplicate resolution

    def start_resolving(self, finding: DuplicateFinding) -> DuplicateFinding:
        current = refresh_finding(finding, self.entries)
        if current is None:
            raise InvalidOperationError(f"Identifier {finding.identifier!r} is no longer duplicated.")
        self.resolving = current
        return current

    def cancel_resolving(self) -> None:
        self.resolving = None

    # View

    def toggle(self, uid: str) -> None:
        self.view = views.toggle(self.view, uid)

    def expand_all(self) -> None:
        self.view = views.expand_all(self.view, self.entries)

    def collapse_all(self) -> None:
        self.view = views.collapse_all(self.view, self.entries)

    def set_search(self, term: str) -> None:
        self.view = views.with_search(self.view, term)

    # Derived

    def forest(self) -> list[HierarchyNode]:
        return build(self.entries)

    def filtered_forest(self) -> list[HierarchyNode]:
        return views.filter_forest(self.forest(), self.view.search)

    def report(self) -> IntegrityReport:
        return analyze(self.entries)

    def suggest_parents(self, query: str, editing_uid: str | None = None) -> list[ParentSuggestion]:
        return parent_suggestions(self.entries, query, editing_uid)

    def download(self) -> str:
        return dump_document(self._require_document())

    def to_data(self) -> dict[str, Any]:
        return document_to_data(self._require_document())
