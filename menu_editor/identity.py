"""Synthetic keys for menu entries.

Entries in the YAML only carry a human ``identifier`` that may be missing or
repeated, so every entry gets a process-unique key when it is ingested. The key
is what every other part of the editor uses to find an entry.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from itertools import count
from typing import Any, Iterable

from .models import UID_KEY, MenuEntry, is_link_key

logger = logging.getLogger(__name__)

_uid_counter = count(1)


def next_uid() -> str:
    return f"item-{next(_uid_counter)}"


def _fresh_uid(taken: set[str]) -> str:
    uid = next_uid()
    while uid in taken:
        uid = next_uid()
    return uid


def _existing_uid(raw: Any) -> str | None:
    if isinstance(raw, MenuEntry):
        return raw.uid
    if isinstance(raw, Mapping):
        value = raw.get(UID_KEY)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _flatten(raw_entries: Iterable[Any], parent_identifier: Any = None) -> list[tuple[Any, Any]]:
    """Pre-order walk over nested ``children`` lists.

    Returns (raw entry, identifier of the enclosing entry) pairs.
    """
    flat: list[tuple[Any, Any]] = []
    stack = [(raw, parent_identifier) for raw in reversed(list(raw_entries or []))]
    while stack:
        raw, enclosing = stack.pop()
        flat.append((raw, enclosing))
        if isinstance(raw, Mapping):
            children = raw.get("children")
            if isinstance(children, list) and children:
                identifier = raw.get("identifier")
                stack.extend((child, identifier) for child in reversed(children))
    return flat


def assign(raw_entries: Iterable[Any]) -> list[MenuEntry]:
    """Turn raw entries into keyed MenuEntry objects.

    Existing keys are kept. Nested ``children`` are flattened into the same list
    and linked to their enclosing entry through ``parent`` unless they already
    name one.
    """
    flat = _flatten(raw_entries)
    taken = {_existing_uid(raw) for raw, _ in flat} - {None}
    seen: set[str] = set()
    entries: list[MenuEntry] = []

    for raw, enclosing in flat:
        uid = _existing_uid(raw)
        if uid in seen:
            fresh = _fresh_uid(taken)
            logger.warning("Synthetic key %s appears more than once; re-keyed as %s", uid, fresh)
            uid = fresh
        elif uid is None:
            uid = _fresh_uid(taken)
        taken.add(uid)
        seen.add(uid)

        if isinstance(raw, MenuEntry):
            entry = raw if raw.uid == uid else raw.with_changes(uid=uid)
        elif isinstance(raw, Mapping):
            entry = MenuEntry.from_mapping(uid, raw)
        else:
            # Bare scalars are tolerated as nameless placeholders.
            entry = MenuEntry(uid=uid, name=raw)

        if not entry.has_parent and is_link_key(enclosing):
            entry = entry.with_changes(parent=enclosing)
        entries.append(entry)

    logger.debug("Assigned keys to %d entries", len(entries))
    return entries
