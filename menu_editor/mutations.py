"""Functional edits over the flat entry list.

Every operation returns a new list and leaves its input untouched, so a failed
operation never leaves a half-applied change behind. Entries are always located
by synthetic key, never by their human identifier.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Sequence

from .errors import InvalidOperationError, NotFoundError, ValidationError
from .identity import next_uid
from .integrity import refresh_finding
from .models import ENTRY_FIELDS, OPTIONAL_FIELDS, UID_KEY, DuplicateFinding, MenuEntry, coerce_weight

logger = logging.getLogger(__name__)

_IGNORED_KEYS = {UID_KEY, "uid", "children"}


def _clean(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _normalize(data: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split incoming form data into (entry fields, passthrough keys).

    Empty optional values become None, which means "absent".
    """
    fields: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in data.items():
        if key in _IGNORED_KEYS:
            continue
        value = _clean(value)
        if key == "weight" and value not in (None, ""):
            weight = coerce_weight(value)
            if weight is None:
                raise ValidationError(f"Weight must be an integer, got {value!r}.")
            value = weight
        if key in ENTRY_FIELDS:
            fields[key] = None if (key in OPTIONAL_FIELDS and value == "") else value
        else:
            extra[key] = None if value == "" else value
    return fields, extra


def _index_of(entries: Sequence[MenuEntry], uid: str) -> int:
    for idx, entry in enumerate(entries):
        if entry.uid == uid:
            return idx
    raise NotFoundError(uid)


def get_entry(entries: Sequence[MenuEntry], uid: str) -> MenuEntry:
    return entries[_index_of(entries, uid)]


def add_entry(entries: Sequence[MenuEntry], data: Mapping[str, Any]) -> tuple[list[MenuEntry], MenuEntry]:
    fields, extra = _normalize(data)
    missing = [key for key in ("name", "identifier") if fields.get(key) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}.")

    entry = MenuEntry(
        uid=next_uid(),
        extra={k: v for k, v in extra.items() if v is not None},
        **fields,
    )
    logger.debug("Added %s as %s", entry.label, entry.uid)
    return [*entries, entry], entry


def update_entry(entries: Sequence[MenuEntry], uid: str, patch: Mapping[str, Any]) -> list[MenuEntry]:
    idx = _index_of(entries, uid)
    fields, extra_patch = _normalize(patch)
    current = entries[idx]

    extra = dict(current.extra)
    for key, value in extra_patch.items():
        if value is None:
            extra.pop(key, None)
        else:
            extra[key] = value

    updated = current.with_changes(extra=extra, **fields)
    logger.debug("Updated %s: %s", uid, sorted(fields) + sorted(extra_patch))
    return [*entries[:idx], updated, *entries[idx + 1:]]


def delete_entry(entries: Sequence[MenuEntry], uid: str) -> list[MenuEntry]:
    """Remove one entry. Children are left in place and become roots."""
    idx = _index_of(entries, uid)
    logger.debug("Deleted %s", uid)
    return [*entries[:idx], *entries[idx + 1:]]


def _natural_key(uid: str) -> tuple[Any, ...]:
    return tuple(int(part) if part.isdigit() else part for part in re.split(r"(\d+)", uid))


def merge_identical_duplicates(entries: Sequence[MenuEntry], finding: DuplicateFinding) -> list[MenuEntry]:
    """Drop the later-keyed copy of a byte-identical pair.

    The pair is checked again against ``entries`` before anything is removed.
    """
    if not finding.are_byte_identical or finding.count != 2:
        raise InvalidOperationError(
            "Only byte-identical duplicates with exactly two entries can be merged."
        )
    first, second = finding.entries
    if _natural_key(first.uid) > _natural_key(second.uid):
        doomed, kept = first, second
    else:
        doomed, kept = second, first
    present = {entry.uid for entry in entries}
    if doomed.uid not in present:
        return list(entries)
    if kept.uid not in present:
        raise InvalidOperationError("The entry to keep is no longer in the list.")
    current = refresh_finding(finding, entries)
    if current is None or set(current.uids) != {first.uid, second.uid} or not current.are_byte_identical:
        raise InvalidOperationError(
            f"Duplicates of {finding.identifier!r} changed since they were found; review them again."
        )
    logger.info("Merged duplicate %r: kept one entry, removed %s", finding.identifier, doomed.uid)
    return delete_entry(entries, doomed.uid)


def reset_entries(baseline: Sequence[MenuEntry]) -> list[MenuEntry]:
    return list(baseline)
