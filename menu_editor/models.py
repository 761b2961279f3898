from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping

from ruamel.yaml.comments import CommentedMap

# Key under which the synthetic key travels in JSON payloads. Never written to YAML.
UID_KEY = "_uid"

# YAML-visible fields, in the order they are written back out.
ENTRY_FIELDS = ("name", "identifier", "url", "pre", "parent", "weight")

# Fields that an edit may clear by sending an empty string.
OPTIONAL_FIELDS = ("identifier", "url", "pre", "parent", "weight")

# Fields compared when deciding whether duplicates are byte-identical.
COMPARED_FIELDS = ("name", "url", "pre", "parent", "weight")

_STRUCTURAL_KEYS = {UID_KEY, "children", *ENTRY_FIELDS}


def is_link_key(value: Any) -> bool:
    """Whether ``value`` can name an entry: a non-empty scalar, never a sequence or mapping."""
    return isinstance(value, (str, int, float)) and value != ""


def coerce_weight(value: Any) -> int | None:
    """Return ``value`` as an int, or None when it cannot be read as one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class MenuEntry:
    uid: str
    name: Any = None
    identifier: Any = None
    url: Any = None
    pre: Any = None  # icon markup
    parent: Any = None  # identifier of the parent entry
    weight: Any = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, uid: str, data: Mapping[str, Any]) -> "MenuEntry":
        extra = {k: v for k, v in data.items() if k not in _STRUCTURAL_KEYS}
        return cls(
            uid=uid,
            name=data.get("name"),
            identifier=data.get("identifier"),
            url=data.get("url"),
            pre=data.get("pre"),
            parent=data.get("parent"),
            weight=data.get("weight"),
            extra=extra,
        )

    @property
    def effective_weight(self) -> int:
        return coerce_weight(self.weight) or 0

    @property
    def has_identifier(self) -> bool:
        return is_link_key(self.identifier)

    @property
    def has_parent(self) -> bool:
        return self.parent not in (None, "")

    @property
    def parent_key(self) -> Any:
        """The ``parent`` value when it can name an entry, else None."""
        return self.parent if is_link_key(self.parent) else None

    @property
    def label(self) -> str:
        name = self.name if self.name not in (None, "") else "(unnamed)"
        ident = self.identifier if self.has_identifier else "no-id"
        return f"{name} ({ident})"

    def fields(self) -> dict[str, Any]:
        """YAML-visible fields that are set, followed by passthrough keys."""
        values = {key: getattr(self, key) for key in ENTRY_FIELDS if getattr(self, key) is not None}
        values.update(self.extra)
        return values

    def with_changes(self, **changes: Any) -> "MenuEntry":
        return replace(self, **changes)

    def to_yaml(self) -> CommentedMap:
        return CommentedMap(self.fields())

    def to_dict(self, *, include_uid: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {UID_KEY: self.uid} if include_uid else {}
        payload.update(self.fields())
        return payload


@dataclass
class HierarchyNode:
    """A derived tree position for one entry. Rebuilt on every query."""

    entry: MenuEntry
    children: list["HierarchyNode"] = field(default_factory=list)
    parent_uid: str | None = None
    depth: int = 0

    @property
    def uid(self) -> str:
        return self.entry.uid

    def _payload(self) -> dict[str, Any]:
        payload = self.entry.to_dict()
        payload["depth"] = self.depth
        payload["children"] = []
        return payload

    def to_dict(self) -> dict[str, Any]:
        root = self._payload()
        stack = [(self, root)]
        while stack:
            node, payload = stack.pop()
            for child in node.children:
                child_payload = child._payload()
                payload["children"].append(child_payload)
                stack.append((child, child_payload))
        return root


@dataclass(frozen=True)
class DuplicateFinding:
    identifier: Any
    entries: tuple[MenuEntry, ...]
    are_byte_identical: bool

    @property
    def count(self) -> int:
        return len(self.entries)

    @property
    def uids(self) -> tuple[str, ...]:
        return tuple(entry.uid for entry in self.entries)

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "count": self.count,
            "are_byte_identical": self.are_byte_identical,
            "entries": [entry.to_dict() for entry in self.entries],
        }


@dataclass(frozen=True)
class Document:
    """The flat entry list plus every top-level field this editor does not touch."""

    entries: tuple[MenuEntry, ...]
    data: Mapping[str, Any] = field(default_factory=dict)

    def with_entries(self, entries: Iterable[MenuEntry]) -> "Document":
        return replace(self, entries=tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)
