"""YAML in, YAML out.

Loading checks the minimal ``{menu: {main: [...]}}`` shape and hands the entries
to the identity assigner. Dumping writes the flat list back under ``menu.main``
and leaves every other field alone. Synthetic keys never reach the YAML.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from copy import deepcopy
from io import StringIO
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError

from .errors import ParseError, ShapeError
from .identity import assign
from .models import UID_KEY, Document

logger = logging.getLogger(__name__)

yaml = YAML()
yaml.preserve_quotes = True
yaml.indent(mapping=2, sequence=4, offset=2)
# Avoid line wrapping that can split long urls or icon markup.
yaml.width = 4096

SHAPE_HINT = "Expected format: { menu: { main: [...] } }"


def check_shape(data: Any) -> list[Any]:
    """Return ``menu.main`` or raise ShapeError."""
    if not isinstance(data, Mapping):
        raise ShapeError(f"Document must contain a mapping at the top level. {SHAPE_HINT}")
    menu = data.get("menu")
    if not isinstance(menu, Mapping):
        raise ShapeError(f"Document has no `menu` mapping. {SHAPE_HINT}")
    main = menu.get("main")
    if not isinstance(main, list):
        raise ShapeError(f"`menu.main` must be a list. {SHAPE_HINT}")
    return main


def parse_yaml(text: str) -> Any:
    try:
        return yaml.load(text)
    except YAMLError as exc:
        raise ParseError(f"Could not parse YAML: {exc}") from exc


def document_from_data(data: Any) -> Document:
    main = check_shape(data)
    return Document(entries=tuple(assign(main)), data=data)


def load_document(text: str) -> Document:
    document = document_from_data(parse_yaml(text))
    logger.info("Loaded menu document with %d entries", len(document))
    return document


def strip_synthetic_keys(value: Any) -> Any:
    """Copy ``value`` without any synthetic key, at any depth."""
    if isinstance(value, CommentedMap):
        cleaned = CommentedMap((k, strip_synthetic_keys(v)) for k, v in value.items() if k != UID_KEY)
        value.copy_attributes(cleaned)  # comments and formatting
        return cleaned
    if isinstance(value, Mapping):
        return {k: strip_synthetic_keys(v) for k, v in value.items() if k != UID_KEY}
    if isinstance(value, CommentedSeq):
        cleaned_seq = CommentedSeq(strip_synthetic_keys(item) for item in value)
        value.copy_attributes(cleaned_seq)
        return cleaned_seq
    if isinstance(value, list):
        return [strip_synthetic_keys(item) for item in value]
    return value


def _merge_main(data: Mapping[str, Any], main: Any) -> Any:
    out = deepcopy(data)
    out["menu"]["main"] = main
    return out


def dump_data(data: Any) -> str:
    stream = StringIO()
    yaml.dump(strip_synthetic_keys(data), stream)
    return stream.getvalue()


def dump_document(document: Document) -> str:
    main = CommentedSeq(entry.to_yaml() for entry in document.entries)
    return dump_data(_merge_main(document.data, main))


def document_to_data(document: Document, *, include_uids: bool = True) -> dict[str, Any]:
    """JSON-ready mapping of the document."""
    data = dict(document.data)
    menu = dict(data.get("menu") or {})
    menu["main"] = [entry.to_dict(include_uid=include_uids) for entry in document.entries]
    data["menu"] = menu
    return data


class MenuFile:
    """Read-only helper around a menu YAML file on disk, used for seeding."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.exists()

    def read_text(self) -> str:
        with self.path.open("r", encoding="utf-8") as handle:
            return handle.read()

    def load_data(self) -> Any:
        """Parsed and shape-checked mapping, without synthetic keys."""
        data = parse_yaml(self.read_text())
        check_shape(data)
        return data

    def load(self) -> Document:
        return load_document(self.read_text())
