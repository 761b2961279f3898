"""Identity and hierarchy engine for YAML navigation-menu documents."""

from .codec import MenuFile, document_from_data, document_to_data, dump_document, load_document, strip_synthetic_keys
from .editor import MenuEditor
from .errors import (
    InvalidOperationError,
    MenuEditorError,
    NotFoundError,
    ParseError,
    ShapeError,
    ValidationError,
)
from .hierarchy import build
from .identity import assign
from .integrity import analyze, find_duplicate_identifiers, find_missing_identifiers
from .models import Document, DuplicateFinding, HierarchyNode, MenuEntry
from .mutations import add_entry, delete_entry, merge_identical_duplicates, reset_entries, update_entry

__all__ = [
    "Document",
    "DuplicateFinding",
    "HierarchyNode",
    "InvalidOperationError",
    "MenuEditor",
    "MenuEditorError",
    "MenuEntry",
    "MenuFile",
    "NotFoundError",
    "ParseError",
    "ShapeError",
    "ValidationError",
    "add_entry",
    "analyze",
    "assign",
    "build",
    "delete_entry",
    "document_from_data",
    "document_to_data",
    "dump_document",
    "find_duplicate_identifiers",
    "find_missing_identifiers",
    "load_document",
    "merge_identical_duplicates",
    "reset_entries",
    "strip_synthetic_keys",
    "update_entry",
]
