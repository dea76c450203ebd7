"""
WordBank Backend — Answers Document Merge Engine
==================================================

What:  Pure functions for parsing, merging and serializing the answers document.
Who:   Called by WordService between the document read and the document write.

Document shape:
    {
        "<category>": {
            "<key>": {"name": ..., "img": ..., "imgUrl": ..., "desc": ...},
            ...
        },
        ...
    }

Merge semantics:
    apply_entry() replaces document[category][key] with exactly the given
    entry (no field-level merge) and leaves every other category and key as
    it was, in its original order. The input document is never mutated.
"""

import json
from typing import Any, Dict, Mapping, Optional

from wordbank.exceptions import MalformedDocumentError

Entry = Dict[str, Any]
Category = Dict[str, Entry]
Document = Dict[str, Category]


def parse_document(text: str) -> Document:
    """
    Parse stored document text.

    Empty or whitespace-only text is an empty document. Anything else must be
    a JSON object whose values are objects.

    Raises:
        MalformedDocumentError: invalid JSON or unexpected structure
    """
    if not text.strip():
        return {}

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(
            context={"line": e.lineno, "column": e.colno, "error": e.msg},
        )

    if not isinstance(data, dict):
        raise MalformedDocumentError(
            message="The JSON document must be an object of categories",
            context={"found": type(data).__name__},
        )
    for category, words in data.items():
        if not isinstance(words, dict):
            raise MalformedDocumentError(
                message=f"Category '{category}' must be an object of words",
                context={"category": category, "found": type(words).__name__},
            )
    return data


def get_entry(document: Mapping[str, Any], category: str, key: str) -> Optional[Entry]:
    """Return document[category][key], or None when either level is absent."""
    words = document.get(category)
    if not isinstance(words, dict):
        return None
    return words.get(key)


def apply_entry(
    document: Mapping[str, Category],
    category: str,
    key: str,
    entry: Mapping[str, Any],
) -> Document:
    """
    Return a new document with document[category][key] set to `entry`.

    The category is created when absent. Existing keys keep their position;
    a new key is appended at the end of its category.
    """
    updated: Document = dict(document)
    words: Category = dict(updated.get(category) or {})
    words[key] = dict(entry)
    updated[category] = words
    return updated


def serialize_document(document: Mapping[str, Any]) -> bytes:
    """Deterministic UTF-8 JSON with a 2-space indent and literal non-ASCII."""
    return json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")
