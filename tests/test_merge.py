"""
WordBank Backend — Merge Engine Unit Tests
============================================

What:  Tests for parse_document / apply_entry / get_entry / serialize_document.
How:   Pure functions; no fixtures needed.

What we test:
    ✅ Empty and whitespace-only documents bootstrap to {}
    ✅ Invalid JSON and wrong shapes raise MalformedDocumentError
    ✅ apply_entry creates categories, replaces entries whole, isolates keys
    ✅ Repeating the same create yields the same document
    ✅ Serialization is stable and keeps non-ASCII text literal
"""

import json

import pytest

from wordbank.exceptions import MalformedDocumentError
from wordbank.services.merge import (
    apply_entry,
    get_entry,
    parse_document,
    serialize_document,
)

CAT = {"name": "Cat", "img": "cat.png", "imgUrl": "./imgs/cat.png", "desc": "A feline"}
DOG = {"name": "Dog", "img": "dog.png", "imgUrl": "./imgs/dog.png", "desc": "A canine"}


class TestParseDocument:

    @pytest.mark.parametrize("text", ["", "   ", "\n\t  \n"])
    def test_empty_text_is_empty_document(self, text):
        assert parse_document(text) == {}

    def test_valid_document(self):
        doc = parse_document(json.dumps({"animals": {"cat": CAT}}))
        assert doc["animals"]["cat"] == CAT

    def test_invalid_json_rejected(self):
        with pytest.raises(MalformedDocumentError) as exc_info:
            parse_document('{"animals": {"cat": ')
        assert "line" in exc_info.value.context

    def test_top_level_array_rejected(self):
        with pytest.raises(MalformedDocumentError, match="object of categories"):
            parse_document("[1, 2, 3]")

    def test_category_must_be_object(self):
        with pytest.raises(MalformedDocumentError, match="Category 'animals'"):
            parse_document('{"animals": ["cat"]}')


class TestApplyEntry:

    def test_creates_missing_category(self):
        doc = apply_entry({}, "animals", "cat", CAT)
        assert doc == {"animals": {"cat": CAT}}

    def test_full_replacement_drops_old_fields(self):
        original = {"animals": {"cat": {**CAT, "legacy": "x"}}}
        new_entry = {"name": "Cat", "img": "", "imgUrl": "", "desc": "Updated"}

        doc = apply_entry(original, "animals", "cat", new_entry)

        assert doc["animals"]["cat"] == new_entry
        assert "legacy" not in doc["animals"]["cat"]

    def test_does_not_mutate_input(self):
        original = {"animals": {"cat": CAT}}
        snapshot = json.loads(json.dumps(original))

        apply_entry(original, "animals", "dog", DOG)
        apply_entry(original, "animals", "cat", DOG)

        assert original == snapshot

    def test_key_isolation(self):
        """Upserting one key leaves every other category and key untouched."""
        original = {
            "animals": {"cat": CAT, "dog": DOG},
            "plants": {"fern": {"name": "Fern", "img": "", "imgUrl": "", "desc": "Green"}},
        }

        doc = apply_entry(original, "animals", "cat", {**CAT, "desc": "Changed"})

        assert doc["animals"]["dog"] == DOG
        assert doc["plants"] == original["plants"]
        assert list(doc) == ["animals", "plants"]
        assert list(doc["animals"]) == ["cat", "dog"]

    def test_same_key_in_other_category_untouched(self):
        original = {"animals": {"cat": CAT}, "cartoons": {"cat": DOG}}
        doc = apply_entry(original, "animals", "cat", DOG)
        assert doc["cartoons"]["cat"] == DOG
        assert doc["animals"]["cat"] == DOG

    def test_create_is_idempotent(self):
        once = apply_entry({}, "animals", "cat", CAT)
        twice = apply_entry(once, "animals", "cat", CAT)
        assert serialize_document(once) == serialize_document(twice)


class TestGetEntry:

    def test_found(self):
        assert get_entry({"animals": {"cat": CAT}}, "animals", "cat") == CAT

    def test_missing_category(self):
        assert get_entry({"animals": {"cat": CAT}}, "plants", "cat") is None

    def test_missing_key(self):
        assert get_entry({"animals": {"cat": CAT}}, "animals", "dog") is None


class TestSerializeDocument:

    def test_two_space_indent_and_order(self):
        text = serialize_document({"animals": {"cat": CAT}}).decode("utf-8")
        assert text == json.dumps({"animals": {"cat": CAT}}, indent=2)
        assert text.index('"name"') < text.index('"img"') < text.index('"imgUrl"') < text.index('"desc"')

    def test_non_ascii_kept_literal(self):
        doc = {"animais": {"gato": {"name": "Gato", "img": "", "imgUrl": "", "desc": "Um felino ágil"}}}
        raw = serialize_document(doc)
        assert "ágil".encode("utf-8") in raw
        assert b"\\u00e1" not in raw

    def test_round_trips_through_parse(self):
        doc = {"animals": {"cat": CAT}}
        assert parse_document(serialize_document(doc).decode("utf-8")) == doc
