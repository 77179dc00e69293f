"""
Tests for the tolerant definitions document parser.

Covers HTML <pre> extraction, section matching, first-key-wins on
duplicates, and the malformed-document behaviour.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from ms_common.errors import DatasetParseError

from auditor.dataset_parser import (
    _SECTION_PATTERNS,
    DISALLOWED_SECTION,
    PERMITTED_SECTION,
    extract_document,
    parse_dataset,
    parse_section,
)


class TestExtractDocument:
    def test_raw_body_is_used_as_is(self) -> None:
        assert extract_document('  {"a": "b"}  ') == '{"a": "b"}'

    def test_pre_block_is_extracted(self) -> None:
        body = '<html><body><h1>Data</h1><pre>{"Known Cheats": {}}</pre></body></html>'
        assert extract_document(body) == '{"Known Cheats": {}}'

    def test_pre_tag_is_case_insensitive(self) -> None:
        assert extract_document("<PRE>inner</PRE>") == "inner"

    def test_pre_with_attributes(self) -> None:
        assert extract_document('<pre class="json">inner</pre>') == "inner"

    def test_html_entities_unescaped(self) -> None:
        body = "<pre>{&quot;Known Mods&quot;: {&quot;hud&quot;: &quot;HUD Mod&quot;}}</pre>"
        assert extract_document(body) == '{"Known Mods": {"hud": "HUD Mod"}}'

    def test_first_pre_block_wins(self) -> None:
        assert extract_document("<pre>one</pre><pre>two</pre>") == "one"


class TestParseSection:
    def test_missing_section_returns_none(self) -> None:
        assert parse_section('{"Other": {"a": "b"}}', "Known Cheats") is None

    def test_first_key_wins(self) -> None:
        doc = '{"Known Cheats": {"void": "Void", "void": "Void Menu"}}'
        assert parse_section(doc, "Known Cheats") == {"void": "Void"}

    def test_multiline_section(self) -> None:
        doc = """
        {
          "Known Mods": {
            "GFaces": "GFaces",
            "github.com/maroon-shadow/SimpleBoards": "Simple Boards"
          }
        }
        """
        assert parse_section(doc, "Known Mods") == {
            "GFaces": "GFaces",
            "github.com/maroon-shadow/SimpleBoards": "Simple Boards",
        }

    def test_keys_are_case_sensitive(self) -> None:
        doc = '{"Known Mods": {"GS": "Old GShirts", "gs": "lower"}}'
        assert parse_section(doc, "Known Mods") == {"GS": "Old GShirts", "gs": "lower"}

    def test_non_string_values_are_skipped(self) -> None:
        doc = '{"Known Mods": {"count": 3, "hud": "HUD Mod"}}'
        assert parse_section(doc, "Known Mods") == {"hud": "HUD Mod"}

    def test_known_sections_use_precompiled_patterns(self) -> None:
        assert set(_SECTION_PATTERNS) == {DISALLOWED_SECTION, PERMITTED_SECTION}
        doc = '{"Known Cheats": {"x1": "Phantom"}}'
        with patch("auditor.dataset_parser.re.compile") as compile_:
            assert parse_section(doc, DISALLOWED_SECTION) == {"x1": "Phantom"}
        compile_.assert_not_called()

    def test_other_section_names_still_parse(self) -> None:
        assert parse_section('{"Extra": {"k": "v"}}', "Extra") == {"k": "v"}


class TestParseDataset:
    def test_sample_document(self) -> None:
        parsed = parse_dataset('{"Known Cheats":{"x1":"Phantom"},"Known Mods":{"hud":"HUD Mod"}}')
        assert parsed.disallowed == {"x1": "Phantom"}
        assert parsed.permitted == {"hud": "HUD Mod"}

    def test_tolerates_trailing_commentary_and_unknown_sections(self) -> None:
        doc = """
        {"Version": {"v": "3"},
         "Known Cheats": {"genesis": "Genesis",},
         "Known Mods": {"GTrials": "GTrials"}
        } // last edited by hand
        }}}
        """
        parsed = parse_dataset(doc)
        assert parsed.disallowed == {"genesis": "Genesis"}
        assert parsed.permitted == {"GTrials": "GTrials"}

    def test_one_missing_section_yields_empty_table(self) -> None:
        parsed = parse_dataset('{"Known Mods": {"hud": "HUD Mod"}}')
        assert parsed.disallowed == {}
        assert parsed.permitted == {"hud": "HUD Mod"}

    def test_no_sections_is_rejected(self) -> None:
        with pytest.raises(DatasetParseError):
            parse_dataset("<html><body>Service Unavailable</body></html>")

    def test_non_text_body_is_rejected(self) -> None:
        with pytest.raises(DatasetParseError):
            parse_dataset(None)  # type: ignore[arg-type]

    def test_html_wrapped_document(self) -> None:
        body = (
            "<!doctype html><html><head><title>data</title></head><body><pre>"
            '{"Known Cheats": {"ObsidianMC": "Obsidian"}, "Known Mods": {"GFaces": "GFaces"}}'
            "</pre></body></html>"
        )
        parsed = parse_dataset(body)
        assert parsed.disallowed == {"ObsidianMC": "Obsidian"}
        assert parsed.permitted == {"GFaces": "GFaces"}
