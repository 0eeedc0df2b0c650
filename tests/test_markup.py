"""Tests for the markup text helpers."""

import pytest

from institution_aggregator.markup import (
    clean_text,
    decode_entities,
    detect_charset_from_bytes,
    sanitize_document,
    strip_tags,
)


def test_decode_named_entities():
    assert decode_entities("A&amp;B &quot;x&quot; &#39;y&#39; &lt;z&gt;") == "A&B \"x\" 'y' <z>"


def test_decode_nbsp_becomes_space():
    assert decode_entities("Delhi&nbsp;Public") == "Delhi Public"


def test_decode_numeric_entities():
    assert decode_entities("caf&#233; &#8211; x") == "café – x"


def test_unknown_entities_left_verbatim():
    assert decode_entities("&copy; 2024 &foo;") == "&copy; 2024 &foo;"


def test_out_of_range_numeric_entity_left_verbatim():
    assert decode_entities("&#99999999999;") == "&#99999999999;"


@pytest.mark.parametrize("text", ["", "plain text", "Acme <b>School</b>", "a;b#c"])
def test_decode_is_noop_without_ampersand(text):
    assert decode_entities(text) == text


def test_strip_tags_replaces_with_space():
    assert strip_tags("<b>Acme</b>School") == " Acme School"


def test_strip_tags_tolerates_unterminated_tag():
    assert strip_tags("Acme <b School") == "Acme <b School"
    assert strip_tags("") == ""


def test_clean_text_collapses_decoded_nbsp():
    assert clean_text("  <span>Acme</span>&nbsp;&nbsp;\n School ") == "Acme School"


def test_sanitize_document_removes_control_characters():
    assert sanitize_document("a\x00b\r\nc\x07d") == "ab\ncd"


def test_detect_charset_from_meta_applies_browser_mapping():
    raw = b'<html><head><meta charset="ISO-8859-1"></head>'
    assert detect_charset_from_bytes(raw) == "windows-1252"


def test_detect_charset_from_http_equiv():
    raw = b'<meta http-equiv="Content-Type" content="text/html; charset=utf-8">'
    assert detect_charset_from_bytes(raw) == "utf-8"


def test_detect_charset_missing():
    assert detect_charset_from_bytes(b"<html><body></body></html>") is None


def test_decode_surrogate_pair_references():
    assert decode_entities("Smile &#55357;&#56832;") == "Smile \U0001F600"


def test_decode_unencodable_code_points_become_replacement_char():
    assert decode_entities("a&#55357;b") == "a\ufffdb"
    assert decode_entities("a&#56832;&#55357;b") == "a\ufffd\ufffdb"
    assert decode_entities("a&#0;b") == "a\ufffdb"
    # Out of range stays verbatim
    assert decode_entities("&#1114112;") == "&#1114112;"
    clean_text("&#55357;").encode("utf-8")
