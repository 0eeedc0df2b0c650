"""
String-level helpers for raw HTML fragments.

These run on table cells cut out of upstream documents with regular
expressions, so they must accept anything: unterminated tags, stray
ampersands, empty strings.  None of them raise.

The fragment parser follows the usual fallback chain (html5lib → lxml →
html.parser): html5lib copes best with broken markup, html.parser is
always available.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup

from .logger import get_module_logger

logger = get_module_logger("markup")

# Fixed set of named references upstream pages actually use.  Anything else
# (e.g. "&copy;") is left verbatim.
NAMED_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&quot;": '"',
    "&#39;": "'",
    "&lt;": "<",
    "&gt;": ">",
}

NAMED_ENTITY_PATTERN = re.compile("|".join(re.escape(e) for e in NAMED_ENTITIES))
# A reference optionally followed by a second one, so surrogate pairs decode
NUMERIC_ENTITY_PATTERN = re.compile(r"&#(\d+);(?:&#(\d+);)?")

# An opening bracket up to the next closing bracket.  An unterminated "<"
# has no match and stays in the text.
TAG_PATTERN = re.compile(r"<[^>]*>")

WHITESPACE_PATTERN = re.compile(r"\s+")

# Characters that are never valid in HTML text (tab, LF, CR excepted)
CONTROL_CHARS = "".join(chr(c) for c in range(32) if c not in (9, 10, 13))
_CONTROL_TABLE = str.maketrans("", "", CONTROL_CHARS)

# WHATWG encoding spec: browsers silently remap these charsets, so we decode
# the same way a browser would.
# https://encoding.spec.whatwg.org/#names-and-labels
WHATWG_CHARSET_MAP = {
    "iso-8859-1": "windows-1252",
    "iso8859-1": "windows-1252",
    "iso88591": "windows-1252",
    "latin-1": "windows-1252",
    "latin1": "windows-1252",
    "us-ascii": "windows-1252",
    "ascii": "windows-1252",
    "iso-8859-9": "windows-1254",
    "iso-8859-11": "windows-874",
}

META_CHARSET_PATTERN = re.compile(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', re.IGNORECASE)
META_CONTENT_TYPE_PATTERN = re.compile(
    r'<meta[^>]+content=["\'][^"\']*charset=([^\s"\';>]+)', re.IGNORECASE
)


def _code_point(digits: str, raw: str) -> str:
    try:
        code = int(digits)
    except ValueError:
        return raw
    if code > 0x10FFFF:
        # Out of Unicode range: keep the reference as written
        return raw
    if code == 0 or 0xD800 <= code <= 0xDFFF:
        # NUL and lone surrogates cannot be encoded; html5lib does the same
        return "\ufffd"
    return chr(code)


def _numeric_entity(match: re.Match) -> str:
    first, second = match.group(1), match.group(2)
    if second is not None:
        high, low = int(first), int(second)
        # Emoji are often written as a UTF-16 pair: &#55357;&#56832;
        if 0xD800 <= high <= 0xDBFF and 0xDC00 <= low <= 0xDFFF:
            return chr(0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00))
        return (_code_point(first, f"&#{first};")
                + _code_point(second, f"&#{second};"))
    return _code_point(first, match.group(0))


def decode_entities(text: str) -> str:
    """Replace the supported character references with literal characters."""
    if "&" not in text:
        return text
    text = NAMED_ENTITY_PATTERN.sub(lambda m: NAMED_ENTITIES[m.group(0)], text)
    return NUMERIC_ENTITY_PATTERN.sub(_numeric_entity, text)


def strip_tags(text: str) -> str:
    """Replace every <…> span with a single space."""
    return TAG_PATTERN.sub(" ", text)


def collapse_whitespace(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def clean_text(fragment: str) -> str:
    """
    Turn a markup fragment into display text.

    Tags are replaced by spaces first, then entities are decoded so a decoded
    "&nbsp;" takes part in whitespace collapsing.
    """
    return collapse_whitespace(decode_entities(strip_tags(fragment)))


def sanitize_document(html: str) -> str:
    """
    String-level cleanup of a fetched document before extraction.

    Removes NULL bytes and control characters and normalizes line endings.
    Content is otherwise left untouched.
    """
    if "\x00" in html:
        html = html.replace("\x00", "")
    html = html.replace("\r\n", "\n").replace("\r", "\n")
    return html.translate(_CONTROL_TABLE)


def map_charset(charset: str) -> str:
    """Apply the WHATWG browser mapping to a declared charset label."""
    charset = charset.strip().lower()
    return WHATWG_CHARSET_MAP.get(charset, charset)


def detect_charset_from_bytes(raw_bytes: bytes) -> Optional[str]:
    """
    Find the charset declared by <meta charset=…> or
    <meta http-equiv="Content-Type" content="…; charset=…">.

    Only the first 2 KB are scanned; the HTML spec requires the declaration
    within the first 1024 bytes.

    Returns the browser-equivalent charset, or None if nothing is declared.
    """
    head_str = raw_bytes[:2048].decode("ascii", errors="ignore")

    m = META_CHARSET_PATTERN.search(head_str) or META_CONTENT_TYPE_PATTERN.search(head_str)
    if not m:
        return None
    return map_charset(m.group(1))


def parse_fragment(fragment: str) -> BeautifulSoup:
    """Parse an HTML fragment with the html5lib → lxml → html.parser chain."""
    try:
        return BeautifulSoup(fragment, "html5lib")
    except Exception as e:
        logger.debug(f"html5lib parsing failed, trying lxml: {e}")

    try:
        return BeautifulSoup(fragment, "lxml")
    except Exception as e:
        logger.debug(f"lxml parsing failed, using html.parser: {e}")
        return BeautifulSoup(fragment, "html.parser")
