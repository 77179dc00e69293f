"""
Tolerant parser for the remote mod definitions document.

The document is hand-maintained and frequently served wrapped in an
HTML page, so it is not parsed as strict JSON. Instead:

1. If the body contains a ``<pre>…</pre>`` block, only its inner text
   is used (HTML entities unescaped); otherwise the whole body is.
2. Each named section (``"Known Cheats"``, ``"Known Mods"``) is located
   by pattern and its brace-delimited content is scanned for
   ``"key": "value"`` pairs.

Tolerance contract
------------------
* Unknown sections, trailing commentary, and unbalanced braces outside
  the matched sections are ignored.
* Duplicate keys inside a section keep the **first** value.
* A single missing section yields an empty table for that category.
* A document with neither section is rejected.
* The only exception leaving this module is :class:`DatasetParseError`.
"""

from __future__ import annotations

import html
import re

import structlog

from ms_common.errors import DatasetParseError
from ms_common.models import ParsedDataset

logger = structlog.get_logger()

DISALLOWED_SECTION = "Known Cheats"
PERMITTED_SECTION = "Known Mods"

_PRE_BLOCK = re.compile(r"<pre(?:\s[^>]*)?>([\s\S]*?)</pre>", re.IGNORECASE)
_ENTRY = re.compile(r'"([^"]+)"\s*:\s*"([^"]+)"')


def _compile_section(section_name: str) -> re.Pattern[str]:
    return re.compile(r'"' + re.escape(section_name) + r'"\s*:\s*\{([^}]*)\}')


_SECTION_PATTERNS: dict[str, re.Pattern[str]] = {
    DISALLOWED_SECTION: _compile_section(DISALLOWED_SECTION),
    PERMITTED_SECTION: _compile_section(PERMITTED_SECTION),
}


def extract_document(body: str) -> str:
    """Return the text to parse: the first ``<pre>`` block's content, or *body*."""
    match = _PRE_BLOCK.search(body)
    if match is None:
        return body.strip()
    return html.unescape(match.group(1)).strip()


def parse_section(document: str, section_name: str) -> dict[str, str] | None:
    """Extract the ``"key": "value"`` pairs of one named section.

    Returns:
        The section's table (first key wins), or ``None`` if the section
        is not present in *document*.
    """
    pattern = _SECTION_PATTERNS.get(section_name) or _compile_section(section_name)
    match = pattern.search(document)
    if match is None:
        return None

    entries: dict[str, str] = {}
    for key, value in _ENTRY.findall(match.group(1)):
        if key not in entries:
            entries[key] = value
    return entries


def parse_dataset(body: str) -> ParsedDataset:
    """Parse a raw response body into disallowed/permitted tables.

    Args:
        body: Response text, raw or HTML-wrapped.

    Returns:
        A :class:`ParsedDataset`.

    Raises:
        DatasetParseError: If *body* is not text, neither section is
            present, or extraction fails for any other reason.
    """
    if not isinstance(body, str):
        raise DatasetParseError(f"expected text body, got {type(body).__name__}")

    try:
        document = extract_document(body)
        disallowed = parse_section(document, DISALLOWED_SECTION)
        permitted = parse_section(document, PERMITTED_SECTION)
    except Exception as exc:
        raise DatasetParseError(f"extraction failed: {exc}") from exc

    if disallowed is None and permitted is None:
        raise DatasetParseError("document contains no known sections")

    if disallowed is None or permitted is None:
        logger.warning(
            "dataset_section_missing",
            section=DISALLOWED_SECTION if disallowed is None else PERMITTED_SECTION,
        )

    return ParsedDataset(disallowed=disallowed or {}, permitted=permitted or {})
