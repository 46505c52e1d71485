"""
Patch format parser.

Parses model-authored patch text into ordered search/replace pairs. Two
surface grammars are accepted and may be mixed in one document:

Delimiter grammar::

    <<<<<<< SEARCH
    text to find
    =======
    replacement text
    >>>>>>> REPLACE

Tag grammar::

    <DIFF id="1">
    <SEARCH>
    text to find
    </SEARCH>
    <REPLACE>
    replacement text
    </REPLACE>
    </DIFF>

A ``replace_all="true"`` attribute on ``<DIFF>`` replaces every occurrence.
A ``<DIFF>`` tag opens a block only at the start of a line or right after a
``</DIFF>``. Section text that would read as markup may be wrapped in
``<![CDATA[...]]>``.
Anything outside blocks (prose, code fences) is ignored. A malformed block
fails the whole parse.
"""

import logging
import re
from typing import Iterator, Optional

from diff_review.errors import MalformedPatch, NotAPatch
from diff_review.models.patch import (
    CDATA_CLOSE,
    CDATA_OPEN,
    DIVIDER_MARKER,
    REPLACE_MARKER,
    SEARCH_MARKER,
    SearchReplace,
)

logger = logging.getLogger(__name__)

_SEARCH_LINE_RE = re.compile(r"^<<<<<<< SEARCH\r?$", re.MULTILINE)
_TAG_OPEN_RE = re.compile(r"(?:^|(?<=</DIFF>))[ \t]*(<DIFF)(?=[\s>])", re.MULTILINE)
_TAG_ATTRIBUTES_RE = re.compile(r"""((?:"[^"]*"|'[^']*'|[^"'>])*)>""")
_ATTRIBUTE_RE = re.compile(r"""([\w-]+)\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))""")

_DELIMITED_BLOCK_RE = re.compile(
    r"^<<<<<<< SEARCH\r?\n(?:.*\n)*?=======\r?\n(?:.*\n)*?>>>>>>> REPLACE\r?$",
    re.MULTILINE,
)
_TAGGED_BLOCK_RE = re.compile(
    r"(?:^|(?<=</DIFF>))[ \t]*<DIFF(?=[\s>])[^>]*>.*?<SEARCH>.*?</SEARCH>.*?<REPLACE>.*?</REPLACE>.*?</DIFF>",
    re.DOTALL | re.MULTILINE,
)

_CLOSE_TAG = "</DIFF>"


def is_patch(text: str) -> bool:
    """
    Whether text contains at least one well-formed patch block.

    Blocks are recognized where ``PatchParser`` would look for them: a
    ``<DIFF>`` tag inside a line of prose does not count.
    """
    return bool(_DELIMITED_BLOCK_RE.search(text) or _TAGGED_BLOCK_RE.search(text))


def _iter_lines(text: str, pos: int) -> Iterator[tuple[str, int]]:
    """Yield ``(line, next_pos)`` for each line starting at ``pos``."""
    while pos < len(text):
        newline = text.find("\n", pos)
        if newline == -1:
            yield text[pos:], len(text)
            return
        yield text[pos:newline], newline + 1
        pos = newline + 1


def _marker(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


def _strip_markup_breaks(body: str) -> str:
    """Drop the single line break that follows an opening tag and precedes a closing one."""
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]
    if body.endswith("\r\n"):
        body = body[:-2]
    elif body.endswith("\n"):
        body = body[:-1]
    return body


def _find_outside_cdata(text: str, needle: str, pos: int, end: Optional[int] = None) -> int:
    """Like ``str.find``, skipping over CDATA sections."""
    if end is None:
        end = len(text)
    while True:
        found = text.find(needle, pos, end)
        cdata = text.find(CDATA_OPEN, pos, end)
        if found == -1 or cdata == -1 or found < cdata:
            return found
        cdata_end = text.find(CDATA_CLOSE, cdata + len(CDATA_OPEN), end)
        if cdata_end == -1:
            raise MalformedPatch("CDATA section has no closing ']]>'")
        pos = cdata_end + len(CDATA_CLOSE)


def _unwrap_cdata(section: str) -> str:
    """Return the text of a section made of CDATA, or the section itself."""
    if not section.startswith(CDATA_OPEN):
        return section
    parts: list[str] = []
    pos = 0
    while section.startswith(CDATA_OPEN, pos):
        start = pos + len(CDATA_OPEN)
        end = section.find(CDATA_CLOSE, start)
        if end == -1:
            raise MalformedPatch("CDATA section has no closing ']]>'")
        parts.append(section[start:end])
        pos = end + len(CDATA_CLOSE)
    if pos != len(section):
        raise MalformedPatch(f"Unexpected text after CDATA section: {section[pos:]!r}")
    return "".join(parts)


def _extract_tag(body: str, tag: str) -> Optional[str]:
    start_tag = f"<{tag}>"
    start = _find_outside_cdata(body, start_tag, 0)
    if start == -1:
        return None
    content_start = start + len(start_tag)
    end = _find_outside_cdata(body, f"</{tag}>", content_start)
    if end == -1:
        return None
    return body[content_start:end]


def _parse_attributes(attributes: str) -> dict[str, str]:
    return {
        match.group(1): next(value for value in match.groups()[1:] if value is not None)
        for match in _ATTRIBUTE_RE.finditer(attributes)
    }


class PatchParser:
    """Parse patch text into ``SearchReplace`` entries in document order."""

    def parse(self, text: str) -> list[SearchReplace]:
        """
        Parse every patch block in a document.

        Args:
            text: Patch text, possibly surrounded by prose.

        Returns:
            One ``SearchReplace`` per block, in document order.

        Raises:
            NotAPatch: If the text contains no block at all.
            MalformedPatch: If any block is incomplete.
        """
        changes: list[SearchReplace] = []
        pos = 0
        while True:
            delimited = _SEARCH_LINE_RE.search(text, pos)
            tagged = _TAG_OPEN_RE.search(text, pos)
            if delimited is None and tagged is None:
                break
            if tagged is None or (delimited is not None and delimited.start() < tagged.start()):
                change, pos = self._parse_delimited(text, delimited.end())
            else:
                change, pos = self._parse_tagged(text, tagged.start(1))
            changes.append(change)

        if not changes:
            raise NotAPatch(text)

        logger.debug("Parsed %d search/replace block(s)", len(changes))
        return changes

    def _parse_delimited(self, text: str, marker_end: int) -> tuple[SearchReplace, int]:
        if marker_end >= len(text):
            raise MalformedPatch(f"'{SEARCH_MARKER}' block has no '{DIVIDER_MARKER}' separator")

        search_lines: list[str] = []
        replace_lines: list[str] = []
        in_replace = False

        for line, next_pos in _iter_lines(text, marker_end + 1):
            marker = _marker(line)
            if not in_replace:
                if marker == DIVIDER_MARKER:
                    in_replace = True
                elif marker in (SEARCH_MARKER, REPLACE_MARKER):
                    raise MalformedPatch(
                        f"'{SEARCH_MARKER}' block has no '{DIVIDER_MARKER}' separator "
                        f"before {marker!r}"
                    )
                else:
                    search_lines.append(line)
            else:
                if marker == REPLACE_MARKER:
                    change = SearchReplace(
                        search="\n".join(search_lines),
                        replace="\n".join(replace_lines),
                    )
                    return change, next_pos
                if marker == SEARCH_MARKER:
                    raise MalformedPatch(
                        f"'{SEARCH_MARKER}' block has no '{REPLACE_MARKER}' end marker"
                    )
                replace_lines.append(line)

        if in_replace:
            raise MalformedPatch(f"'{SEARCH_MARKER}' block has no '{REPLACE_MARKER}' end marker")
        raise MalformedPatch(f"'{SEARCH_MARKER}' block has no '{DIVIDER_MARKER}' separator")

    def _parse_tagged(self, text: str, start: int) -> tuple[SearchReplace, int]:
        opening = _TAG_ATTRIBUTES_RE.match(text, start + len("<DIFF"))
        if opening is None:
            raise MalformedPatch("<DIFF> opening tag has no closing '>'")
        close = _find_outside_cdata(text, _CLOSE_TAG, opening.end())
        if close == -1:
            raise MalformedPatch("<DIFF> block has no closing </DIFF> tag")

        attributes = _parse_attributes(opening.group(1))
        body = text[opening.end():close]

        search = _extract_tag(body, "SEARCH")
        replace = _extract_tag(body, "REPLACE")
        if search is None or replace is None:
            missing = "SEARCH" if search is None else "REPLACE"
            raise MalformedPatch(f"<DIFF> block is missing its <{missing}> section")

        description = _extract_tag(body, "DESCRIPTION")
        change = SearchReplace(
            search=_unwrap_cdata(_strip_markup_breaks(search)),
            replace=_unwrap_cdata(_strip_markup_breaks(replace)),
            id=attributes.get("id"),
            description=_unwrap_cdata(description.strip()) if description is not None else None,
            replace_all=attributes.get("replace_all", "").lower() == "true",
        )
        return change, close + len(_CLOSE_TAG)


def parse_patch(text: str) -> list[SearchReplace]:
    """Parse patch text with a default ``PatchParser``."""
    return PatchParser().parse(text)
