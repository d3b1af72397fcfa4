"""
Anchor-based text patching.

Idempotent edits to small text documents (CSS, TypeScript). An insertion is
described by a directive and an ordered list of anchors; the first anchor
whose pattern matches decides where the directive goes. Nothing is inserted
when the directive (or an equivalent one) is already present.

Usage::

    anchors = [
        Anchor.after_last(THEME_IMPORT),
        Anchor.after_first(TW_ANIMATE_IMPORT),
        Anchor.before_first(SOURCE_DIRECTIVE),
    ]
    result = insert_once(css, "@import './themes/rose.css';", anchors)
    if result.changed:
        ...
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import StrEnum

from .errors import StructureParseError

_BLANK_RUNS = re.compile(r"\n{3,}")

_PAIRS = {"{": "}", "[": "]", "(": ")"}
_QUOTES = "'\"`"


class Placement(StrEnum):
    """Where a directive goes relative to an anchor match."""

    AFTER_LAST = "after_last"
    AFTER_FIRST = "after_first"
    BEFORE_FIRST = "before_first"


class PatchStatus(StrEnum):
    """Outcome of a single patch operation."""

    APPLIED = "applied"
    ALREADY_PRESENT = "already_present"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class PatchResult:
    """Patched text plus what happened to it."""

    text: str
    status: PatchStatus

    @property
    def changed(self) -> bool:
        return self.status == PatchStatus.APPLIED


@dataclass(frozen=True)
class Anchor:
    """
    An insertion rule.

    Attributes:
        pattern: Compiled regex locating the anchor
        placement: Insert after the last match, after the first match, or
            before the first match
        separator: Text placed between the anchor and the directive
    """

    pattern: re.Pattern[str]
    placement: Placement = Placement.AFTER_LAST
    separator: str = "\n"

    @classmethod
    def after_last(cls, pattern: str | re.Pattern[str], separator: str = "\n") -> Anchor:
        return cls(re.compile(pattern), Placement.AFTER_LAST, separator)

    @classmethod
    def after_first(cls, pattern: str | re.Pattern[str], separator: str = "\n") -> Anchor:
        return cls(re.compile(pattern), Placement.AFTER_FIRST, separator)

    @classmethod
    def before_first(cls, pattern: str | re.Pattern[str], separator: str = "\n") -> Anchor:
        return cls(re.compile(pattern), Placement.BEFORE_FIRST, separator)

    def splice(self, text: str, directive: str) -> str | None:
        """Insert ``directive`` at this anchor, or return None if it does not match."""
        if self.placement == Placement.AFTER_LAST:
            match = None
            for match in self.pattern.finditer(text):
                pass
        else:
            match = self.pattern.search(text)

        if match is None:
            return None

        if self.placement == Placement.BEFORE_FIRST:
            pos = match.start()
            return text[:pos] + directive + self.separator + text[pos:]

        pos = match.end()
        return text[:pos] + self.separator + directive + text[pos:]


def insert_once(
    text: str,
    directive: str,
    anchors: Sequence[Anchor],
    present: str | re.Pattern[str] | None = None,
) -> PatchResult:
    """
    Insert ``directive`` unless it is already there.

    Args:
        text: Document contents
        directive: Text to insert (usually a single line)
        anchors: Rules evaluated in order; the first matching one is used
        present: Optional pattern for an equivalent directive (e.g. the same
            import written with other quotes)

    Returns:
        PatchResult with ``ALREADY_PRESENT`` and the untouched text, or
        ``APPLIED`` with exactly one inserted region. With no matching anchor
        the directive is prepended.
    """
    if directive in text or (present is not None and re.search(present, text)):
        return PatchResult(text, PatchStatus.ALREADY_PRESENT)

    for anchor in anchors:
        patched = anchor.splice(text, directive)
        if patched is not None:
            return PatchResult(patched, PatchStatus.APPLIED)

    return PatchResult(directive + "\n" + text, PatchStatus.APPLIED)


def replace_once(text: str, needle: str, replacement: str) -> PatchResult:
    """Replace the first occurrence of ``needle``; ``NOT_FOUND`` if absent."""
    if needle not in text:
        return PatchResult(text, PatchStatus.NOT_FOUND)
    return PatchResult(text.replace(needle, replacement, 1), PatchStatus.APPLIED)


def remove(text: str, pattern: str | re.Pattern[str]) -> PatchResult:
    """
    Delete every line matched by ``pattern``.

    Each match is widened to whole lines, including the line terminator (or
    the preceding newline for a final unterminated line). Runs of blank lines
    left behind collapse to a single blank line.

    Returns:
        ``NOT_FOUND`` with the untouched text when nothing matches.
    """
    regex = re.compile(pattern)
    spans: list[tuple[int, int]] = []
    for match in regex.finditer(text):
        start = text.rfind("\n", 0, match.start()) + 1
        newline = text.find("\n", match.end())
        if newline == -1:
            end = len(text)
            if start > 0:
                start -= 1
        else:
            end = newline + 1
        if spans and start < spans[-1][1]:
            spans[-1] = (spans[-1][0], max(end, spans[-1][1]))
        else:
            spans.append((start, end))

    if not spans:
        return PatchResult(text, PatchStatus.NOT_FOUND)

    pieces: list[str] = []
    cursor = 0
    for start, end in spans:
        pieces.append(text[cursor:start])
        cursor = end
    pieces.append(text[cursor:])

    return PatchResult(collapse_blank_lines("".join(pieces)), PatchStatus.APPLIED)


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of blank lines to at most one."""
    return _BLANK_RUNS.sub("\n\n", text)


# =============================================================================
# Balanced scanning
# =============================================================================


def _skip_string(text: str, index: int) -> int:
    """Index just past the string literal starting at ``index``."""
    quote = text[index]
    i = index + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    raise StructureParseError(f"Unterminated string literal at offset {index}")


def _skip_comment(text: str, index: int, line_comments: bool = True) -> int:
    """Index just past a ``//`` or ``/* */`` comment, or ``index`` if none starts here."""
    if line_comments and text.startswith("//", index):
        end = text.find("\n", index)
        return len(text) if end == -1 else end
    if text.startswith("/*", index):
        end = text.find("*/", index + 2)
        if end == -1:
            raise StructureParseError(f"Unterminated comment at offset {index}")
        return end + 2
    return index


def find_balanced(text: str, open_index: int, line_comments: bool = True) -> int:
    """
    Return the index of the bracket closing the one at ``open_index``.

    String literals and comments are skipped. Pass ``line_comments=False``
    for CSS, where ``//`` is not a comment (``url(https://...)``).

    Raises:
        StructureParseError: If the bracket is never closed or a mismatched
            bracket is found first
    """
    opener = text[open_index]
    if opener not in _PAIRS:
        raise StructureParseError(f"No opening bracket at offset {open_index}")

    stack = [_PAIRS[opener]]
    i = open_index + 1
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_string(text, i)
            continue
        skipped = _skip_comment(text, i, line_comments)
        if skipped != i:
            i = skipped
            continue
        if ch in _PAIRS:
            stack.append(_PAIRS[ch])
        elif ch in _PAIRS.values():
            if ch != stack[-1]:
                raise StructureParseError(f"Mismatched '{ch}' at offset {i}")
            stack.pop()
            if not stack:
                return i
        i += 1

    raise StructureParseError(f"Unbalanced '{opener}' at offset {open_index}")


def iter_blocks(text: str, start: int, end: int, opener: str = "{") -> Iterator[tuple[int, int]]:
    """
    Yield ``(start, end)`` spans of top-level ``opener`` blocks in a region.

    ``end`` of each span is exclusive (one past the closing bracket).
    """
    i = start
    while i < end:
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_string(text, i)
            continue
        skipped = _skip_comment(text, i)
        if skipped != i:
            i = skipped
            continue
        if ch == opener:
            close = find_balanced(text, i)
            if close >= end:
                raise StructureParseError(f"Block at offset {i} runs past its container")
            yield i, close + 1
            i = close + 1
            continue
        i += 1


def remove_block(
    text: str,
    open_pattern: str | re.Pattern[str],
    key_pattern: str | re.Pattern[str],
    line_comments: bool = True,
) -> PatchResult:
    """
    Delete the first bracketed block that contains ``key_pattern``.

    ``open_pattern`` must end on the opening bracket. The block is bounded
    with find_balanced before anything is cut, along with one trailing comma
    and, when the block fills its lines, the surrounding line breaks.

    Raises:
        StructureParseError: If the candidate block is unbalanced
    """
    opener = re.compile(open_pattern)
    key = re.compile(key_pattern)
    for match in opener.finditer(text):
        open_index = match.end() - 1
        close = find_balanced(text, open_index, line_comments)
        if not key.search(text, open_index, close):
            continue

        start, end = match.start(), close + 1
        trailing = re.compile(r"[ \t]*,?").match(text, end)
        if trailing is not None:
            end = trailing.end()
        line_start = text.rfind("\n", 0, start) + 1
        if not text[line_start:start].strip():
            start = line_start
            if text.startswith("\n", end):
                end += 1
        return PatchResult(collapse_blank_lines(text[:start] + text[end:]), PatchStatus.APPLIED)

    return PatchResult(text, PatchStatus.NOT_FOUND)
