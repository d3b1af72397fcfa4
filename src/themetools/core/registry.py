"""
Theme registry document editing.

The registry is a TypeScript source file holding two keyed collections:

- a union type listing every theme id::

      export type ColorTheme = "default" | "rose" | "ocean";

- an array literal with one record per theme::

      export const themes: ThemeConfig[] = [
        {
          id: "default",
          ...
        },
      ];

``ThemeRegistry.parse`` turns the file into a small data structure
(``UnionDeclaration`` + ``ArrayLiteral``) and ``serialize`` writes it back in
the same textual shape. Regions that were not modified are emitted from the
original text, so unrelated content is never touched.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from .errors import StructureParseError, make_structure_error
from .models import ThemeRecord
from .patcher import PatchStatus, find_balanced, iter_blocks

logger = logging.getLogger(__name__)

UNION_TYPE = "ColorTheme"
ARRAY_NAME = "themes"

_UNION_DECLARATION = re.compile(rf"(export\s+type\s+{UNION_TYPE}\s*=)([^;]*);")
_ARRAY_DECLARATION = re.compile(rf"export\s+const\s+{ARRAY_NAME}\b[^=;]*=\s*\[")
_MEMBER = re.compile(r"""(['"])((?:(?!\1).)*)\1""")
_ID_FIELD = re.compile(r"""\bid\s*:\s*(['"])((?:(?!\1).)*)\1""")
_FILLER = re.compile(r"^(?:\s|,|//[^\n]*|/\*.*?\*/)*$", re.DOTALL)

DEFAULT_INDENT = "  "
DEFAULT_QUOTE = '"'


def _escape(value: str, quote: str) -> str:
    return value.replace("\\", "\\\\").replace(quote, "\\" + quote)


# =============================================================================
# Union declaration
# =============================================================================


@dataclass
class UnionDeclaration:
    """A string-literal union type, one member per theme id."""

    head: str
    members: list[str]
    quote: str = DEFAULT_QUOTE
    leading: str = " "
    separator: str = " | "
    trailing: str = ""
    modified: bool = False

    @classmethod
    def parse(cls, head: str, body: str) -> UnionDeclaration | None:
        """
        Parse the part between ``=`` and ``;``.

        Returns None when the body is not a union of string literals (for
        example ``string``), in which case the declaration is left alone.
        """
        matches = list(_MEMBER.finditer(body))
        if not matches:
            if body.strip() in ("", "never"):
                return cls(head=head, members=[])
            return None

        first, last = matches[0], matches[-1]
        leading = body[: first.start()]
        if len(matches) > 1:
            separator = body[first.end() : matches[1].start()]
        elif "\n" in leading:
            line = leading[leading.rfind("\n") + 1 :]
            indent = line[: len(line) - len(line.lstrip())]
            separator = f"\n{indent}| "
        else:
            separator = " | "

        return cls(
            head=head,
            members=[m.group(2) for m in matches],
            quote=first.group(1),
            leading=leading,
            separator=separator,
            trailing=body[last.end() :],
        )

    def add(self, theme_id: str) -> PatchStatus:
        if theme_id in self.members:
            return PatchStatus.ALREADY_PRESENT
        self.members.append(theme_id)
        self.modified = True
        return PatchStatus.APPLIED

    def remove(self, theme_id: str) -> PatchStatus:
        if theme_id not in self.members:
            return PatchStatus.NOT_FOUND
        self.members = [m for m in self.members if m != theme_id]
        self.modified = True
        return PatchStatus.APPLIED

    def serialize(self) -> str:
        if not self.members:
            return f"{self.head} never{self.trailing};"
        quoted = [f"{self.quote}{_escape(m, self.quote)}{self.quote}" for m in self.members]
        return f"{self.head}{self.leading}{self.separator.join(quoted)}{self.trailing};"


# =============================================================================
# Array literal
# =============================================================================


@dataclass
class RegistryEntry:
    """One record block of the themes array, kept as raw text."""

    text: str
    id: str | None = None

    @classmethod
    def from_text(cls, text: str) -> RegistryEntry:
        match = _ID_FIELD.search(text)
        return cls(text=text, id=match.group(2) if match else None)

    def field(self, name: str) -> str | None:
        """Value of the first string field called ``name``, nested ones included."""
        match = re.search(rf"""\b{re.escape(name)}\s*:\s*(['"])((?:(?!\1).)*)\1""", self.text)
        return match.group(2) if match else None


@dataclass
class ArrayLiteral:
    """The themes array: entries plus the exact text between them."""

    entries: list[RegistryEntry] = field(default_factory=list)
    separators: list[str] = field(default_factory=list)
    open_text: str = ""
    close_text: str = ""
    empty_inner: str = ""
    modified: bool = False

    @classmethod
    def parse(cls, inner: str, path: Path | None = None) -> ArrayLiteral:
        """
        Parse the text between ``[`` and ``]``.

        Raises:
            StructureParseError: If the array holds anything other than
                brace-delimited records
        """
        spans = list(iter_blocks(inner, 0, len(inner)))
        if not spans:
            if not _FILLER.match(inner):
                raise make_structure_error(f"'{ARRAY_NAME}' array has no record blocks", path)
            return cls(empty_inner=inner)

        gaps = [inner[: spans[0][0]]]
        gaps.extend(inner[a[1] : b[0]] for a, b in zip(spans, spans[1:]))
        gaps.append(inner[spans[-1][1] :])
        for gap in gaps:
            if not _FILLER.match(gap):
                raise make_structure_error(
                    f"Unexpected content in '{ARRAY_NAME}' array: {gap.strip()[:40]!r}", path
                )

        return cls(
            entries=[RegistryEntry.from_text(inner[s:e]) for s, e in spans],
            separators=gaps[1:-1],
            open_text=gaps[0],
            close_text=gaps[-1],
        )

    def index_of(self, theme_id: str) -> int | None:
        for i, entry in enumerate(self.entries):
            if entry.id == theme_id:
                return i
        return None

    # -- formatting detection -------------------------------------------------

    def entry_indent(self) -> str:
        if "\n" in self.open_text:
            return self.open_text[self.open_text.rfind("\n") + 1 :]
        return DEFAULT_INDENT

    def indent_unit(self) -> str:
        if self.entries:
            lines = self.entries[0].text.split("\n")
            if len(lines) > 1:
                inner = lines[1][: len(lines[1]) - len(lines[1].lstrip())]
                unit = inner[len(self.entry_indent()) :]
                if unit:
                    return unit
        return DEFAULT_INDENT

    def quote(self) -> str:
        if self.entries:
            match = _ID_FIELD.search(self.entries[0].text)
            if match:
                return match.group(1)
        return DEFAULT_QUOTE

    def trailing_commas(self) -> bool:
        if self.entries:
            return re.search(r"\}\s*,\s*\}\s*$", self.entries[0].text) is not None
        return True

    def render_record(self, record: ThemeRecord) -> str:
        """Render a record block matching the existing entries' formatting."""
        ind, unit, q = self.entry_indent(), self.indent_unit(), self.quote()
        comma = "," if self.trailing_commas() else ""

        def prop(name: str, value: str, depth: int) -> str:
            return f"{ind}{unit * depth}{name}: {q}{_escape(value, q)}{q},"

        lines = [
            "{",
            prop("id", record.id, 1),
            prop("name", record.name, 1),
            prop("description", record.description, 1),
            prop("font", record.font, 1),
            f"{ind}{unit}colors: {{",
            prop("primary", record.colors.primary, 2),
            prop("secondary", record.colors.secondary, 2),
            prop("accent", record.colors.accent, 2),
            f"{ind}{unit}}}{comma}",
            f"{ind}}}",
        ]
        return "\n".join(lines)

    # -- edits ------------------------------------------------------------------

    def add(self, record: ThemeRecord) -> PatchStatus:
        if self.index_of(record.id) is not None:
            return PatchStatus.ALREADY_PRESENT

        if not self.entries:
            # Keep comments that sat between the brackets
            self.open_text = self.empty_inner.rstrip() + "\n" + DEFAULT_INDENT
            self.close_text = ",\n"
        else:
            self.separators.append(self.separators[-1] if self.separators else "," + self.open_text)

        self.entries.append(RegistryEntry(text=self.render_record(record), id=record.id))
        self.modified = True
        return PatchStatus.APPLIED

    def replace(self, record: ThemeRecord) -> PatchStatus:
        index = self.index_of(record.id)
        if index is None:
            return self.add(record)
        text = self.render_record(record)
        if self.entries[index].text == text:
            return PatchStatus.ALREADY_PRESENT
        self.entries[index] = RegistryEntry(text=text, id=record.id)
        self.modified = True
        return PatchStatus.APPLIED

    def remove(self, theme_id: str) -> PatchStatus:
        index = self.index_of(theme_id)
        if index is None:
            return PatchStatus.NOT_FOUND

        del self.entries[index]
        if self.separators:
            del self.separators[max(index - 1, 0)]
        self.modified = True
        return PatchStatus.APPLIED

    def serialize(self) -> str:
        if not self.entries:
            return f"[{self.empty_inner}]"
        parts = [self.entries[0].text]
        for sep, entry in zip(self.separators, self.entries[1:]):
            parts.append(sep)
            parts.append(entry.text)
        return "[" + self.open_text + "".join(parts) + self.close_text + "]"


# =============================================================================
# Registry document
# =============================================================================


class ThemeRegistry:
    """
    Editable view of the registry source file.

    Example::

        registry = ThemeRegistry.parse(path.read_text(), path)
        registry.add(record)
        path.write_text(registry.serialize())
    """

    def __init__(
        self,
        text: str,
        array: ArrayLiteral,
        array_span: tuple[int, int],
        union: UnionDeclaration | None = None,
        union_span: tuple[int, int] | None = None,
    ):
        self.text = text
        self.array = array
        self.array_span = array_span
        self.union = union
        self.union_span = union_span

    @classmethod
    def parse(cls, text: str, path: Path | None = None) -> ThemeRegistry:
        """
        Parse a registry document.

        Raises:
            StructureParseError: If the themes array is missing or malformed
        """
        decl = _ARRAY_DECLARATION.search(text)
        if decl is None:
            raise make_structure_error(f"No '{ARRAY_NAME}' array literal found", path)

        open_index = decl.end() - 1
        try:
            close_index = find_balanced(text, open_index)
        except StructureParseError as e:
            raise make_structure_error(f"Cannot bound '{ARRAY_NAME}' array: {e}", path) from e

        array = ArrayLiteral.parse(text[open_index + 1 : close_index], path)

        union = None
        union_span = None
        union_match = _UNION_DECLARATION.search(text)
        if union_match:
            union = UnionDeclaration.parse(union_match.group(1), union_match.group(2))
            union_span = union_match.span()
            if union is None:
                logger.debug("%s is not a string-literal union; leaving it untouched", UNION_TYPE)
        else:
            logger.debug("No %s union declaration found", UNION_TYPE)

        return cls(text, array, (open_index, close_index + 1), union, union_span)

    @property
    def ids(self) -> list[str]:
        return [e.id for e in self.array.entries if e.id is not None]

    @property
    def entries(self) -> list[RegistryEntry]:
        return list(self.array.entries)

    def has(self, theme_id: str) -> bool:
        return self.array.index_of(theme_id) is not None

    def add(self, record: ThemeRecord, replace: bool = False) -> PatchStatus:
        """
        Register a theme: one union member and one array entry.

        An existing entry with the same id is left alone (``ALREADY_PRESENT``)
        unless ``replace`` is set, in which case it is rewritten in place.
        """
        member_status = self.union.add(record.id) if self.union else PatchStatus.ALREADY_PRESENT
        if replace:
            entry_status = self.array.replace(record)
        else:
            entry_status = self.array.add(record)

        if PatchStatus.APPLIED in (member_status, entry_status):
            return PatchStatus.APPLIED
        return PatchStatus.ALREADY_PRESENT

    def remove(self, theme_id: str) -> PatchStatus:
        """Drop the union member and the array entry for ``theme_id``."""
        member_status = self.union.remove(theme_id) if self.union else PatchStatus.NOT_FOUND
        entry_status = self.array.remove(theme_id)

        if PatchStatus.APPLIED in (member_status, entry_status):
            return PatchStatus.APPLIED
        return PatchStatus.NOT_FOUND

    @property
    def modified(self) -> bool:
        return self.array.modified or bool(self.union and self.union.modified)

    def serialize(self) -> str:
        """Write the document back; untouched regions are copied verbatim."""
        regions: list[tuple[tuple[int, int], str]] = []
        if self.array.modified:
            regions.append((self.array_span, self.array.serialize()))
        if self.union is not None and self.union_span is not None and self.union.modified:
            regions.append((self.union_span, self.union.serialize()))

        text = self.text
        for (start, end), replacement in sorted(regions, reverse=True):
            text = text[:start] + replacement + text[end:]
        return text
