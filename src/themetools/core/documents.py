"""
File boundary for patchable documents.

Patch functions work on text; this module is the only place that reads or
writes the files behind that text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """A text file loaded for editing."""

    path: Path
    text: str
    original: str

    @classmethod
    def load(cls, path: Path) -> Document:
        text = path.read_text(encoding="utf-8")
        return cls(path=path, text=text, original=text)

    @property
    def changed(self) -> bool:
        return self.text != self.original

    def save(self) -> bool:
        """Write the text back if it changed. Returns True when written."""
        if not self.changed:
            logger.debug("Unchanged: %s", self.path)
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.text, encoding="utf-8")
        self.original = self.text
        logger.debug("Wrote %s", self.path)
        return True


def write_file(path: Path, content: str) -> None:
    """Create or overwrite a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s", path)
