"""
Notes and editable text buffers.

A ``Document`` is a Markdown note loaded from disk together with its YAML
front-matter. A ``TextBuffer`` holds the note's lines in memory and accepts
insertions at ``(line, ch)`` positions the way an editor does, so generated text
can be written into it before the note is saved back.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from . import get_logger

logger = get_logger(__name__)

_FRONT_MATTER_END = re.compile(r"\n---[ \t]*(\n|$)")


@dataclass
class Position:
    """Zero-based line and character offset in a buffer."""

    line: int
    ch: int

    @classmethod
    def parse(cls, value: str) -> "Position":
        """Parse a ``LINE:CH`` string."""
        line, sep, ch = value.partition(":")
        if not sep:
            raise ValueError(f"Expected LINE:CH, got {value!r}")
        position = cls(int(line), int(ch))
        if position.line < 0 or position.ch < 0:
            raise ValueError(f"Position must not be negative: {value!r}")
        return position


def parse_front_matter(text: str) -> Tuple[Dict[str, Any], str]:
    """Split a leading ``---`` YAML block from a note.

    Returns:
        Tuple of (front_matter_dict, body). Notes without front-matter, or with
        front-matter that is not a YAML mapping, yield an empty dict.
    """
    if not text.startswith("---"):
        return {}, text

    end_match = _FRONT_MATTER_END.search(text, 3)
    if not end_match:
        return {}, text

    front_matter_text = text[3 : end_match.start()]
    body = text[end_match.end() :]

    try:
        front_matter = yaml.safe_load(front_matter_text) or {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse front-matter: %s", e)
        return {}, text

    if not isinstance(front_matter, dict):
        logger.warning("Ignoring front-matter that is not a mapping")
        return {}, text
    return front_matter, body


@dataclass
class Document:
    """A note opened from the vault."""

    path: Path
    text: str
    front_matter: Dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        """Base name of the note without its extension."""
        return self.path.stem

    @property
    def attachment_url(self) -> Optional[str]:
        url = self.front_matter.get("url")
        if isinstance(url, str) and url.strip():
            return url.strip()
        return None


def load_document(path: Union[str, Path], encoding: str = "utf-8") -> Document:
    """Load a note and its front-matter."""
    path = Path(path)
    text = path.read_text(encoding=encoding)
    front_matter, _body = parse_front_matter(text)
    return Document(path=path, text=text, front_matter=front_matter)


class TextBuffer:
    """In-memory line buffer supporting editor-style inserts."""

    def __init__(self, text: str = ""):
        self.lines: List[str] = text.split("\n")

    @classmethod
    def from_document(cls, document: Document) -> "TextBuffer":
        return cls(document.text)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def end_position(self) -> Position:
        return Position(len(self.lines) - 1, len(self.lines[-1]))

    def insert(self, position: Position, text: str) -> None:
        """Insert ``text`` at ``position``.

        Positions past the end of a line are clipped to the line end and
        positions past the last line to the end of the buffer. ``text`` may
        contain newlines.
        """
        if position.line >= len(self.lines):
            position = self.end_position()
        line = self.lines[position.line]
        ch = min(position.ch, len(line))

        new_lines = (line[:ch] + text + line[ch:]).split("\n")
        self.lines[position.line : position.line + 1] = new_lines

    def save(self, path: Union[str, Path], encoding: str = "utf-8") -> None:
        Path(path).write_text(self.text, encoding=encoding)
