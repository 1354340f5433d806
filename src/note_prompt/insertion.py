"""
Insertion of generated text at a fixed anchor.

The anchor is captured when a command is triggered. Each fragment is inserted
at the anchor, then the anchor's column moves right by the fragment's length,
so streamed fragments land in order one after the other regardless of where
the user's cursor goes in the meantime.
"""

from abc import ABC, abstractmethod
from typing import List

from . import get_logger
from .documents import Position, TextBuffer

logger = get_logger(__name__)


class TextSink(ABC):
    """Anything text can be inserted into at a ``(line, ch)`` position."""

    @abstractmethod
    def insert(self, position: Position, text: str) -> None:
        """Insert ``text`` at ``position``."""


TextSink.register(TextBuffer)


class InsertionSink:
    """Appends fragments at an advancing anchor in a ``TextSink``."""

    def __init__(self, sink: TextSink, anchor: Position):
        self.sink = sink
        self.anchor = Position(anchor.line, anchor.ch)
        self.fragments: List[str] = []

    def append(self, fragment: str) -> None:
        if not fragment:
            return
        self.sink.insert(Position(self.anchor.line, self.anchor.ch), fragment)
        self.anchor.ch += len(fragment)
        self.fragments.append(fragment)
        logger.debug("Inserted %d chars, anchor now %d:%d", len(fragment), self.anchor.line, self.anchor.ch)

    @property
    def inserted_text(self) -> str:
        return "".join(self.fragments)
