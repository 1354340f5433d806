"""Note-Prompt - fill stored prompt templates from a note and insert the LLM reply.

This package resolves a prompt template from a folder of Markdown notes,
substitutes values from the active note, sends it to an LLM (OpenAI,
Anthropic Claude, Google Gemini or NVIDIA NIM models) and writes the reply
back into the note at a fixed cursor position, either streamed fragment by
fragment or as a single completion.

Main components:
- note-prompt list: List the available prompt templates
- note-prompt generate: Generate text into a note
- note-prompt generate-with-file: Generate text with the note's attachment URL
- note-prompt config: Show or edit the persisted settings
"""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("note-prompt")
except PackageNotFoundError:
    __version__ = "unknown"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (typically ``__name__``)."""
    return logging.getLogger(name)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the package logger with a single console handler.

    Args:
        verbose: Log at DEBUG level instead of WARNING

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    package_logger.addHandler(handler)
    return package_logger
