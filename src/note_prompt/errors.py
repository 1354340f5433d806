"""
Error conditions for the Note-Prompt pipeline.

Every condition carries a short ``notice`` naming the failure category. The
pipeline shows that notice to the user and aborts the current run; nothing is
retried.
"""

from typing import Optional


class NotePromptError(Exception):
    """Base class for conditions that abort a generation run."""

    notice = "Generation failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.notice
        super().__init__(self.message)


class PromptFolderNotFound(NotePromptError):
    notice = "Prompt folder not found"


class TemplateNotFound(NotePromptError):
    notice = "Prompt file not found"


class NoActiveDocument(NotePromptError):
    notice = "No active note"


class NoActiveView(NotePromptError):
    notice = "No editor to insert into"


class AttachmentNotFound(NotePromptError):
    notice = "No url found in the note's front-matter"


class ModelInvocationFailed(NotePromptError):
    """Raised when a provider request fails (auth, network, malformed response)."""

    notice = "Model request failed"

    def __init__(self, message: Optional[str] = None, provider: Optional[str] = None,
                 status_code: Optional[int] = None) -> None:
        self.provider = provider
        self.status_code = status_code
        if message and provider:
            message = f"[{provider}] {message}"
        if message and status_code:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)
