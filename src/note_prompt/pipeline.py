"""
Generation pipeline for Note-Prompt.

PromptPipeline runs one command from trigger to insertion:

    IDLE -> RESOLVING_PROMPT -> INVOKING -> STREAMING_INSERTION | SINGLE_INSERTION -> DONE

Any failure moves the run to ABORTED. The only side effect of a failure is a
user notice; text inserted before the failure stays where it is.

Every generation mode feeds the same insertion loop: a streamed reply is a
sequence of fragments and a completed reply is a sequence of exactly one.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from . import get_logger
from .client import ModelClient
from .config import Settings
from .documents import Document, Position
from .errors import AttachmentNotFound, NoActiveView, NotePromptError
from .insertion import InsertionSink, TextSink
from .prompts import TemplateStore, list_templates, resolve_template

logger = get_logger(__name__)

PROGRESS_NOTICE = "Generating..."


class PipelineState(Enum):
    IDLE = "idle"
    RESOLVING_PROMPT = "resolving_prompt"
    INVOKING = "invoking"
    STREAMING_INSERTION = "streaming_insertion"
    SINGLE_INSERTION = "single_insertion"
    DONE = "done"
    ABORTED = "aborted"


class GenerationMode(Enum):
    STREAM = "stream"
    COMPLETE = "complete"
    FILE = "file"


class ProgressNotice(ABC):
    @abstractmethod
    def dismiss(self) -> None:
        """Hide the notice."""


class Notifier(ABC):
    """Shows short-lived messages to the user."""

    @abstractmethod
    def notice(self, message: str) -> None:
        """Show a transient notice."""

    @abstractmethod
    def progress(self, message: str) -> ProgressNotice:
        """Show a notice that stays until it is dismissed."""


@dataclass
class PipelineRun:
    """Outcome of one pipeline run."""

    template_name: str
    mode: GenerationMode
    state: PipelineState = PipelineState.IDLE
    transitions: List[PipelineState] = field(default_factory=list)
    prompt: Optional[str] = None
    anchor: Optional[Position] = None
    fragments: List[str] = field(default_factory=list)
    error: Optional[NotePromptError] = None

    @property
    def inserted_text(self) -> str:
        return "".join(self.fragments)

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.DONE


class PromptPipeline:
    """Resolves a template, invokes the model and inserts the reply.

    Runs are serialized: a run started while another is in flight waits for it
    to finish, then captures its own anchor.
    """

    def __init__(
        self,
        store: TemplateStore,
        client: ModelClient,
        notifier: Notifier,
        settings: Settings,
    ):
        self.store = store
        self.client = client
        self.notifier = notifier
        self.settings = settings
        self._lock = threading.Lock()

    def list_templates(self) -> List[str]:
        return list_templates(self.store, self.settings.prompt_folder, self.notifier)

    def run(
        self,
        template_name: str,
        document: Optional[Document],
        sink: Optional[TextSink],
        cursor: Optional[Position],
        mode: GenerationMode = GenerationMode.STREAM,
    ) -> PipelineRun:
        """Run the pipeline for one command trigger.

        Args:
            template_name: Name of the chosen template
            document: The active note, ``None`` when no note is open
            sink: Where to insert the reply, ``None`` when no editor is visible
            cursor: Cursor position at trigger time; becomes the anchor
            mode: Streamed, single completion, or completion with the
                note's attachment URL

        Returns:
            The finished run, in state DONE or ABORTED
        """
        with self._lock:
            run = PipelineRun(template_name=template_name, mode=mode)
            self._enter(run, PipelineState.IDLE)
            insertion: Optional[InsertionSink] = None
            progress: Optional[ProgressNotice] = None
            try:
                self._enter(run, PipelineState.RESOLVING_PROMPT)
                title = document.title if document is not None else None
                run.prompt = resolve_template(
                    self.store, self.settings.prompt_folder, template_name, title
                )

                if sink is None or cursor is None:
                    raise NoActiveView()

                url = None
                if mode is GenerationMode.FILE:
                    url = document.attachment_url
                    if url is None:
                        raise AttachmentNotFound(f"No url in the front-matter of {document.path}")

                insertion = InsertionSink(sink, cursor)
                run.anchor = insertion.anchor
                self._enter(run, PipelineState.INVOKING)
                if mode is not GenerationMode.STREAM:
                    progress = self.notifier.progress(PROGRESS_NOTICE)

                fragments = self._fragments(mode, run.prompt, url)
                if mode is GenerationMode.STREAM:
                    self._enter(run, PipelineState.STREAMING_INSERTION)
                else:
                    self._enter(run, PipelineState.SINGLE_INSERTION)
                for fragment in fragments:
                    insertion.append(fragment)

                self._dismiss(progress)
                self._enter(run, PipelineState.DONE)
            except NotePromptError as e:
                self._dismiss(progress)
                run.error = e
                self._enter(run, PipelineState.ABORTED)
                logger.error("Generation with template '%s' aborted: %s", template_name, e)
                self.notifier.notice(e.notice)
            finally:
                if insertion is not None:
                    run.fragments = list(insertion.fragments)
            return run

    def _fragments(self, mode: GenerationMode, prompt: str, url: Optional[str]) -> Iterator[str]:
        """Return the reply as a finite, single-use sequence of fragments."""
        if mode is GenerationMode.STREAM:
            return self.client.stream(prompt)
        if mode is GenerationMode.FILE:
            return iter([self.client.complete_with_file(url, prompt)])
        return iter([self.client.complete(prompt)])

    @staticmethod
    def _dismiss(progress: Optional[ProgressNotice]) -> None:
        if progress is not None:
            progress.dismiss()

    @staticmethod
    def _enter(run: PipelineRun, state: PipelineState) -> None:
        logger.debug("Run '%s': %s -> %s", run.template_name, run.state.value, state.value)
        run.state = state
        run.transitions.append(state)
