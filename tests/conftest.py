"""
Pytest configuration and fixtures for Note-Prompt tests.

Provides a temporary vault with prompt templates and notes, plus in-memory
fakes for the model client, the notifier and the text sink so the pipeline can
be exercised without a network or an editor.
"""

import logging
from typing import Iterator, List, Optional

import pytest

from note_prompt.client import ModelClient
from note_prompt.config import Settings
from note_prompt.documents import Position, load_document
from note_prompt.errors import ModelInvocationFailed
from note_prompt.insertion import TextSink
from note_prompt.pipeline import Notifier, ProgressNotice, PromptPipeline
from note_prompt.prompts import VaultTemplateStore


class FakeModelClient(ModelClient):
    """Model client returning canned replies and recording its calls."""

    def __init__(
        self,
        reply: str = "A short summary.",
        fragments: Optional[List[str]] = None,
        error: Optional[Exception] = None,
        fail_after: Optional[int] = None,
    ):
        self.reply = reply
        self.fragments = fragments if fragments is not None else ["A ", "short ", "summary."]
        self.error = error
        self.fail_after = fail_after
        self.calls: List[tuple] = []

    def complete(self, prompt: str) -> str:
        self.calls.append(("complete", prompt))
        if self.error is not None:
            raise self.error
        return self.reply

    def stream(self, prompt: str) -> Iterator[str]:
        self.calls.append(("stream", prompt))
        for i, fragment in enumerate(self.fragments):
            if self.error is not None and self.fail_after == i:
                raise self.error
            yield fragment
        if self.error is not None and self.fail_after is None:
            raise self.error

    def complete_with_file(self, url: str, prompt: str) -> str:
        self.calls.append(("complete_with_file", url, prompt))
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingProgress(ProgressNotice):
    def __init__(self, message: str):
        self.message = message
        self.dismissed = False

    def dismiss(self) -> None:
        self.dismissed = True


class RecordingNotifier(Notifier):
    def __init__(self):
        self.notices: List[str] = []
        self.progress_notices: List[RecordingProgress] = []

    def notice(self, message: str) -> None:
        self.notices.append(message)

    def progress(self, message: str) -> ProgressNotice:
        progress = RecordingProgress(message)
        self.progress_notices.append(progress)
        return progress


class RecordingSink(TextSink):
    """Text sink remembering every insert call."""

    def __init__(self):
        self.inserts: List[tuple] = []

    def insert(self, position: Position, text: str) -> None:
        self.inserts.append((Position(position.line, position.ch), text))


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by the CLI so later tests do not log to a closed stream."""
    yield
    logging.getLogger("note_prompt").handlers.clear()


@pytest.fixture
def vault(tmp_path):
    """A vault with a prompt folder, a nested template and one note."""
    prompt_dir = tmp_path / "_prompt"
    (prompt_dir / "writing").mkdir(parents=True)
    (prompt_dir / "Summarize.md").write_text("Summarize: {title}", encoding="utf-8")
    (prompt_dir / "Translate.md").write_text(
        "Translate « {title} » into French.\nKeep {date} as is.\n", encoding="utf-8"
    )
    (prompt_dir / "writing" / "Outline.md").write_text("Outline {title} in 5 bullets", encoding="utf-8")
    (prompt_dir / "notes.txt").write_text("not a template", encoding="utf-8")

    (tmp_path / "Notes.md").write_text("# Notes\n", encoding="utf-8")
    (tmp_path / "Paper.md").write_text(
        "---\nurl: https://example.com/paper.pdf\ntags: [reading]\n---\n# Paper\n", encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def note(vault):
    return load_document(vault / "Notes.md")


@pytest.fixture
def paper(vault):
    return load_document(vault / "Paper.md")


@pytest.fixture
def settings():
    return Settings(api_key="test-api-key-12345")


@pytest.fixture
def fake_client():
    return FakeModelClient()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def pipeline(vault, fake_client, notifier, settings):
    return PromptPipeline(
        store=VaultTemplateStore(vault),
        client=fake_client,
        notifier=notifier,
        settings=settings,
    )


@pytest.fixture
def model_failure():
    return ModelInvocationFailed("Rate limit reached", provider="openai", status_code=429)


@pytest.fixture
def mock_environment_variables(monkeypatch):
    """Mock environment variables to avoid requiring real API keys."""
    test_keys = {
        "OPENAI_API_KEY": "test-openai-key",
        "ANTHROPIC_API_KEY": "test-anthropic-key",
        "GOOGLE_API_KEY": "test-google-key",
        "NVIDIA_API_KEY": "test-nvidia-key",
    }

    for key, value in test_keys.items():
        monkeypatch.setenv(key, value)

    return test_keys
