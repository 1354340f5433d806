#!/usr/bin/env python3
"""
Command line interface for Note-Prompt.

Provides the "Generate Text" and "Generate Text with File" commands against a
vault directory, a template listing, and the settings commands.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__, get_logger, setup_logging
from .client import get_model_client
from .config import DEFAULT_CONFIG_FILE, Settings, load_settings, save_settings
from .documents import Position, TextBuffer, load_document
from .errors import (
    ModelInvocationFailed,
    NoActiveDocument,
    PromptFolderNotFound,
    TemplateNotFound,
)
from .pipeline import GenerationMode, Notifier, PipelineRun, ProgressNotice, PromptPipeline
from .prompts import VaultTemplateStore

logger = get_logger(__name__)


class ClickProgressNotice(ProgressNotice):
    def __init__(self, message: str):
        self.message = message
        click.secho(message, err=True, fg="cyan")

    def dismiss(self) -> None:
        logger.debug("Dismissed notice: %s", self.message)


class ClickNotifier(Notifier):
    """Notices written to stderr."""

    def notice(self, message: str) -> None:
        click.secho(message, err=True, fg="yellow")

    def progress(self, message: str) -> ProgressNotice:
        return ClickProgressNotice(message)


def _exit_code(run: PipelineRun) -> int:
    if run.succeeded:
        return 0
    if isinstance(run.error, (TemplateNotFound, NoActiveDocument, PromptFolderNotFound)):
        return 1
    if isinstance(run.error, ModelInvocationFailed):
        return 3
    return 4


def _parse_position(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[Position]:
    if value is None:
        return None
    try:
        return Position.parse(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


class _Context:
    def __init__(self, vault: Path, config_path: Path):
        self.vault = vault
        self.config_path = config_path
        self.settings = load_settings(config_path)

    def pipeline(self) -> PromptPipeline:
        return PromptPipeline(
            store=VaultTemplateStore(self.vault),
            client=get_model_client(self.settings),
            notifier=ClickNotifier(),
            settings=self.settings,
        )


pass_context = click.make_pass_decorator(_Context)


@click.group()
@click.option(
    "--vault",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Root directory of the notes",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Settings file (default: <vault>/{DEFAULT_CONFIG_FILE})",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.version_option(__version__, prog_name="note-prompt")
@click.pass_context
def main(ctx: click.Context, vault: Path, config_path: Optional[Path], verbose: bool) -> None:
    """Fill prompt templates from a note and insert the LLM reply into it."""
    setup_logging(verbose)
    if config_path is None:
        config_path = vault / DEFAULT_CONFIG_FILE
    try:
        ctx.obj = _Context(vault, config_path)
    except ValueError as e:
        logger.error("Error: %s", e)
        sys.exit(4)


@main.command("list")
@pass_context
def list_command(obj: _Context) -> None:
    """List the available prompt templates."""
    for name in obj.pipeline().list_templates():
        click.echo(name)


def _generate(obj: _Context, note: Path, template: Optional[str], at: Optional[Position],
              mode: GenerationMode) -> None:
    pipeline = obj.pipeline()
    if template is None:
        choices = pipeline.list_templates()
        if not choices:
            pipeline.notifier.notice("No prompt templates found")
            sys.exit(1)
        template = click.prompt("Prompt", type=click.Choice(choices))

    document = load_document(note)
    buffer = TextBuffer.from_document(document)
    cursor = at or buffer.end_position()

    try:
        run = pipeline.run(template, document, buffer, cursor, mode=mode)
    finally:
        # Text inserted before a failure is kept
        if buffer.text != document.text:
            buffer.save(note)
            logger.info("Saved generated text into %s", note)
    sys.exit(_exit_code(run))


_note_argument = click.argument(
    "note", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
_template_argument = click.argument("template", required=False)
_at_option = click.option(
    "--at",
    callback=_parse_position,
    metavar="LINE:CH",
    help="Zero-based cursor position to insert at (default: end of note)",
)


@main.command()
@_note_argument
@_template_argument
@_at_option
@click.option("--stream/--no-stream", default=True, show_default=True, help="Stream the reply")
@pass_context
def generate(obj: _Context, note: Path, template: Optional[str], at: Optional[Position],
             stream: bool) -> None:
    """Generate Text: fill TEMPLATE from NOTE and insert the reply.

    TEMPLATE: Name of the prompt template (chosen interactively if omitted)
    """
    mode = GenerationMode.STREAM if stream else GenerationMode.COMPLETE
    _generate(obj, note, template, at, mode)


@main.command("generate-with-file")
@_note_argument
@_template_argument
@_at_option
@pass_context
def generate_with_file(obj: _Context, note: Path, template: Optional[str],
                       at: Optional[Position]) -> None:
    """Generate Text with File: attach the note's front-matter url to the prompt.

    TEMPLATE: Name of the prompt template (chosen interactively if omitted)
    """
    _generate(obj, note, template, at, GenerationMode.FILE)


@main.group()
def config() -> None:
    """Show or edit the persisted settings."""


@config.command("show")
@pass_context
def config_show(obj: _Context) -> None:
    """Show the current settings (the API key is masked)."""
    settings = obj.settings
    api_key = settings.api_key
    masked = f"{api_key[:3]}...{api_key[-4:]}" if len(api_key) > 8 else ("***" if api_key else "")
    click.echo(f"API key: {masked}")
    click.echo(f"Model name: {settings.model_name}")


def _update(obj: _Context, **changes: str) -> None:
    settings: Settings = obj.settings
    for name, value in changes.items():
        setattr(settings, name, value)
    save_settings(settings, obj.config_path)
    click.echo(f"Saved settings to {obj.config_path}")


@config.command("set-api-key")
@click.argument("value")
@pass_context
def config_set_api_key(obj: _Context, value: str) -> None:
    """Set the API key used for the LLM."""
    _update(obj, api_key=value)


@config.command("set-model")
@click.argument("value")
@pass_context
def config_set_model(obj: _Context, value: str) -> None:
    """Set the model to use for the LLM."""
    _update(obj, model_name=value)


if __name__ == "__main__":
    main()
