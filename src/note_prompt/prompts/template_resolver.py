"""
Template resolution for Note-Prompt.

Loads a template from a ``TemplateStore`` and substitutes the placeholder
tokens with values from the active note. Templates are re-read on every call;
nothing is cached, so edits to a prompt file apply to the next run.
"""

import re
from typing import Any, Dict, List, Optional

from .. import get_logger
from ..errors import NoActiveDocument, PromptFolderNotFound
from .constants import TEMPLATE_TOKENS
from .template_store import TemplateStore

logger = get_logger(__name__)

_TOKEN_PATTERN = re.compile("|".join(re.escape(token) for token in TEMPLATE_TOKENS))


def substitute_variables(content: str, variables: Dict[str, Any]) -> str:
    """Substitute the known ``{token}`` placeholders in a template body.

    Every occurrence of each known token is replaced in a single pass, so a
    substituted value that itself contains a token is left as is. Tokens
    without a value in ``variables`` and unknown tokens stay verbatim.

    Args:
        content: Template body with placeholders
        variables: Mapping of context names (e.g. ``title``) to values

    Returns:
        Content with placeholders substituted
    """

    def replace(match: "re.Match[str]") -> str:
        key = TEMPLATE_TOKENS[match.group(0)]
        if key not in variables or variables[key] is None:
            return match.group(0)
        return str(variables[key])

    return _TOKEN_PATTERN.sub(replace, content)


def resolve_template(store: TemplateStore, folder: str, name: str, title: Optional[str]) -> str:
    """Load template ``name`` from ``folder`` and fill in the note title.

    Args:
        store: Store to read the template from
        folder: Prompt folder relative to the store root
        name: Template name (without extension)
        title: Base name of the active note, ``None`` when no note is open

    Returns:
        The substituted prompt text

    Raises:
        TemplateNotFound: If the template does not exist
        NoActiveDocument: If no note is open
    """
    body = store.read(folder, name)
    if title is None:
        raise NoActiveDocument()

    prompt = substitute_variables(body, {"title": title})
    logger.debug("Resolved template %s: %s", name, prompt)
    return prompt


def list_templates(store: TemplateStore, folder: str, notifier: Optional[Any] = None) -> List[str]:
    """List template names, returning an empty list if the folder is missing.

    A missing folder is reported through ``notifier`` instead of raising, so a
    picker built on this list still opens with zero choices.
    """
    try:
        names = store.list(folder)
    except PromptFolderNotFound as e:
        logger.warning("%s", e)
        if notifier is not None:
            notifier.notice(e.notice)
        return []

    logger.debug("Found %d templates in %s", len(names), folder)
    return names
