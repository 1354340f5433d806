"""
Note-Prompt template system.

Prompt templates are Markdown files kept in a folder of the vault (``_prompt``
by default). A template body may contain ``{title}``, which is replaced with
the base name of the active note when the template is resolved.
"""

from .constants import DEFAULT_PROMPT_FOLDER, TEMPLATE_EXTENSION, TEMPLATE_TOKENS, TITLE_TOKEN
from .template_resolver import list_templates, resolve_template, substitute_variables
from .template_store import StoreConfig, TemplateStore, VaultTemplateStore

__all__ = [
    # Template functions
    "resolve_template",
    "list_templates",
    "substitute_variables",
    # Classes
    "TemplateStore",
    "VaultTemplateStore",
    "StoreConfig",
    # Constants
    "DEFAULT_PROMPT_FOLDER",
    "TEMPLATE_EXTENSION",
    "TEMPLATE_TOKENS",
    "TITLE_TOKEN",
]
