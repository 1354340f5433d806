"""
Constants for the Note-Prompt template system.

This module defines the template file extension, the default prompt folder and
the placeholder tokens recognised during substitution.
"""

TEMPLATE_EXTENSION = ".md"
DEFAULT_PROMPT_FOLDER = "_prompt"

# Token -> name of the invocation-context value it is replaced with
TITLE_TOKEN = "{title}"
TEMPLATE_TOKENS = {TITLE_TOKEN: "title"}
