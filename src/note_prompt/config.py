"""
Persisted settings for Note-Prompt.

Settings are stored as a YAML mapping. Missing fields fall back to their
defaults once, when the record is loaded; saving writes the record exactly as
it is held in memory, so an emptied field stays empty.
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from . import get_logger
from .prompts.constants import DEFAULT_PROMPT_FOLDER
from .provider_utils import DEFAULT_PROVIDER, get_api_key_env_var, get_default_model

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = ".note-prompt.yml"


@dataclass
class Settings:
    """Settings passed into each generation run."""

    api_key: str = ""
    prompt_folder: str = DEFAULT_PROMPT_FOLDER
    model_name: str = get_default_model(DEFAULT_PROVIDER)
    provider: str = DEFAULT_PROVIDER

    def resolve_api_key(self) -> Optional[str]:
        """Return the configured API key, or the provider's environment variable."""
        if self.api_key:
            return self.api_key
        return os.environ.get(get_api_key_env_var(self.provider)) or None


def default_settings(provider: str = DEFAULT_PROVIDER) -> Dict[str, Any]:
    return {
        "api_key": "",
        "prompt_folder": DEFAULT_PROMPT_FOLDER,
        "model_name": get_default_model(provider),
        "provider": provider,
    }


def load_settings(path: Union[str, Path]) -> Settings:
    """Load settings from ``path``, applying defaults for absent fields.

    A missing file yields the defaults. Unknown keys are ignored.
    """
    path = Path(path)
    stored: Dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            stored = data
        elif data is not None:
            logger.warning("Invalid settings file format in %s, using defaults.", path)

    provider = stored.get("provider") or DEFAULT_PROVIDER
    merged = {**default_settings(provider), **stored}
    known = {f.name for f in fields(Settings)}
    settings = Settings(**{k: "" if v is None else str(v) for k, v in merged.items() if k in known})
    logger.debug("Loaded settings from %s (provider=%s, model=%s)", path, settings.provider, settings.model_name)
    return settings


def save_settings(settings: Settings, path: Union[str, Path]) -> None:
    """Write ``settings`` to ``path`` as-is."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(asdict(settings), f, sort_keys=False)
    logger.debug("Saved settings to %s", path)
