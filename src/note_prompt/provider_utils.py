"""
Provider registry for Note-Prompt.

Lists the supported LLM providers with their default model, example models,
API base URL and the environment variable their API key is read from.
"""

from typing import Dict, List, Optional

OPENAI_MODELS = ["gpt-5-nano", "gpt-5-mini", "gpt-5", "gpt-4.1-mini", "gpt-4o-mini"]
ANTHROPIC_MODELS = ["claude-opus-4-1-20250805", "claude-sonnet-4-20250514", "claude-3-5-haiku-latest"]
GEMINI_MODELS = ["gemini-2.5-flash", "gemini-2.5-pro"]
NIM_MODELS = ["meta/llama3-70b-instruct", "meta/llama-3.1-8b-instruct"]

DEFAULT_PROVIDER = "openai"

_PROVIDER_MODELS: Dict[str, List[str]] = {
    "openai": OPENAI_MODELS,
    "anthropic": ANTHROPIC_MODELS,
    "gemini": GEMINI_MODELS,
    "nim": NIM_MODELS,
}

_BASE_URLS: Dict[str, Optional[str]] = {
    "openai": None,  # Uses default OpenAI base URL
    "anthropic": None,  # Uses default Anthropic base URL
    "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
    "nim": "https://integrate.api.nvidia.com/v1",
}

_API_KEY_ENV_VARS: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GOOGLE_API_KEY",
    "nim": "NVIDIA_API_KEY",
}

# Providers that accept an attachment URL next to the prompt text
_FILE_ATTACHMENT_PROVIDERS = frozenset(["openai", "anthropic"])

# Anthropic requires an explicit output limit
DEFAULT_MAX_TOKENS = 4096


def get_supported_providers() -> List[str]:
    return list(_PROVIDER_MODELS)


def get_available_models() -> Dict[str, List[str]]:
    return {provider: list(models) for provider, models in _PROVIDER_MODELS.items()}


def get_default_model(provider: str) -> str:
    """Return the model used when the settings record names none."""
    _check_provider(provider)
    return _PROVIDER_MODELS[provider][0]


def get_base_url(provider: str) -> Optional[str]:
    _check_provider(provider)
    return _BASE_URLS[provider]


def get_api_key_env_var(provider: str) -> str:
    _check_provider(provider)
    return _API_KEY_ENV_VARS[provider]


def supports_file_attachments(provider: str) -> bool:
    return provider in _FILE_ATTACHMENT_PROVIDERS


def _check_provider(provider: str) -> None:
    if provider not in _PROVIDER_MODELS:
        raise ValueError(
            f"Unsupported provider '{provider}'. "
            f"Choose one of: {', '.join(get_supported_providers())}"
        )
