"""
LLM client for Note-Prompt.

This module provides the ModelClient interface the generation pipeline talks to
and NotePromptClient, its multi-provider implementation.

Features:
- Plain completions returning the whole reply at once
- Streaming completions yielding text fragments in arrival order
- File-augmented completions sending an attachment URL next to the prompt
- Multiple model provider support (OpenAI, Anthropic, Gemini, NIM)
- Provider SDK errors translated into ModelInvocationFailed
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

import openai

from . import get_logger
from .config import Settings
from .errors import ModelInvocationFailed
from .provider_utils import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_PROVIDER,
    get_api_key_env_var,
    get_base_url,
    get_default_model,
    supports_file_attachments,
)

logger = get_logger(__name__)


class ModelClient(ABC):
    """Capability to send a prompt to an LLM and receive text."""

    @abstractmethod
    def complete(self, prompt: str) -> str:
        """Return the whole reply to ``prompt``."""

    @abstractmethod
    def stream(self, prompt: str) -> Iterator[str]:
        """Yield the reply to ``prompt`` as text fragments, in order."""

    @abstractmethod
    def complete_with_file(self, url: str, prompt: str) -> str:
        """Return the reply to ``prompt`` with the file at ``url`` attached."""


@dataclass
class NotePromptClient(ModelClient):
    """Multi-provider LLM client."""

    provider: str = DEFAULT_PROVIDER
    model: str = get_default_model(DEFAULT_PROVIDER)
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    max_tokens: int = DEFAULT_MAX_TOKENS
    _client: Any = field(default=None, init=False, repr=False)

    def _get_provider_client(self) -> Any:
        """Create the provider-specific client on first use."""
        if self._client is not None:
            return self._client

        if not self.api_key:
            raise ModelInvocationFailed(
                f"No API key provided. Set {get_api_key_env_var(self.provider)} "
                "or configure one with: note-prompt config set-api-key",
                provider=self.provider,
            )

        if self.provider == "anthropic":
            try:
                import anthropic
            except ImportError:
                raise ModelInvocationFailed(
                    "Anthropic provider requires 'anthropic' package. "
                    "Install with: pip install 'note-prompt[anthropic]'",
                    provider=self.provider,
                )
            self._client = anthropic.Anthropic(api_key=self.api_key)
        else:
            # OpenAI and OpenAI-compatible providers (gemini, nim)
            self._client = openai.OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _api_error_types(self) -> tuple:
        if self.provider == "anthropic":
            try:
                import anthropic
            except ImportError:
                return (openai.APIError,)
            return (openai.APIError, anthropic.APIError)
        return (openai.APIError,)

    @contextmanager
    def _provider_errors(self) -> Iterator[None]:
        """Translate provider SDK errors into ModelInvocationFailed."""
        try:
            yield
        except ModelInvocationFailed:
            raise
        except self._api_error_types() as e:
            logger.debug("Provider %s request failed: %r", self.provider, e)
            raise ModelInvocationFailed(
                getattr(e, "message", None) or str(e),
                provider=self.provider,
                status_code=getattr(e, "status_code", None),
            ) from e

    def _build_input(self, prompt: str, url: Optional[str] = None) -> Any:
        """Build the provider-specific user message."""
        if url is None:
            if self.provider == "openai":
                return prompt
            return [{"role": "user", "content": prompt}]

        if not supports_file_attachments(self.provider):
            raise ModelInvocationFailed(
                "File attachments are not supported by this provider", provider=self.provider
            )
        if self.provider == "anthropic":
            content = [
                {"type": "document", "source": {"type": "url", "url": url}},
                {"type": "text", "text": prompt},
            ]
        else:
            content = [
                {"type": "input_file", "file_url": url},
                {"type": "input_text", "text": prompt},
            ]
        return [{"role": "user", "content": content}]

    def _make_provider_request(self, request_input: Any, stream: bool = False) -> Any:
        """Make provider-specific API request."""
        client = self._get_provider_client()
        logger.debug("Making request with provider: %s, model: %s, stream: %s",
                      self.provider, self.model, stream)

        if self.provider == "anthropic":
            request_params = {
                "model": self.model,
                "max_tokens": self.max_tokens,
                "messages": request_input,
            }
            if stream:
                return client.messages.stream(**request_params)
            return client.messages.create(**request_params)
        elif self.provider == "openai":
            return client.responses.create(model=self.model, input=request_input, stream=stream)
        else:
            # OpenAI-compatible chat completions endpoints
            return client.chat.completions.create(
                model=self.model, messages=request_input, stream=stream
            )

    def _extract_response_content(self, response: Any) -> str:
        """Extract the reply text from a provider-specific response."""
        if self.provider == "anthropic":
            content = "".join(
                block.text for block in (response.content or []) if getattr(block, "type", None) == "text"
            )
        elif self.provider == "openai":
            content = getattr(response, "output_text", None) or ""
        else:
            if hasattr(response, "choices") and len(response.choices) > 0:
                content = response.choices[0].message.content or ""
            else:
                content = ""

        if not content:
            raise ModelInvocationFailed("No content in response", provider=self.provider)
        return content

    def _get_usage_info(self, response: Any) -> dict[str, int]:
        """Extract usage information from provider-specific response."""
        usage = getattr(response, "usage", None)
        if not usage:
            return {"prompt_tokens": 0, "completion_tokens": 0}
        if self.provider in ("anthropic", "openai"):
            return {"prompt_tokens": usage.input_tokens, "completion_tokens": usage.output_tokens}
        return {"prompt_tokens": usage.prompt_tokens, "completion_tokens": usage.completion_tokens}

    def _complete(self, request_input: Any) -> str:
        with self._provider_errors():
            response = self._make_provider_request(request_input)
            content = self._extract_response_content(response)
        usage = self._get_usage_info(response)
        logger.debug("Used tokens: input=%s output=%s", usage["prompt_tokens"], usage["completion_tokens"])
        return content

    def complete(self, prompt: str) -> str:
        return self._complete(self._build_input(prompt))

    def complete_with_file(self, url: str, prompt: str) -> str:
        return self._complete(self._build_input(prompt, url=url))

    def stream(self, prompt: str) -> Iterator[str]:
        request_input = self._build_input(prompt)
        with self._provider_errors():
            if self.provider == "anthropic":
                with self._make_provider_request(request_input, stream=True) as message_stream:
                    for text in message_stream.text_stream:
                        yield text
            elif self.provider == "openai":
                for event in self._make_provider_request(request_input, stream=True):
                    if event.type == "response.output_text.delta":
                        yield event.delta
                    elif event.type == "error":
                        raise ModelInvocationFailed(
                            getattr(event, "message", None) or "Stream error", provider=self.provider
                        )
                    elif event.type == "response.failed":
                        error = getattr(event.response, "error", None)
                        raise ModelInvocationFailed(
                            getattr(error, "message", None) or "Response failed", provider=self.provider
                        )
            else:
                for chunk in self._make_provider_request(request_input, stream=True):
                    if chunk.choices and chunk.choices[0].delta.content is not None:
                        yield chunk.choices[0].delta.content


def get_model_client(settings: Settings) -> NotePromptClient:
    """Create the client for the provider and model named in ``settings``."""
    return NotePromptClient(
        provider=settings.provider,
        model=settings.model_name,
        api_key=settings.resolve_api_key(),
        base_url=get_base_url(settings.provider),
    )
