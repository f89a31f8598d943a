#!/usr/bin/env python3
"""
LLMConfig - Provider configuration for semantic link extraction

Supports:
- openai/gpt-3.5-turbo (default), openai/gpt-4o-mini, ...
- anthropic/claude-3-haiku-20240307
- groq/llama3-70b-8192
- deepseek/deepseek-chat

Usage:
    llm_config = LLMConfig(provider="openai/gpt-4o-mini", api_token="sk-...")
    llm_config = LLMConfig(provider="anthropic/claude-3-haiku-20240307")  # Uses env var
    llm_config = LLMConfig(provider="groq/llama3-70b-8192", api_token="env:MY_GROQ_KEY")
"""

import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError


# Provider to environment variable mapping
PROVIDER_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "groq": "GROQ_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
}

# Provider to base URL mapping
PROVIDER_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "anthropic": "https://api.anthropic.com",
    "groq": "https://api.groq.com/openai/v1",
    "deepseek": "https://api.deepseek.com/v1",
}

# Default models per provider
DEFAULT_MODELS = {
    "openai": "gpt-3.5-turbo",
    "anthropic": "claude-3-haiku-20240307",
    "groq": "llama3-70b-8192",
    "deepseek": "deepseek-chat",
}


@dataclass
class LLMConfig:
    """
    LLM provider configuration.

    Parameters:
        provider: Format "provider/model" e.g. "openai/gpt-3.5-turbo"
        api_token: Optional. If not provided, reads from environment variable based on provider.
                   Can also use "env:VAR_NAME" format to specify custom env var.
        base_url: Optional. Custom API endpoint for the provider.
        temperature: LLM temperature (0.0-1.0)
        max_tokens: Maximum tokens to generate
        timeout: Request timeout in seconds
    """
    provider: str = "openai/gpt-3.5-turbo"
    api_token: Optional[str] = None
    base_url: Optional[str] = None
    temperature: float = 0.1
    max_tokens: int = 2000
    timeout: int = 60

    def __post_init__(self):
        parts = self.provider.split("/", 1)
        self._provider_name = parts[0].lower()
        self._model_name = parts[1] if len(parts) > 1 else DEFAULT_MODELS.get(self._provider_name, "")
        self._resolved_token = self._resolve_api_token()
        if self.base_url is None:
            self.base_url = PROVIDER_BASE_URLS.get(self._provider_name)

    def _resolve_api_token(self) -> Optional[str]:
        """Resolve API token from various sources."""
        if self.api_token is None:
            env_var = PROVIDER_ENV_VARS.get(self._provider_name)
            if env_var:
                return os.getenv(env_var) or None
            return None

        if self.api_token.startswith("env:"):
            return os.getenv(self.api_token[4:].strip()) or None

        return self.api_token or None

    @property
    def provider_name(self) -> str:
        return self._provider_name

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def resolved_api_token(self) -> Optional[str]:
        return self._resolved_token

    @property
    def is_configured(self) -> bool:
        """True when the provider is known and a credential is available."""
        return self._provider_name in PROVIDER_ENV_VARS and bool(self._resolved_token)

    def validate(self) -> None:
        if self._provider_name not in PROVIDER_ENV_VARS:
            raise ValueError(
                f"Unknown provider: {self._provider_name}. "
                f"Supported: {', '.join(PROVIDER_ENV_VARS)}"
            )
        if not self._resolved_token:
            raise ConfigurationError(
                f"API token required for {self._provider_name}. "
                f"Set {PROVIDER_ENV_VARS[self._provider_name]} or pass api_token"
            )

    @classmethod
    def from_settings(cls, provider: str, api_token: Optional[str] = None) -> 'LLMConfig':
        return cls(provider=provider, api_token=api_token)
