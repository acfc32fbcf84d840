"""
Application configuration and environment variables
"""
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

from app.core.exceptions import ConfigurationError

# Load environment variables
load_dotenv()


def parse_timeout(raw: str) -> Optional[float]:
    """
    Parse UPSTREAM_TIMEOUT_SECONDS (unset or blank means no timeout)

    Raises:
        ConfigurationError if the value is not a positive number
    """
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(f"UPSTREAM_TIMEOUT_SECONDS must be a number, got '{raw}'") from None
    if timeout <= 0:
        raise ConfigurationError(f"UPSTREAM_TIMEOUT_SECONDS must be positive, got {timeout}")
    return timeout


@dataclass(frozen=True)
class InferenceConfig:
    """Explicit upstream configuration handed to the inference client at startup"""
    provider: str
    api_key: str
    model: str
    api_url: str
    api_version: str
    timeout_seconds: Optional[float]


class Settings:
    """Application settings loaded from environment variables"""

    # Upstream provider: "anthropic" or "openai"
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "anthropic").strip().lower()

    # Anthropic Messages API
    ANTHROPIC_API_KEY: str = os.getenv("CLAUDE_API_KEY") or os.getenv("ANTHROPIC_API_KEY", "")
    ANTHROPIC_MODEL: str = os.getenv("ANTHROPIC_MODEL", "claude-haiku-4-5")
    ANTHROPIC_API_URL: str = os.getenv("ANTHROPIC_API_URL", "https://api.anthropic.com/v1/messages")
    ANTHROPIC_VERSION: str = os.getenv("ANTHROPIC_VERSION", "2023-06-01")

    # OpenAI
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o")

    # Unset keeps the upstream call bounded only by the hosting environment
    UPSTREAM_TIMEOUT_SECONDS: str = os.getenv("UPSTREAM_TIMEOUT_SECONDS", "")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def inference_config(self) -> InferenceConfig:
        """
        Snapshot the upstream settings for the selected provider

        Raises:
            ConfigurationError if UPSTREAM_TIMEOUT_SECONDS is malformed
        """
        timeout_seconds = parse_timeout(self.UPSTREAM_TIMEOUT_SECONDS)
        if self.LLM_PROVIDER == "openai":
            return InferenceConfig(
                provider="openai",
                api_key=self.OPENAI_API_KEY,
                model=self.OPENAI_MODEL,
                api_url="",
                api_version="",
                timeout_seconds=timeout_seconds,
            )
        return InferenceConfig(
            provider=self.LLM_PROVIDER,
            api_key=self.ANTHROPIC_API_KEY,
            model=self.ANTHROPIC_MODEL,
            api_url=self.ANTHROPIC_API_URL,
            api_version=self.ANTHROPIC_VERSION,
            timeout_seconds=timeout_seconds,
        )


# Create a global settings instance
settings = Settings()
