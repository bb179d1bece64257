"""Environment-driven configuration."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_AI_ENDPOINT = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_AI_MODEL = "google/gemini-2.5-flash"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the store, the AI gateway and logging."""

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    ai_api_key: Optional[str] = None
    ai_endpoint: str = DEFAULT_AI_ENDPOINT
    ai_model: str = DEFAULT_AI_MODEL
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Read settings from the environment. Missing values stay None."""
        env = os.environ if environ is None else environ
        return cls(
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_key=env.get("SUPABASE_SERVICE_ROLE_KEY") or None,
            ai_api_key=env.get("LOVABLE_API_KEY") or None,
            ai_endpoint=env.get("STUDYROOM_AI_ENDPOINT") or DEFAULT_AI_ENDPOINT,
            ai_model=env.get("STUDYROOM_AI_MODEL") or DEFAULT_AI_MODEL,
            log_level=env.get("STUDYROOM_LOG_LEVEL") or "INFO",
            log_file=env.get("STUDYROOM_LOG_FILE") or None,
        )

    def require_store_credentials(self) -> tuple[str, str]:
        """Return (url, key) for the hosted store.

        Raises:
            ConfigurationError: If either value is missing.
        """
        if not self.supabase_url or not self.supabase_key:
            raise ConfigurationError("Missing Supabase configuration")
        return self.supabase_url, self.supabase_key

    def require_ai_key(self) -> str:
        if not self.ai_api_key:
            raise ConfigurationError("LOVABLE_API_KEY is not configured")
        return self.ai_api_key
