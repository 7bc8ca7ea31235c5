"""User settings: credential, model and response language."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from sgit.llm.client import DEFAULT_BASE_URL, DEFAULT_MODEL

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "sgit" / "config.json"
DEFAULT_LANGUAGE = "en"

LANGUAGES = {
    "en": "English",
    "ko": "Korean (한국어)",
    "ja": "Japanese (日本語)",
    "zh": "Chinese (中文)",
    "es": "Spanish (Español)",
    "fr": "French (Français)",
    "de": "German (Deutsch)",
}

ENV_OVERRIDES = {
    "UPSTAGE_API_KEY": "upstage_api_key",
    "UPSTAGE_MODEL_NAME": "upstage_model_name",
    "UPSTAGE_BASE_URL": "upstage_base_url",
    "SGIT_LANGUAGE": "language",
}


class Settings(BaseModel):
    """Runtime configuration, built once at startup.

    Field aliases are the keys used in the config file.
    """

    api_key: Optional[str] = Field(default=None, alias="upstage_api_key")
    model_name: str = Field(default=DEFAULT_MODEL, alias="upstage_model_name")
    language: str = DEFAULT_LANGUAGE
    base_url: str = Field(default=DEFAULT_BASE_URL, alias="upstage_base_url")

    model_config = {"populate_by_name": True}

    @field_validator("api_key", mode="before")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank keys as missing."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("model_name", mode="before")
    @classmethod
    def validate_model_name(cls, v: Optional[str]) -> str:
        v = (v or "").strip()
        return v or DEFAULT_MODEL

    @field_validator("base_url", mode="before")
    @classmethod
    def validate_base_url(cls, v: Optional[str]) -> str:
        v = (v or "").strip()
        return v or DEFAULT_BASE_URL

    @field_validator("language", mode="before")
    @classmethod
    def validate_language(cls, v: Optional[str]) -> str:
        return (v or DEFAULT_LANGUAGE).strip().lower() or DEFAULT_LANGUAGE

    @property
    def has_api_key(self) -> bool:
        return self.api_key is not None

    @property
    def masked_api_key(self) -> str:
        """The key with everything after the first three characters hidden."""
        if not self.api_key:
            return ""
        return self.api_key[:3] + "*" * max(len(self.api_key) - 3, 0)

    def to_file_dict(self) -> dict:
        return self.model_dump(by_alias=True)


def resolve_language(flag: Optional[str], configured: str = DEFAULT_LANGUAGE) -> tuple[str, Optional[str]]:
    """Pick the response language.

    Args:
        flag: Value of ``--lang``, if given. Takes precedence.
        configured: Language from the settings.

    Returns:
        Tuple of (language code, warning). The warning is set when the flag
        names an unsupported language; the code then falls back to English.
    """
    if flag:
        code = flag.strip().lower()
        if code in LANGUAGES:
            return code, None
        return DEFAULT_LANGUAGE, f"Invalid language code '{flag}'. Using default '{DEFAULT_LANGUAGE}'."

    if configured in LANGUAGES:
        return configured, None
    logger.warning(f"Unsupported language '{configured}' in configuration, using English")
    return DEFAULT_LANGUAGE, None


def language_name(code: str) -> Optional[str]:
    """Display name used in the response directive. ``None`` for English."""
    if code == DEFAULT_LANGUAGE:
        return None
    return LANGUAGES.get(code)


class SettingsStore:
    """Loads and saves settings as JSON.

    Environment variables override file values at load time; they are never
    written back.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path).expanduser() if path else DEFAULT_CONFIG_PATH

    def read_file(self) -> dict:
        """Raw key/value pairs from the config file, or ``{}`` if unusable."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable config file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.path}: expected a JSON object")
            return {}
        return data

    def load(self, apply_env: bool = True) -> Settings:
        """Build settings from the file, then environment overrides.

        Args:
            apply_env: Whether environment variables override file values.
        """
        data = self.read_file()
        if apply_env:
            for env_name, key in ENV_OVERRIDES.items():
                value = os.environ.get(env_name)
                if value:
                    data[key] = value
        try:
            return Settings.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid settings in {self.path}: {e.error_count()} error(s)")
            return Settings()

    def save(self, settings: Settings) -> None:
        """Write settings to the config file, readable only by the owner."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.touch(mode=0o600)
        self.path.chmod(0o600)
        self.path.write_text(json.dumps(settings.to_file_dict(), indent=2, ensure_ascii=False))
        logger.debug(f"Saved settings to {self.path}")
