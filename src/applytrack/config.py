"""Configuration loading and validation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from applytrack.ai.base import ProviderProfile

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com"
OPENAI_ENDPOINT = "https://api.openai.com/v1"


@dataclass
class AIConfig:
    gemini_api_key: str = ""
    gemini_model: str = "gemini-3-flash-preview"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_model_override: str = ""
    openai_base_url: str = OPENAI_ENDPOINT
    request_timeout: float = 120.0

    def gemini_profile(self) -> ProviderProfile:
        return ProviderProfile(
            name="gemini",
            default_model=self.gemini_model,
            endpoint=GEMINI_ENDPOINT,
            api_key=self.gemini_api_key,
        )

    def openai_profile(self) -> ProviderProfile:
        """Chat-completions profile; the configured override wins over the default model."""
        return ProviderProfile(
            name="openai",
            default_model=self.openai_model_override or self.openai_model,
            endpoint=self.openai_base_url.rstrip("/"),
            api_key=self.openai_api_key,
        )


@dataclass
class StorageConfig:
    sqlite_path: str = "applytrack.db"


@dataclass
class ProfileDefaults:
    """Fallback values used in letters when the profile leaves a field blank."""

    city: str = "Lyon, France"
    email_city: str = "Lyon"
    school: str = "École 42 Lyon"
    availability_start: str = "mars 2026"
    availability_duration: str = "4-6 mois"


@dataclass
class ScraperConfig:
    timeout: float = 20.0
    user_agent: str = "Mozilla/5.0 (compatible; applytrack/0.1)"
    description_chars: int = 1600


@dataclass
class PdfConfig:
    page_format: str = "A4"
    margin_top: str = "15mm"
    margin_right: str = "15mm"
    margin_bottom: str = "17mm"
    margin_left: str = "15mm"
    default_filename: str = "lettre_motivation.pdf"


@dataclass
class Config:
    ai: AIConfig = field(default_factory=AIConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    profile_defaults: ProfileDefaults = field(default_factory=ProfileDefaults)
    scraper: ScraperConfig = field(default_factory=ScraperConfig)
    pdf: PdfConfig = field(default_factory=PdfConfig)


def _dict_to_config(data: dict) -> Config:
    """Convert a raw dict to a Config dataclass, handling nested structures."""
    from dacite import from_dict

    return from_dict(data_class=Config, data=data)


def _find_config_file() -> Path | None:
    """Search for config file in standard locations."""
    # 1. Environment variable
    env_path = os.environ.get("APPLYTRACK_CONFIG")
    if env_path:
        p = Path(env_path)
        if p.exists():
            return p

    # 2. Current directory
    local = Path("config.yaml")
    if local.exists():
        return local

    # 3. XDG config dir
    xdg = Path.home() / ".config" / "applytrack" / "config.yaml"
    if xdg.exists():
        return xdg

    return None


def _load_dotenv() -> None:
    """Load .env file from current directory if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    for line in env_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        # Don't overwrite already-set env vars
        if key not in os.environ:
            os.environ[key] = value


# (environment variable, section, attribute)
_ENV_OVERRIDES = [
    ("GEMINI_API_KEY", "ai", "gemini_api_key"),
    ("GEMINI_MODEL", "ai", "gemini_model"),
    ("OPENAI_API_KEY", "ai", "openai_api_key"),
    ("OPENAI_MODEL", "ai", "openai_model"),
    ("OPENAI_MODEL_OVERRIDE", "ai", "openai_model_override"),
    ("OPENAI_BASE_URL", "ai", "openai_base_url"),
    ("APPLYTRACK_DB", "storage", "sqlite_path"),
]


def _apply_env_overrides(config: Config) -> Config:
    """Override config values from environment variables.

    Empty variables are ignored so a blank line in .env never wipes a YAML value.
    """
    for env_name, section, attr in _ENV_OVERRIDES:
        value = os.environ.get(env_name)
        if value:
            setattr(getattr(config, section), attr, value)
    return config


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from YAML file, merging with defaults.

    Also loads .env file and applies environment variable overrides.
    """
    _load_dotenv()

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        config_path = _find_config_file()

    if config_path is None:
        config = Config()
    else:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        config = _dict_to_config(raw)

    return _apply_env_overrides(config)
