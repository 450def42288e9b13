"""Configuration settings for the GymTracker API."""
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production"]
ProviderType = Literal["openai", "anthropic"]

DEFAULT_DATA_PATH = "gym_tracker_data_v1.json"


class Settings:
    """Application settings."""

    # Feature flags
    HELICONE_ENABLED: bool = False

    # Environment
    ENVIRONMENT: EnvironmentType = "development"

    # Storage
    DATA_PATH: str = DEFAULT_DATA_PATH

    # Coach text generation
    AI_PROVIDER: ProviderType = "openai"
    OPENAI_MODEL: str = "gpt-4o-mini"
    ANTHROPIC_MODEL: str = "claude-3-5-haiku-latest"

    # API Keys
    OPENAI_API_KEY: str | None = None
    ANTHROPIC_API_KEY: str | None = None
    HELICONE_API_KEY: str | None = None

    # HTTP
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        # Storage
        self.DATA_PATH = os.getenv("GYMTRACKER_DATA_PATH", DEFAULT_DATA_PATH)

        # Coach text generation
        provider = os.getenv("AI_PROVIDER", "openai").lower()
        self.AI_PROVIDER = provider if provider in ("openai", "anthropic") else "openai"  # type: ignore
        self.OPENAI_MODEL = os.getenv("OPENAI_MODEL", self.OPENAI_MODEL)
        self.ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", self.ANTHROPIC_MODEL)

        # Feature flags
        self.HELICONE_ENABLED = os.getenv("HELICONE_ENABLED", "false").lower() == "true"

        # API Keys
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
        self.ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
        self.HELICONE_API_KEY = os.getenv("HELICONE_API_KEY")

        # HTTP
        origins = os.getenv("CORS_ORIGINS")
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]
        else:
            self.CORS_ORIGINS = list(Settings.CORS_ORIGINS)


settings = Settings()
