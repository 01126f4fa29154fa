"""
Configuration for the archive backend.
Environment variables (and a local .env file) override defaults.
"""
import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    """Backend configuration"""

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    MAX_SESSIONS: int = 256

    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["*"])

    # Remote model (any OpenAI-compatible endpoint)
    GROQ_API_KEY: str = ""
    ARCHIVE_BASE_URL: str = "https://api.groq.com/openai/v1"
    ARCHIVE_MODEL: str = "llama-3.3-70b-versatile"
    ARCHIVE_TEMPERATURE: float = 0.85
    ARCHIVE_TOP_P: float = 0.95
    ARCHIVE_MAX_OUTPUT_TOKENS: int = 8192

    def __post_init__(self):
        """Load from environment variables"""
        for key in self.__dataclass_fields__:
            env_value = os.getenv(key)
            if env_value is None:
                continue
            field_type = self.__dataclass_fields__[key].type
            if field_type == int:
                setattr(self, key, int(env_value))
            elif field_type == float:
                setattr(self, key, float(env_value))
            elif field_type == List[str]:
                setattr(self, key, [item.strip() for item in env_value.split(",") if item.strip()])
            else:
                setattr(self, key, env_value.strip())


# Global settings instance
settings = Settings()
