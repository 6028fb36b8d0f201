"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    gemini_api_key: str = ""

    # Server
    port: int = 3000
    host: str = "0.0.0.0"

    # Logging
    log_level: str = "INFO"

    # HTTP Settings
    fetch_timeout: float = 10.0  # seconds, link fetch only
    max_upload_size: int = 10 * 1024 * 1024  # 10MB

    # Rate Limiting
    rate_limit_per_hour: int = 100

    # CORS
    cors_origins: str = "*"  # Comma-separated origins or "*" for all

    # Gemini Settings
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.2
    extraction_max_tokens: int = 2000
    structuring_max_tokens: int = 4000

    # Files
    prompt_path: Path = PACKAGE_DIR / "prompts" / "system_prompt.txt"
    template_path: Path = Path("template") / "Modelo_FT_2026.xlsx"
    template_sheet: str = "Planilha1"
    output_dir: Path = Path("output")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get list of CORS origins."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def load_system_prompt(self) -> str:
        """Read the culinary extraction prompt sent as system instruction."""
        return self.prompt_path.read_text(encoding="utf-8")


# Global settings instance
settings = Settings()
