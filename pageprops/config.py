"""Environment-driven settings for the Agility CMS connection."""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Connection and preview settings, read from ``AGILITY_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="AGILITY_",
        env_file=".env",
        extra="ignore",
    )

    guid: str = Field(default="", description="Agility instance GUID.")
    api_fetch_key: str = Field(default="", description="API key for published content.")
    api_preview_key: str = Field(default="", description="API key for draft/preview content.")
    language_code: str = "en-us"
    channel_name: str = "website"
    security_key: str = Field(default="", description="Secret used to derive the preview key.")
    environment: str = Field(
        default="production",
        description="'development' forces every page-props request into preview mode.",
    )
    api_base_url: str = "https://api.aglty.io"
    cache_root: Path = Path(".agility-cache")
    sync_content_lists: List[str] = Field(default_factory=lambda: ["posts", "globalheader"])
    api_timeout: float = 15

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def cache_path(self, is_preview: bool) -> Path:
        """Per-mode cache directory; preview and live never share one."""
        return self.cache_root / ("preview" if is_preview else "live")


@lru_cache
def get_settings() -> Settings:
    return Settings()
