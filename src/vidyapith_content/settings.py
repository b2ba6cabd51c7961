"""Application settings for vidyapith-content."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the store location and website access."""

    model_config = SettingsConfigDict(
        env_prefix="VIDYAPITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: str = "data/content_cache"
    base_url: str = "https://www.vidyapith.org"
    http_timeout_s: float = Field(default=12.0, gt=0)
    user_agent: str = "Mozilla/5.0 (compatible; vidyapith-content/0.1.0)"
    daily_refresh_hours: float = Field(default=24.0, gt=0)

    def page_url(self, path: str) -> str:
        """Join a site-relative path onto the configured base URL."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
