from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )
    
    # Database
    database_url: str = "sqlite+aiosqlite:///./jobboard.db"
    db_pool_size: int = 20
    
    # Listings
    jobs_per_page: int = 20
    
    # App
    debug: bool = False
    allowed_origins: Optional[str] = None  # comma-separated


settings = Settings()
