"""Configuration settings for the application."""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings."""
    
    app_name: str = "Expense Tracker API"
    debug: bool = False
    database_path: str = "./expense_tracker.db"
    log_level: str = "INFO"
    
    # Pagination
    default_page_limit: int = 10
    max_page_limit: int = 100
    dashboard_recent_limit: int = 10
    
    # Header set by the upstream auth layer with the caller's user id
    user_header: str = "X-User-Id"
    
    cors_allow_origins: List[str] = ["*"]
    
    class Config:
        env_file = ".env"
        env_prefix = "EXPENSE_TRACKER_"
        case_sensitive = False


settings = Settings()
