import os
from typing import List, Optional
from pydantic_settings import BaseSettings

from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    APP_NAME: str = "GitHub Profile Analytics"
    APP_DESCRIPTION: str = "Aggregated language, commit and activity views for a GitHub profile"
    APP_VERSION: str = "1.0.0"

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8000))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"

    ALLOWED_ORIGINS: List[str] = ["*"]

    GITHUB_PAT: Optional[str] = os.getenv("GITHUB_PAT") or None
    GITHUB_API_BASE: str = os.getenv("GITHUB_API_BASE", "https://api.github.com")
    GITHUB_API_VERSION: str = os.getenv("GITHUB_API_VERSION", "2022-11-28")

    CACHE_TTL: int = int(os.getenv("CACHE_TTL", 3600))
    MAX_WORKERS: int = int(os.getenv("MAX_WORKERS", 10))
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", 10))

    MAX_REPOSITORIES: int = int(os.getenv("MAX_REPOSITORIES", 100))
    MAX_COMMITS_PER_REPO: int = int(os.getenv("MAX_COMMITS_PER_REPO", 1000))
    LANGUAGE_REPO_LIMIT: int = int(os.getenv("LANGUAGE_REPO_LIMIT", 30))
    COMMIT_REPO_LIMIT: int = int(os.getenv("COMMIT_REPO_LIMIT", 20))

    DEFAULT_DAYS: int = int(os.getenv("DEFAULT_DAYS", 90))
    MAX_DAYS: int = int(os.getenv("MAX_DAYS", 365))

    POOL_CONNECTIONS: int = int(os.getenv("POOL_CONNECTIONS", 10))
    POOL_MAXSIZE: int = int(os.getenv("POOL_MAXSIZE", 20))
    POOL_BLOCK: bool = os.getenv("POOL_BLOCK", "False").lower() == "true"

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
