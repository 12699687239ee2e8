"""
Configuration settings for the Hive blog feed API.
Loads environment variables and provides application settings.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Hive RPC
    hive_rpc_endpoints: str = "https://api.hive.blog,https://api.deathwing.me,https://api.pharesim.me"
    hive_rpc_attempt_timeout: float = 4.0  # Cap per endpoint attempt (seconds)
    raw_page_size: int = 20  # condenser_api.get_discussions_by_blog maximum

    # Request budget shared by cache reads, upstream fetch and cache writes
    request_deadline_seconds: float = 9.0

    # Cache store (Redis protocol, e.g. Upstash)
    redis_url: Optional[str] = None
    redis_token: Optional[str] = None
    redis_socket_timeout: float = 2.0
    cache_key_prefix: str = "user-posts"

    # Cache TTL policy
    cache_long_ttl_seconds: int = 2592000  # 30 days for pages made only of final content
    cache_short_ttl_seconds: int = 300  # 5 minutes while content can still change
    cache_final_age_days: int = 7  # Hive posts are immutable once past payout

    # Front-end
    blog_base_url: str = "https://dreamy-baklava-d17cb6.netlify.app"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "http://localhost:4321,http://localhost:3000"
    log_level: str = "INFO"

    @property
    def hive_rpc_endpoints_list(self) -> List[str]:
        """Parse comma-separated RPC endpoints, keeping their order."""
        return [url.strip() for url in self.hive_rpc_endpoints.split(",") if url.strip()]

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS origins string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
