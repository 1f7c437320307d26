"""
Configuration settings for the application
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""
    
    # App settings
    APP_NAME: str = "TravelPath API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    
    # Database (DATABASE_URL itself is read by database.config)
    STORE_TIMEOUT_SECONDS: float = 10.0
    
    # API settings
    API_V1_PREFIX: str = "/api"
    
    # Search settings
    MIN_QUERY_LENGTH: int = 2
    DESTINATION_SEARCH_LIMIT: int = 10
    POPULAR_DESTINATIONS_LIMIT: int = 8
    PATH_SEARCH_LIMIT: int = 10
    
    # Search history rules
    HISTORY_MAX_ENTRIES: int = 50
    HISTORY_DEDUP_WINDOW_SECONDS: int = 3600  # 1 hour
    HISTORY_DEFAULT_PAGE_SIZE: int = 20
    RECENT_ACTIVITY_DAYS: int = 30
    FAVORITE_ROUTES_LIMIT: int = 5
    
    # Auth
    AUTH_SECRET: str = "change-me"
    TOKEN_TTL_SECONDS: int = 7 * 24 * 3600
    PASSWORD_HASH_ITERATIONS: int = 100_000
    
    # CORS
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
