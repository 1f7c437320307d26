"""
Database configuration and connection management
"""

from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from pydantic_settings import BaseSettings
from typing import AsyncGenerator


class DatabaseSettings(BaseSettings):
    """Database URL from the environment or the .env file the app settings also read"""
    DATABASE_URL: str = 'sqlite+aiosqlite:///travelpath.db'

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


DATABASE_URL = DatabaseSettings().DATABASE_URL

# Create engine
engine = create_async_engine(
    DATABASE_URL,
    echo=False,  # Set to True for SQL query logging
    pool_pre_ping=True,  # Verify connections before using
    pool_recycle=3600,  # Recycle connections after 1 hour
)

# Create session factory
SessionLocal = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def sync_url(url: str = DATABASE_URL) -> str:
    """
    Driver-less URL for scripts that run outside the event loop
    """
    return url.replace('+aiosqlite', '').replace('+asyncpg', '+psycopg2')


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session
    Usage:
        async for db in get_db():
            # do something with db
    """
    async with SessionLocal() as db:
        yield db


def init_db(url: str = DATABASE_URL):
    """
    Initialize database - create all tables
    """
    from .models.schema import Base
    Base.metadata.create_all(bind=create_engine(sync_url(url)))
    print("Database initialized successfully")


def drop_db(url: str = DATABASE_URL):
    """
    Drop all tables - use with caution!
    """
    from .models.schema import Base
    Base.metadata.drop_all(bind=create_engine(sync_url(url)))
    print("All tables dropped")


def reset_db(url: str = DATABASE_URL):
    """
    Reset database - drop and recreate all tables
    """
    drop_db(url)
    init_db(url)
    print("Database reset successfully")
