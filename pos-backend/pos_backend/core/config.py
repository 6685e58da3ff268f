from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DB_URL: str = "sqlite+aiosqlite:///./pos.sqlite3"
    DB_ECHO: bool = False
    # create missing tables on startup; the schema is otherwise managed outside the app
    DB_CREATE_ALL: bool = True

    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    HOST: str = "0.0.0.0"
    PORT: int = 3100

    class Config:
        env_file = ".env"

settings = Settings()
