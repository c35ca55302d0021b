from pydantic_settings import BaseSettings
from typing import Union


class Settings(BaseSettings):
    # Database connection string - can be overridden via .env file
    # "sqlite://" (no path) gives a private in-memory database
    DATABASE_URL: str = "sqlite:///./users.db"

    # bcrypt work factor - passlib accepts 4..31
    BCRYPT_ROUNDS: int = 10

    # Server
    HOST: str = "localhost"
    PORT: int = 5000
    ENVIRONMENT: str = "development"

    LOG_LEVEL: str = "INFO"

    # CORS origins - can be string (comma-separated) or list
    CORS_ORIGINS: Union[str, list[str]
                        ] = "http://localhost:5173,http://localhost:3000"

    def get_cors_origins(self) -> list[str]:
        """Parse CORS_ORIGINS string into list"""
        if isinstance(self.CORS_ORIGINS, str):
            return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]
        return self.CORS_ORIGINS if isinstance(self.CORS_ORIGINS, list) else []

    class Config:
        # Environment variables override .env, which overrides defaults
        env_file = ".env"
        case_sensitive = True


settings = Settings()
