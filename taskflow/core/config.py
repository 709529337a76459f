from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        # Unknown keys in .env are ignored instead of failing validation
        extra="ignore",
    )

    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./taskflow.db")
    DB_ECHO: bool = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

    # JWT settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-super-secret-key-change-in-production")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # Project settings
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "TaskFlow")
    API_V1_STR: str = "/api/v1"
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Subtask generation (OpenAI or any OpenAI-compatible gateway such as OpenRouter)
    OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
    OPENAI_BASE_URL: Optional[str] = os.getenv("OPENAI_BASE_URL")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

    # Object storage for profile images
    STORAGE_DIR: str = os.getenv("STORAGE_DIR", "./storage")
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
    MAX_AVATAR_BYTES: int = int(os.getenv("MAX_AVATAR_BYTES", str(5 * 1024 * 1024)))

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

settings = Settings()
