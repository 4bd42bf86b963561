from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4.1"
    OPENAI_ANALYST_MODEL: str = "gpt-4.1-mini"
    LLM_TIMEOUT_SECONDS: float = 120.0
    GENERATION_TIMEOUT_SECONDS: float = 600.0
    DB_URL: str = "sqlite:///./data/finagent.db"
    DATA_DIR: str = "./data"
    EXPORT_DIR: str = "./generated_models"
    SECTORS_PATH: str = "./data/sectors.json"
    LOG_DIR: str = "./logs"
    LOG_LEVEL: str = "INFO"
    cors_allow_origins: List[str] = ["*"]
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

settings = Settings()
