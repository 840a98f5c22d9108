"""
Configuration for the competitive intelligence report service
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings model"""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    LYZR_API_KEY: str = ""
    LYZR_AGENT_URL: str = "https://agent-prod.studio.lyzr.ai/v3/inference/chat/"
    CI_ORCHESTRATOR_AGENT_ID: str = "6982de831ae7615e896e00f5"
    CI_USER_ID: str = "ci-dashboard-user"
    ORCHESTRATOR_TIMEOUT: float = 300.0
    DEBUG: bool = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
