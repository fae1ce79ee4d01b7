from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DB_URL: str = "sqlite:///./data/gym.db"
    LOG_LEVEL: str = "INFO"
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    SESSION_MAX_AGE: int = 30 * 24 * 60 * 60
    RFID_API_KEY: str
    STREAM_ROLES: List[str] = ["admin", "receptionist"]
    LOG_ROLES: List[str] = ["admin", "employee"]
    SSE_PING_SECONDS: int = 15

settings = Settings()
