# backend-server/tasktracker/core/config.py
from pydantic_settings import BaseSettings; from dotenv import load_dotenv
load_dotenv()
class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./tasktracker.db"
    JWT_SECRET_KEY: str; JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    LOG_LEVEL: str = "INFO"
    # Sign-up without an admin; admin accounts are never self-registered
    ALLOW_SELF_REGISTRATION: bool = True
settings = Settings()
