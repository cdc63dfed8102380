from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Geeta Saathi Backend API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    PORT: int = 3001

    # Comma separated list of allowed origins
    CORS_ORIGIN: str = "http://localhost:5173,http://localhost:5174"

    # Rate limiting
    RATE_LIMIT_WINDOW_MS: int = 60000
    RATE_LIMIT_MAX_REQUESTS: int = 100

    # Security
    SECRET_KEY: str = "CHANGE_THIS_IN_PRODUCTION_TO_A_VERY_STRONG_KEY"
    TOKEN_ISSUER: str = "geeta-saathi"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # OTP
    OTP_TTL_MINUTES: int = 10
    PHONE_COUNTRY_CODE: str = "91"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_REQUESTS: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGIN.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

settings = Settings()
