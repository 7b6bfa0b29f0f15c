from pydantic_settings import BaseSettings
from typing import List, Any
import json
from pathlib import Path


def parse_cors_origins(v: Any) -> List[str]:
    """Parse CORS origins from string or list"""
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        # Try JSON parsing first
        if v.startswith('['):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(',') if origin.strip()]
    return []


def parse_header_lines(v: str) -> List[str]:
    """Parse diary header lines separated by '|'"""
    if not v:
        return []
    return [line.strip() for line in v.split('|') if line.strip()]


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "Project Mentor Portal"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str
    DB_ECHO: bool = False

    # ==========================================
    # Session / Security
    # ==========================================
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "session"
    SESSION_EXPIRE_MINUTES: int = 1440  # 24 hours
    SESSION_COOKIE_SECURE: bool = False
    BCRYPT_ROUNDS: int = 12

    # ==========================================
    # CORS
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_cors_origins(self.CORS_ORIGINS_STR)

    # ==========================================
    # Rate Limiting
    # ==========================================
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "5/minute"

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    # ==========================================
    # Mentoring rules
    # ==========================================
    MAX_TEAMS_PER_MENTOR: int = 2

    # ==========================================
    # Project diary
    # ==========================================
    DIARY_HEADER_IMAGE_URL: str = ""
    DIARY_HEADER_TIMEOUT: float = 5.0
    DIARY_HEADER_LINES_STR: str = (
        "KGiSL Institute of Technology|"
        "(An Autonomous Institution)|"
        "Affiliated to Anna University, Approved by AICTE, Recognized by UGC|"
        "Accredited by NAAC & NBA (B.E-CSE,B.E-ECE, B.Tech-IT)|"
        "365, KGiSL Campus, Thudiyalur Road, Saravanampatti, Coimbatore - 641035"
    )
    DIARY_DOC_REF: str = "KITE/IQAC/PW/06"
    DIARY_DATE_FORMAT: str = "%d/%m/%Y"

    @property
    def DIARY_HEADER_LINES(self) -> List[str]:
        """Text header used when the header image is unavailable"""
        return parse_header_lines(self.DIARY_HEADER_LINES_STR)

    # Paths
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def is_dev_mode(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT == "development" or self.DEBUG


# Create settings instance
settings = Settings()
