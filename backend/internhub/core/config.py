from pydantic_settings import BaseSettings
from typing import List, Any, Optional
import json
from pathlib import Path


def parse_list_setting(v: Any) -> List[str]:
    """Parse a list setting from a JSON array or comma-separated string"""
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
        return [item.strip() for item in v.split(',') if item.strip()]
    return []


class Settings(BaseSettings):
    """Application settings - all configurable via environment variables"""

    # ==========================================
    # Application
    # ==========================================
    APP_NAME: str = "InternHub"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    API_VERSION: str = "v1"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000

    # ==========================================
    # Database
    # ==========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./internhub.db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800  # 30 minutes

    # ==========================================
    # Authentication
    # ==========================================
    JWT_SECRET_KEY: str = "CHANGE_ME"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440  # 24 hours
    BCRYPT_ROUNDS: int = 12  # 4 for dev (fast), 12 for prod (secure)

    # ==========================================
    # Email
    # ==========================================
    SMTP_HOST: str = "smtp.zoho.in"
    SMTP_PORT: int = 465
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True  # implicit TLS on 465, STARTTLS otherwise
    EMAIL_FROM: str = "noreply@internhub.local"
    EMAIL_FROM_NAME: str = "InternHub"
    EMAIL_SEND_TIMEOUT_SECONDS: float = 15.0

    # SendGrid Configuration
    SENDGRID_API_KEY: str = ""
    USE_SENDGRID: bool = True  # Use SendGrid when API key is available

    # Recipient of new-remark notifications
    ADMIN_EMAIL: str = ""

    # ==========================================
    # Frontend
    # ==========================================
    FRONTEND_URL: str = "http://localhost:3000"

    # ==========================================
    # CORS (stored as comma-separated string, parsed to list)
    # ==========================================
    CORS_ORIGINS_STR: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def CORS_ORIGINS(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return parse_list_setting(self.CORS_ORIGINS_STR)

    # ==========================================
    # Logging
    # ==========================================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # ==========================================
    # Certificates
    # ==========================================
    CERTIFICATE_THEME: str = "classic"
    CERTIFICATE_ORG_NAME: str = "Anand Jivan Foundation Trust"
    CERTIFICATE_LOGO_URL: str = "https://res.cloudinary.com/dkc66bu0s/image/upload/v1753822641/logo-2048_1_geghxn.png"
    CERTIFICATE_BADGE_URL: str = "https://res.cloudinary.com/dkc66bu0s/image/upload/v1753881880/pngkey.com-gold-ribbon-png-115183_cotmiq.png"
    CERTIFICATE_SIGNATURE_URL: str = "https://res.cloudinary.com/dkc66bu0s/image/upload/v1753881046/zzzzzzzzzzaa-removebg-preview_s5dx4g.png"
    CERTIFICATE_SIGNER_NAME: str = "Guddu Kumar"
    CERTIFICATE_SIGNER_TITLE: str = "Chief Executive Officer"

    # Headless Chromium used to rasterize certificates
    CHROMIUM_EXECUTABLE_PATH: Optional[str] = None
    CHROMIUM_ARGS_STR: str = "--no-sandbox,--disable-setuid-sandbox"
    CERTIFICATE_RENDER_TIMEOUT_SECONDS: float = 30.0
    CERTIFICATE_SETTLE_MS: int = 1000  # wait for web fonts after load

    @property
    def CHROMIUM_ARGS(self) -> List[str]:
        """Parse Chromium launch flags from comma-separated string"""
        return parse_list_setting(self.CHROMIUM_ARGS_STR)

    # ==========================================
    # Seed data
    # ==========================================
    SEED_ADMIN_EMAIL: str = "admin@ajft.com"
    SEED_ADMIN_PASSWORD: str = "admin123"
    SEED_ADMIN_NAME: str = "Admin User"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def BASE_DIR(self) -> Path:
        return Path(__file__).resolve().parent.parent

    @property
    def TEMPLATES_DIR(self) -> Path:
        return self.BASE_DIR / "templates"

    def is_dev_mode(self) -> bool:
        return self.ENVIRONMENT == "development" or self.DEBUG


settings = Settings()
