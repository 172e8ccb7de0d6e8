import json
from typing import Annotated, Dict, List, Optional, Tuple

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Well-known SMTP services selectable through EMAIL_SERVICE (host, port, STARTTLS)
SMTP_SERVICES: Dict[str, Tuple[str, int]] = {
    "gmail": ("smtp.gmail.com", 587),
    "outlook": ("smtp-mail.outlook.com", 587),
    "hotmail": ("smtp-mail.outlook.com", 587),
    "yahoo": ("smtp.mail.yahoo.com", 587),
    "icloud": ("smtp.mail.me.com", 587),
    "zoho": ("smtp.zoho.com", 587),
}

PRODUCTION_ORIGINS = ["https://soek.ch", "https://www.soek.ch"]


class Settings(BaseSettings):
    PROJECT_NAME: str = "SOEK Contact Relay"
    VERSION: str = "1.0.0"

    # --- Environment & Debug ---
    ENVIRONMENT: str = "local"
    DEBUG: bool = False  # Default to False for security
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 3001

    # --- Mail transport ---
    EMAIL_SERVICE: str = "gmail"
    SMTP_HOST: Optional[str] = None  # Overrides EMAIL_SERVICE when set
    SMTP_PORT: Optional[int] = None
    EMAIL_USER: Optional[str] = None
    EMAIL_PASSWORD: Optional[SecretStr] = None
    MAIL_TIMEOUT_SECONDS: float = Field(default=15.0, gt=0)

    # --- Contact form ---
    SOEK_EMAIL: Optional[str] = None  # Destination of every contact message
    SUBJECT_PREFIX: str = "[Sito SOEK]"

    # --- CORS ---
    DEV_ORIGIN: Optional[str] = None  # e.g. http://localhost:5500
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Extra allowed CORS origins on top of the SOEK domains.",
    )

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=True, extra="ignore"
    )

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            # Plain comma separated list
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("EMAIL_SERVICE", mode="after")
    @classmethod
    def normalize_email_service(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def cors_origins(self) -> List[str]:
        """Allow-list of frontend origins, without duplicates and in a stable order."""
        origins = PRODUCTION_ORIGINS + [self.DEV_ORIGIN] + self.ALLOWED_ORIGINS
        allowed: List[str] = []
        for origin in origins:
            origin = (origin or "").strip().rstrip("/")
            if origin and origin not in allowed:
                allowed.append(origin)
        return allowed

    @property
    def smtp_endpoint(self) -> Optional[Tuple[str, int]]:
        """Resolve (host, port) from SMTP_HOST or the EMAIL_SERVICE selector."""
        if self.SMTP_HOST:
            return self.SMTP_HOST, self.SMTP_PORT or 587
        service = SMTP_SERVICES.get(self.EMAIL_SERVICE)
        if service is None:
            return None
        host, port = service
        return host, self.SMTP_PORT or port

    def missing_mail_settings(self) -> List[str]:
        """Names of the settings the contact pipeline cannot run without."""
        missing = []
        if not self.EMAIL_USER:
            missing.append("EMAIL_USER")
        if not self.EMAIL_PASSWORD or not self.EMAIL_PASSWORD.get_secret_value():
            missing.append("EMAIL_PASSWORD")
        if not self.SOEK_EMAIL:
            missing.append("SOEK_EMAIL")
        if self.smtp_endpoint is None:
            missing.append("SMTP_HOST")
        return missing


settings = Settings()
