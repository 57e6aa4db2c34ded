from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Comply Accessibility Scanner"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True

    CORS_ALLOWED_ORIGINS: List[str] = [
        "https://getcomply.tech",
        "http://localhost:8080",
        "http://localhost:8081",
    ]

    # ── Database ────────────────────────────────
    DATABASE_URL: str

    # ── Scan quota & cache ──────────────────────
    SCAN_RATE_LIMIT_PER_HOUR: int = 5
    RATE_LIMIT_WINDOW_MINUTES: int = 60
    RATE_LIMIT_RETRY_AFTER_SECONDS: int = 3600
    SCAN_CACHE_TTL_MINUTES: int = 60

    # ── Scan budget ─────────────────────────────
    SCAN_SOFT_BUDGET_SECONDS: float = 20.0  # skip sub-pages when root took longer
    SCAN_HARD_BUDGET_SECONDS: float = 45.0  # no new sub-page audit after this
    MAX_SUBPAGES: int = 2
    MAX_DISCOVERED_LINKS: int = 3
    MAX_PDF_CHECKS: int = 10
    PDF_RANGE_BYTES: int = 32 * 1024

    # ── Outbound timeouts (seconds) ─────────────
    PAGE_FETCH_TIMEOUT: float = 10.0
    PDF_FETCH_TIMEOUT: float = 8.0
    AUDIT_TIMEOUT: float = 25.0
    WEBHOOK_TIMEOUT: float = 10.0

    SCANNER_USER_AGENT: str = "ComplyBot/1.0 (Accessibility Scanner; +https://getcomply.tech)"

    # ── Audit capability ────────────────────────
    AUDIT_PROVIDER: Literal["pagespeed", "markup"] = "pagespeed"
    PAGESPEED_API_URL: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    PAGESPEED_API_KEY: Optional[str] = None
    PAGESPEED_STRATEGY: Literal["mobile", "desktop"] = "mobile"

    # ── Compliance copy ─────────────────────────
    COMPLIANCE_DEADLINE: str = "May 11, 2026"

    # ── Email Configuration ─────────────────────
    MAIL_HOST: str = ""
    MAIL_PORT: int = 587
    MAIL_USERNAME: str = ""
    MAIL_PASSWORD: str = ""
    MAIL_ENCRYPTION: str = "tls"
    MAIL_FROM_ADDRESS: str = "hello@getcomply.tech"
    MAIL_FROM_NAME: str = "Comply"

    EMAIL_RELAY_URL: str = ""
    EMAIL_RELAY_API_KEY: str = ""
    EMAIL_RELAY_TIMEOUT: int = 30

    # ── Lead notifications ──────────────────────
    SLACK_WEBHOOK_URL: Optional[str] = None
    HOT_LEAD_SCORE_THRESHOLD: int = 60

    LANDING_PAGE_URL: str = "https://getcomply.tech"

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
