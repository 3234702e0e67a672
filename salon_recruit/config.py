from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./salon_recruit.db"
    TEST_DATABASE_URL: str = "sqlite+aiosqlite:///./test.db"

    # Empty PIN leaves the admin API open (local development only)
    ADMIN_PIN: str = ""

    JWT_SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 720
    JWT_REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Twilio (bulk SMS outreach)
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_FROM: str = ""
    TWILIO_MESSAGING_SERVICE_SID: str = ""
    TWILIO_API_BASE_URL: str = "https://api.twilio.com/2010-04-01"

    # Tour slots and day listings are evaluated in this zone
    LOCAL_TIMEZONE: str = "America/Phoenix"
    PHONE_COUNTRY_CODE: str = "1"

    # Public kiosk intake
    PUBLIC_RATE_LIMIT: int = 30
    PUBLIC_RATE_WINDOW_SECONDS: int = 60
    INTAKE_DUPLICATE_GUARD: bool = True

    CORS_ORIGINS: str = "http://localhost:5173"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _fix_database_url(self):
        """Render provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if self.DATABASE_URL.startswith("postgresql://"):
            self.DATABASE_URL = self.DATABASE_URL.replace(
                "postgresql://", "postgresql+asyncpg://", 1,
            )
        return self

    @property
    def sms_configured(self) -> bool:
        return bool(
            self.TWILIO_ACCOUNT_SID
            and self.TWILIO_AUTH_TOKEN
            and (self.TWILIO_FROM or self.TWILIO_MESSAGING_SERVICE_SID)
        )


settings = Settings()
