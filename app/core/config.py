from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "local"
    APP_NAME: str = "Oromia Education Center API"
    LOG_LEVEL: str = "INFO"
    # Comma-separated origins for CORS (e.g. https://oec.example.org,https://admin.oec.example.org). If empty, uses localhost defaults.
    CORS_ORIGINS: str = ""

    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    DATABASE_URL: str

    @field_validator("DATABASE_URL", mode="after")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Render and others give postgres://; SQLAlchemy expects postgresql+psycopg2://."""
        if v and v.startswith("postgres://"):
            return "postgresql+psycopg2://" + v[11:]
        return v
    REDIS_URL: str = "redis://localhost:6379/0"
    # Run Celery tasks inline (tests, single-process deployments)
    CELERY_TASK_ALWAYS_EAGER: bool = False

    # Media host (Cloudinary upload API)
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""

    # Record mirror for payment proofs (Airtable REST API)
    AIRTABLE_API_KEY: str = ""
    AIRTABLE_BASE_ID: str = ""
    AIRTABLE_TABLE_NAME: str = ""

    # SMS (Afro Messaging)
    AFRO_MESSAGING_API_KEY: str = ""
    AFRO_MESSAGING_SENDER_ID: str = ""
    AFRO_MESSAGING_URL: str = "https://api.afromessage.com/api/send"


settings = Settings()
