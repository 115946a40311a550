from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Search index (Elasticsearch REST API)
    ES_URL: str = "http://localhost:9200"
    ES_INDEX: str = "post"
    ES_USERNAME: str = ""
    ES_PASSWORD: str = ""
    DEFAULT_DISTANCE: str = "200km"

    # Media storage (S3-compatible)
    BUCKET_NAME: str = "post-images-around"
    S3_ENDPOINT: str = ""
    S3_REGION: str = "us-east-1"
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    PUBLIC_BASE_URL: str = ""

    # Features
    REQUIRE_IMAGE: bool = True

    # Observability
    METRICS_ENABLED: bool = False
    SENTRY_DSN: str = ""

    @field_validator("ES_URL", "S3_ENDPOINT", "PUBLIC_BASE_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    # Pydantic v2 config
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
