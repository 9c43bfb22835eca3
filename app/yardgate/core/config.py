from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "YardGate"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    AUTH_DISABLED: bool = False
    DATABASE_URL: str = "sqlite+pysqlite:///./yardgate.db"
    APP_TIMEZONE: str = "America/Toronto"
    METRICS_ENABLED: bool = True
    TRAILER_STATUS_CAS: bool = False
    S3_ACCESS_KEY: str = ""
    S3_SECRET_KEY: str = ""
    S3_BUCKET: str = ""
    S3_REGION: str = ""
    S3_ENDPOINT: str = ""
    S3_PUBLIC_BASE_URL: str = ""
    S3_TEMP_FOLDER: str = "temp-files"
    S3_SUBMISSIONS_FOLDER: str = "submissions"

settings = Settings()
