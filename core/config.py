from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: str = "3306"
    DB_NAME: str = "reel_marketplace"
    # Full SQLAlchemy URL; takes precedence over the DB_* parts when set
    DATABASE_URL: str | None = None

    GOOGLE_CLIENT_ID: str
    GOOGLE_CLIENT_SECRET: str
    BACKEND_URL: str
    FRONTEND_URL: str
    MEDIA_DIR: str = "media"
    MEDIA_URL_PATH: str = "/media"

    LOG_LEVEL: str = "INFO"
    SESSION_TTL_DAYS: int = 30

    # "local" writes into MEDIA_DIR, "supabase" posts to a hosted storage bucket
    STORAGE_BACKEND: str = "local"
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_KEY: str = ""
    STORAGE_TIMEOUT_SECONDS: float = 30.0
    MAX_UPLOAD_BYTES: int = 100 * 1024 * 1024

    VERSION_NUMBER_RETRIES: int = 3
    FIRST_VERSION_ENTERS_REVISION: bool = True

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    class Config:
        env_file = ".env"

settings = Settings()
