from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./accounts.db"
    REDIS_URL: str = "redis://localhost:6379/1"
    LOG_LEVEL: str = "INFO"

    # Supabase project
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_KEY: str = ""
    SUPABASE_JWT_SECRET: str = "dev-secret-accounts"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # Public base URL prepended to storage paths, e.g.
    # https://<project>.supabase.co/storage/v1/object/public/
    STORAGE_URL: str = "http://localhost:54321/storage/v1/object/public/"
    HEADSHOTS_BUCKET: str = "headshots"

    RATE_LIMIT_PER_MINUTE: int = 60
    LOGIN_RATE_LIMIT_PER_MINUTE: int = 10
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    LAYOUT_CACHE_PATTERN: str = "layout:*"

    COOKIE_NAME: str = "sb-access-token"
    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: str = "lax"
    SESSION_TIMEOUT_MINUTES: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def get_cookie_settings(self) -> dict:
        return {
            "key": self.COOKIE_NAME,
            "max_age": self.SESSION_TIMEOUT_MINUTES * 60,
            "httponly": True,
            "secure": self.COOKIE_SECURE,
            "samesite": self.COOKIE_SAMESITE,
        }


settings = Settings()
