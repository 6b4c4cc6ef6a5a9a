from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Local default; production points at the hosted Postgres pooler
    DATABASE_URL: str = "sqlite+aiosqlite:///./stafftrack.db"

    # If DEV and you hit SSL cert issues on Windows, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    # --- IDENTITY (tokens are issued by the hosted auth provider) ---
    JWT_SECRET: str = "change-me"
    JWT_AUDIENCE: str | None = "authenticated"

    ENV: str = "dev"  # "dev" or "prod"

    # --- AUTHORIZATION ---
    POLICY_FILE: str | None = None  # JSON policy tables; built-in defaults when unset
    ADMIN_CONTACT_EMAIL: str = "niramay@mintextech.com"
    SUPER_ADMIN_USER_ID: str | None = None

    FRONTEND_URL: str = "http://localhost:5173"

    # --- SERVER (stafftrack console script) ---
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
