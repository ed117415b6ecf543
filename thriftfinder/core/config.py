"""
Application settings.
Secrets can be loaded from AWS Secrets Manager at startup.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # AWS
    AWS_REGION: str = "us-east-1"
    COGNITO_REGION: str = "us-east-1"
    USE_SECRETS_MANAGER: bool = False

    # Database (host/user/pass may come from Secrets Manager)
    DATABASE_URL: Optional[str] = None
    DB_HOST: Optional[str] = None
    DB_PORT: int = 5432
    DB_NAME: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_PASS: Optional[str] = None

    # Cognito (identity provider)
    COGNITO_USER_POOL_ID: Optional[str] = None
    COGNITO_CLIENT_ID: Optional[str] = None
    COGNITO_CLIENT_SECRET: Optional[str] = None

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    SESSION_TTL: int = 86400  # 24 hours in seconds

    # Messaging
    MESSAGE_MAX_LENGTH: int = 5_000

    # Workflow client
    API_URL: str = "http://localhost:8000"
    WS_URL: Optional[str] = None  # defaults to API_URL with ws:// scheme
    HTTP_TIMEOUT: float = 10.0
    ROLE_CACHE_TTL: int = 300  # seconds a resolved role stays cached

    # Optional
    DEBUG: bool = False
    PROJECT_NAME: str = "ThriftFinder"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        if self.DB_HOST:
            return (
                f"postgresql://{self.DB_USER}:{self.DB_PASS}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            )
        return "sqlite:///./thriftfinder.db"

    @property
    def ws_url(self) -> str:
        if self.WS_URL:
            return self.WS_URL
        base = self.API_URL.rstrip("/")
        if base.startswith("https://"):
            return "wss://" + base[len("https://"):]
        if base.startswith("http://"):
            return "ws://" + base[len("http://"):]
        return base

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

# Load secrets from AWS Secrets Manager only when enabled and DB creds aren't
# already provided via environment variables (e.g. in Docker / local dev).
if settings.USE_SECRETS_MANAGER and not settings.DB_HOST:
    from thriftfinder.aws.secrets import get_secret

    _db_secret = get_secret("thriftfinder/db", region_name=settings.AWS_REGION)
    settings.DB_HOST = _db_secret["host"]
    settings.DB_PORT = int(_db_secret.get("port", 5432))
    settings.DB_NAME = _db_secret["database"]
    settings.DB_USER = _db_secret["username"]
    settings.DB_PASS = _db_secret["password"]

    _cognito_secret = get_secret("thriftfinder/cognito", region_name=settings.COGNITO_REGION)
    settings.COGNITO_USER_POOL_ID = _cognito_secret["user_pool_id"]
    settings.COGNITO_CLIENT_ID = _cognito_secret["client_id"]
    settings.COGNITO_CLIENT_SECRET = _cognito_secret.get("client_secret")
