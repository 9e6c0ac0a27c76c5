import os
from typing import Dict, List

from dotenv import load_dotenv
from pydantic import computed_field
from pydantic_settings import BaseSettings

load_dotenv()


class Configs(BaseSettings):
    # base
    ENV: str = "dev"
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "vidtube-api"
    LOG_LEVEL: str = "INFO"

    PROJECT_ROOT: str = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

    # auth
    ACCESS_TOKEN_SECRET: str = "dev-access-secret"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day
    REFRESH_TOKEN_SECRET: str = "dev-refresh-secret"
    REFRESH_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 10  # 10 days
    JWT_ALGORITHM: str = "HS256"
    COOKIE_SECURE: bool = True

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # database
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: str = "5432"
    ENV_DATABASE_MAPPER: Dict[str, str] = {
        "prod": "vidtube",
        "stage": "stage-vidtube",
        "dev": "dev-vidtube",
        "test": "test-vidtube",
    }
    DATABASE_URI_FORMAT: str = "postgresql+asyncpg://{user}:{password}@{host}:{port}/{database}"

    # DATABASE_URL from env wins over the constructed URI
    DATABASE_URL: str = ""

    # object storage
    AZURE_STORAGE_CONNECTION_STRING: str = ""
    AZURE_BLOB_CONTAINER: str = "media"
    TEMP_UPLOAD_DIR: str = os.path.join(PROJECT_ROOT, "public", "temp")

    # find query
    PAGE: int = 1
    PAGE_SIZE: int = 10
    ORDERING: str = "createdAt"

    @computed_field
    @property
    def DATABASE_URI(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return self.DATABASE_URI_FORMAT.format(
            user=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.ENV_DATABASE_MAPPER.get(self.ENV, "dev-vidtube"),
        )

    class Config:
        case_sensitive = True


configs = Configs()
