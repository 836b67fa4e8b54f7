import enum

from pydantic_settings import BaseSettings, SettingsConfigDict
from yarl import URL


class LogLevel(str, enum.Enum):
    """Possible log levels."""

    NOTSET = "NOTSET"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"


class Settings(BaseSettings):
    """
    Application settings.

    These parameters can be configured
    with environment variables.
    """

    host: str = "127.0.0.1"
    port: int = 8080
    # quantity of workers for uvicorn
    workers_count: int = 1
    # Enable uvicorn reloading
    reload: bool = False

    # Current environment
    environment: str = "dev"

    log_level: LogLevel = LogLevel.INFO

    # ========== Database Configuration ==========
    mongo_host: str = "localhost"
    mongo_port: int = 27017
    mongo_user: str = ""
    mongo_password: str = ""
    mongo_database: str = "blacklist"
    mongo_collection: str = "blacklist"

    # Redis settings for the result cache
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str = ""

    # ========== Blacklist Check ==========
    cache_ttl_seconds: int = 24 * 60 * 60
    cache_key_prefix: str = "blacklist"
    similarity_threshold: float = 0.3
    similarity_max_candidates: int = 5
    # Upper bound on documents scored per search, best name similarity first
    similarity_scan_limit: int = 1000
    # Seconds a single check may take before the API gives up
    check_timeout: float = 60.0

    @property
    def mongo_url(self) -> URL:
        """
        Assemble MongoDB URL from settings.

        :return: MongoDB URL.
        """
        return URL.build(
            scheme="mongodb",
            host=self.mongo_host,
            port=self.mongo_port,
            user=self.mongo_user or None,
            password=self.mongo_password or None,
            path=f"/{self.mongo_database}",
        )

    @property
    def redis_url(self) -> str:
        """
        Assemble Redis URL from settings.

        :return: Redis URL for the result cache.
        """
        auth_part = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth_part}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="BLACKLIST_CHECK_",
        env_file_encoding="utf-8",
    )


settings = Settings()
