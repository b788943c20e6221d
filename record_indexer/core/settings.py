from pydantic_settings import BaseSettings
from pydantic import BaseModel, ConfigDict

class Settings(BaseSettings):
    SEARCH_HOST: str = "http://localhost:9200"
    SEARCH_APP_ID: str = ""  # basic-auth user on managed clusters
    SEARCH_API_KEY: str = ""
    SEARCH_INDEX: str = "test-index"
    SEARCH_VERIFY_CERTS: bool = True
    SEARCH_REQUEST_TIMEOUT: int = 30
    SEARCH_TRANSPORT_RETRIES: int = 3  # connection-level retries done by opensearch-py

    # Completion wait
    WAIT_MAX_RETRIES: int = 100
    WAIT_INTERVAL: float = 0.2  # seconds, grows linearly per attempt
    WAIT_MAX_INTERVAL: float = 5.0

    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()


class ClientConfig(BaseModel):
    """Everything needed to build a search client, passed explicitly."""
    host: str
    app_id: str = ""
    api_key: str = ""
    verify_certs: bool = True
    timeout: int = 30
    max_retries: int = 3

    @classmethod
    def from_settings(cls, s: Settings = None) -> "ClientConfig":
        s = s or settings
        return cls(
            host=s.SEARCH_HOST,
            app_id=s.SEARCH_APP_ID,
            api_key=s.SEARCH_API_KEY,
            verify_certs=s.SEARCH_VERIFY_CERTS,
            timeout=s.SEARCH_REQUEST_TIMEOUT,
            max_retries=s.SEARCH_TRANSPORT_RETRIES,
        )

    @property
    def http_auth(self):
        if self.app_id and self.api_key:
            return (self.app_id, self.api_key)
        return None
