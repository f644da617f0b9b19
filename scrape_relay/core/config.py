import os
from typing import Optional

class Settings:
    # Proxy override; wins over the per-request proxy field when set
    SCRAPE_PROXY: Optional[str] = os.getenv("SCRAPE_PROXY")

    # Outbound request
    DEFAULT_TIMEOUT_SECONDS: int = int(os.getenv("SCRAPE_DEFAULT_TIMEOUT", "30"))

    # Server
    HOST: str = os.getenv("SCRAPE_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("SCRAPE_PORT", "8282"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
