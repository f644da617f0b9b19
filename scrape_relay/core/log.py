import logging
from typing import Optional

from scrape_relay.core.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once for the service process."""
    logging.basicConfig(level=level or settings.LOG_LEVEL, format=LOG_FORMAT)
