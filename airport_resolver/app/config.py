from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv


load_dotenv()


def _env(*names: str, default: str | None = None) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


@dataclass(frozen=True)
class Settings:
    amadeus_host: str = os.getenv("AMADEUS_HOST", "test.api.amadeus.com")
    # AMADEUS_API_KEY/SECRET are the names the Amadeus dashboard hands out.
    amadeus_client_id: str | None = _env("AMADEUS_CLIENT_ID", "AMADEUS_API_KEY")
    amadeus_client_secret: str | None = _env("AMADEUS_CLIENT_SECRET", "AMADEUS_API_SECRET")

    token_refresh_margin_seconds: int = int(os.getenv("TOKEN_REFRESH_MARGIN_SECONDS", "60"))
    location_page_limit: int = int(os.getenv("LOCATION_PAGE_LIMIT", "10"))

    upstream_retries: int = int(os.getenv("UPSTREAM_RETRIES", "2"))
    upstream_retry_delay_seconds: float = float(os.getenv("UPSTREAM_RETRY_DELAY_SECONDS", "4.0"))
    http_timeout_seconds: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    @property
    def has_amadeus_credentials(self) -> bool:
        return bool(self.amadeus_client_id and self.amadeus_client_secret)


settings = Settings()
