import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_PARTNER_TAG = "onelastlynx-20"

# Known amzn.to short links that cannot be resolved from the URL text alone
DEFAULT_SHORT_LINKS: Mapping[str, str] = MappingProxyType({
    "amzn.to/468mKVM": "B09P21T2GC",
})


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    access_key: str = ""
    secret_key: str = ""
    partner_tag: str = DEFAULT_PARTNER_TAG
    paapi_host: str = "webservices.amazon.com"
    paapi_region: str = "us-east-1"
    paapi_marketplace: str = "www.amazon.com"
    paapi_timeout: float = 10.0
    scrape_timeout: float = 15.0
    scrape_retry: bool = True
    scrape_retry_delay: float = 1.0
    public_base_url: str = "https://go.onelastlink.com"
    redirect_delay: int = 3
    ga_measurement_id: Optional[str] = None
    log_level: str = "INFO"
    short_links: Mapping[str, str] = field(default_factory=lambda: DEFAULT_SHORT_LINKS)

    @property
    def credentials_available(self) -> bool:
        return bool(self.access_key and self.secret_key)


def load_settings() -> Settings:
    """Read settings from the process environment, after loading a local .env file."""
    load_dotenv()
    return Settings(
        access_key=_env("ACCESS_KEY"),
        secret_key=_env("SECRET_KEY"),
        partner_tag=_env("PARTNER_TAG") or DEFAULT_PARTNER_TAG,
        paapi_host=_env("PAAPI_HOST", "webservices.amazon.com"),
        paapi_region=_env("PAAPI_REGION", "us-east-1"),
        paapi_marketplace=_env("PAAPI_MARKETPLACE", "www.amazon.com"),
        paapi_timeout=float(_env("PAAPI_TIMEOUT") or "10"),
        scrape_timeout=float(_env("SCRAPE_TIMEOUT") or "15"),
        scrape_retry=_env_bool("SCRAPE_RETRY", True),
        scrape_retry_delay=float(_env("SCRAPE_RETRY_DELAY") or "1.0"),
        public_base_url=_env("PUBLIC_BASE_URL", "https://go.onelastlink.com").rstrip("/"),
        redirect_delay=int(_env("REDIRECT_DELAY") or "3"),
        ga_measurement_id=_env("GA_MEASUREMENT_ID") or None,
        log_level=_env("GOLINK_LOG_LEVEL", "INFO").upper(),
    )
