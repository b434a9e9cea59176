import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from golink.config import Settings
from golink.models import ProductRecord, RecordSource
from golink.utils import fallback_image, get_affiliate_url

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# Minimal page gets a shorter countdown than the full product page
FALLBACK_REDIRECT_MS = 2000


class PageRenderer:
    """Turns a product record into the interstitial HTML page."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATES_DIR)),
            autoescape=select_autoescape(["html"]),
        )

    def _context(self, asin: str) -> dict:
        return {
            "asin": asin,
            "affiliate_url": get_affiliate_url(asin, self.settings.partner_tag),
            "page_url": f"{self.settings.public_base_url}/{asin}",
            "ga_measurement_id": self.settings.ga_measurement_id,
        }

    def render(self, record: ProductRecord) -> str:
        if record.source == RecordSource.FALLBACK:
            return self.render_fallback(record.asin)
        return self.render_product(record)

    def render_product(self, record: ProductRecord) -> str:
        template = self.env.get_template("product.html")
        return template.render(
            product=record,
            redirect_delay=self.settings.redirect_delay,
            **self._context(record.asin),
        )

    def render_fallback(self, asin: str) -> str:
        logger.info(f"Rendering fallback page for ASIN {asin}")
        template = self.env.get_template("fallback.html")
        return template.render(
            image=fallback_image(asin),
            redirect_ms=FALLBACK_REDIRECT_MS,
            **self._context(asin),
        )

    def render_invalid(self) -> str:
        template = self.env.get_template("invalid.html")
        host = self.settings.public_base_url.split("://", 1)[-1]
        return template.render(public_host=host)
