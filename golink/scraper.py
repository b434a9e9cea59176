import asyncio
import logging
import random
import re
from typing import Callable, Optional, Sequence

import aiohttp
from aiohttp import ClientTimeout
from lxml import etree, html

from golink.config import Settings
from golink.exceptions import ScrapeBlockedError, StrategyError, TransportError
from golink.images import is_amazon_image, normalize_image
from golink.models import ProductRecord, RecordSource, StrategyResult
from golink.paapi import SessionFactory, default_session_factory
from golink.utils import get_amazon_url

logger = logging.getLogger(__name__)

USER_AGENTS = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0',
    'Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36',
)

BLOCK_MARKERS = ('Robot Check', 'blocked', '/errors/validateCaptcha')
MIN_PAGE_LENGTH = 1000


def _cls(name: str) -> str:
    """XPath predicate matching one class token."""
    return f'contains(concat(" ", normalize-space(@class), " "), " {name} ")'


TITLE_SELECTORS = (
    '//*[@id="productTitle"]',
    '//*[@data-automation-id="product-title"]',
    f'//*[{_cls("product-title")}]',
    f'//h1[{_cls("a-size-large")}]',
    f'//*[{_cls("product-title-word-break")}]',
    f'//h1[{_cls("a-size-base-plus")}]',
)

IMAGE_SELECTORS = (
    '//*[@id="landingImage"]',
    f'//*[{_cls("a-dynamic-image")}]',
    '//img[@data-old-hires]',
    f'//*[{_cls("imgTagWrapper")}]//img',
    '//*[@id="main-image"]',
    f'//*[{_cls("a-button-thumbnail")}]//img',
    '//img[contains(@src, "images-na.ssl-images-amazon.com")]',
    '//img[@data-a-dynamic-image]',
)

IMAGE_ATTRIBUTES = ('data-old-hires', 'src', 'data-a-dynamic-image', 'data-src')

PRICE_SELECTORS = (
    f'//*[{_cls("a-price")} and {_cls("a-text-price")} and {_cls("a-size-medium")} and {_cls("apexPriceToPay")}]'
    f'//*[{_cls("a-offscreen")}]',
    f'//*[{_cls("a-price")}]//*[{_cls("a-offscreen")}]',
    f'//*[{_cls("a-price-whole")}]',
    f'//*[{_cls("a-price-symbol")}]/following-sibling::*[1][{_cls("a-price-whole")}]',
    '//*[@id="price_inside_buybox"]',
    f'//*[{_cls("a-price")} and {_cls("a-text-price")}]//*[{_cls("a-offscreen")}]',
    f'//*[@data-automation-id="list-price"]//*[{_cls("a-offscreen")}]',
    f'//*[{_cls("a-price-current")}]//*[{_cls("a-offscreen")}]',
)

PRICE_RE = re.compile(r'\$[\d,]+\.?\d*')
_TITLE_SUFFIX_RE = re.compile(r'\s*[-|]\s*Amazon\.com$')


def is_block_page(body: str) -> bool:
    return len(body) < MIN_PAGE_LENGTH or any(marker in body for marker in BLOCK_MARKERS)


def clean_title(text: str) -> str:
    title = re.sub(r'\s+', ' ', text).strip()
    return _TITLE_SUFFIX_RE.sub('', title).strip()


class ScrapeStrategy:
    """Reads product data off the public Amazon product page."""

    name = "scrape"
    available = True

    def __init__(self, settings: Settings, session_factory: Optional[SessionFactory] = None,
                 choose_agent: Callable[[Sequence[str]], str] = random.choice):
        self.session_factory = session_factory or default_session_factory
        self.timeout = ClientTimeout(total=settings.scrape_timeout)
        self.choose_agent = choose_agent

    def get_headers(self):
        return {
            'User-Agent': self.choose_agent(USER_AGENTS),
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
            'Accept-Encoding': 'gzip, deflate',
            'Connection': 'keep-alive',
            'Upgrade-Insecure-Requests': '1',
            'Sec-Fetch-Dest': 'document',
            'Sec-Fetch-Mode': 'navigate',
            'Sec-Fetch-Site': 'none',
            'Cache-Control': 'max-age=0',
        }

    async def fetch(self, asin: str) -> StrategyResult:
        try:
            record = await self._scrape_single_product(asin)
        except ScrapeBlockedError as e:
            logger.warning(f"Amazon blocked scraping request for ASIN {asin}: {e}")
            return StrategyResult.success(ProductRecord.build(asin, None, None, None, RecordSource.BLOCKED))
        except StrategyError as e:
            logger.warning(f"Scraping failed for ASIN {asin}: {e}")
            return StrategyResult.failure(e.reason)
        logger.info(f"Scraping result for ASIN {asin}: title={record.title!r} price={record.price!r}")
        return StrategyResult.success(record)

    async def _scrape_single_product(self, asin: str) -> ProductRecord:
        url = get_amazon_url(asin)
        try:
            async with self.session_factory(self.timeout) as session:
                async with session.get(url, headers=self.get_headers()) as response:
                    status = response.status
                    content = await response.text(errors='replace')
        except asyncio.TimeoutError as e:
            raise TransportError("Scraping request timeout") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"Request error: {e}") from e

        if is_block_page(content):
            raise ScrapeBlockedError(f"Amazon blocked scraping request (status {status}, {len(content)} bytes)")
        if status != 200:
            raise TransportError(f"Status {status}")

        return self.parse_product(content, asin)

    def parse_product(self, content: str, asin: str) -> ProductRecord:
        try:
            tree = html.fromstring(content)
        except (etree.ParserError, ValueError) as e:
            logger.error(f"Parse error for ASIN {asin}: {e}")
            return ProductRecord.build(asin, None, None, None, RecordSource.SCRAPE)

        return ProductRecord.build(
            asin,
            self._extract_title(tree),
            self._extract_image(tree),
            self._extract_price(tree),
            RecordSource.SCRAPE,
        )

    def _extract_title(self, tree) -> Optional[str]:
        for selector in TITLE_SELECTORS:
            for element in tree.xpath(selector)[:1]:
                title = clean_title(element.text_content())
                if title and title.lower() != 'amazon.com':
                    return title
        return None

    def _extract_image(self, tree) -> Optional[str]:
        for selector in IMAGE_SELECTORS:
            for element in tree.xpath(selector)[:1]:
                raw = next((element.get(attr) for attr in IMAGE_ATTRIBUTES if element.get(attr)), None)
                if is_amazon_image(raw):
                    return normalize_image(raw)
        return None

    def _extract_price(self, tree) -> Optional[str]:
        for selector in PRICE_SELECTORS:
            for element in tree.xpath(selector)[:1]:
                text = element.text_content()
                if '$' in text:
                    return text.strip()

        # If no price found, try the whole price block
        for element in tree.xpath(f'//*[{_cls("a-price")}]')[:1]:
            match = PRICE_RE.search(element.text_content())
            if match:
                return match.group(0)
        return None
