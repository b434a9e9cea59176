import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from golink.config import Settings
from golink.exceptions import PaapiError, StrategyError, TransportError
from golink.models import ProductRecord, RecordSource, StrategyResult
from golink.signing import sign_request

logger = logging.getLogger(__name__)

RESOURCES = [
    "ItemInfo.Title",
    "ItemInfo.Features",
    "Images.Primary.Large",
    "Images.Primary.Medium",
    "Images.Primary.Small",
    "Offers.Listings.Price",
    "ItemInfo.ProductInfo",
]

SessionFactory = Callable[[ClientTimeout], aiohttp.ClientSession]


def default_session_factory(timeout: ClientTimeout) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(timeout=timeout)


def _first(lst):
    return lst[0] if isinstance(lst, list) and lst else None


def _dict(value) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_get_items(response: Dict[str, Any], asin: str) -> ProductRecord:
    """Map a GetItems response body onto a record, filling gaps with placeholders.

    Raises PaapiError when ItemsResult or the item itself is not an object.
    """
    items_result = response.get("ItemsResult") or {}
    if not isinstance(items_result, dict):
        raise PaapiError("ItemsResult is not an object")
    item = _first(items_result.get("Items")) or {}
    if not isinstance(item, dict):
        raise PaapiError("item is not an object")

    title = _dict(_dict(item.get("ItemInfo")).get("Title")).get("DisplayValue")
    if not isinstance(title, str):
        title = None

    image = None
    primary = _dict(_dict(item.get("Images")).get("Primary"))
    for size in ("Large", "Medium", "Small"):
        url = _dict(primary.get(size)).get("URL")
        if url and isinstance(url, str):
            image = url
            break

    listing = _dict(_first(_dict(item.get("Offers")).get("Listings")))
    price = _dict(listing.get("Price")).get("DisplayAmount")
    if not isinstance(price, str):
        price = None

    return ProductRecord.build(asin, title, image, price, RecordSource.PAAPI)


class PaapiStrategy:
    """Fetches product data through the signed PA-API 5.0 GetItems call."""

    name = "paapi"

    def __init__(self, settings: Settings, session_factory: Optional[SessionFactory] = None):
        self.settings = settings
        self.session_factory = session_factory or default_session_factory
        self.timeout = ClientTimeout(total=settings.paapi_timeout)

    @property
    def available(self) -> bool:
        return self.settings.credentials_available

    def build_payload(self, asin: str) -> bytes:
        return json.dumps({
            "ItemIds": [asin],
            "Resources": RESOURCES,
            "PartnerTag": self.settings.partner_tag,
            "PartnerType": "Associates",
            "Marketplace": self.settings.paapi_marketplace,
        }).encode("utf-8")

    async def fetch(self, asin: str) -> StrategyResult:
        try:
            record = await self._get_item(asin)
        except StrategyError as e:
            logger.warning(f"PA-API failed for ASIN {asin}: {e}")
            return StrategyResult.failure(e.reason)
        logger.info(f"PA-API resolved ASIN {asin}")
        return StrategyResult.success(record)

    async def _get_item(self, asin: str) -> ProductRecord:
        payload = self.build_payload(asin)
        headers = sign_request(
            self.settings.access_key,
            self.settings.secret_key,
            self.settings.paapi_host,
            self.settings.paapi_region,
            "GetItems",
            payload,
        )
        url = f"https://{self.settings.paapi_host}/paapi5/getitems"

        try:
            async with self.session_factory(self.timeout) as session:
                async with session.post(url, data=payload, headers=headers) as response:
                    status = response.status
                    body = await response.text(errors="replace")
        except asyncio.TimeoutError as e:
            raise TransportError("PA-API request timeout") from e
        except aiohttp.ClientError as e:
            raise TransportError(f"PA-API request error: {e}") from e

        logger.info(f"PA-API response status {status} for ASIN {asin}")

        try:
            data = json.loads(body)
        except ValueError as e:
            raise PaapiError(f"unreadable response body (status {status})") from e
        if not isinstance(data, dict):
            raise PaapiError(f"unexpected response shape (status {status})")

        errors = data.get("Errors")
        if errors:
            first = _dict(_first(errors)) if isinstance(errors, list) else _dict(errors)
            raise PaapiError(f"{first.get('Code', 'Error')}: {first.get('Message', 'unknown error')}")

        output_type = str(_dict(data.get("Output")).get("__type", ""))
        if "InternalFailure" in output_type:
            raise PaapiError("internal failure, check ACCESS_KEY, SECRET_KEY and PARTNER_TAG")

        if not 200 <= status < 300:
            raise TransportError(f"Status {status}")

        return parse_get_items(data, asin)
