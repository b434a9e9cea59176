import logging
import re
from types import MappingProxyType
from typing import Mapping, Optional
from urllib.parse import unquote

from golink.config import DEFAULT_SHORT_LINKS

logger = logging.getLogger(__name__)

ASIN_RE = re.compile(r"^[A-Z0-9]{10}$", re.IGNORECASE)

# Tried in order, first valid match wins
URL_PATTERNS = (
    re.compile(r"/dp/([A-Z0-9]{10})", re.IGNORECASE),
    re.compile(r"/product/([A-Z0-9]{10})", re.IGNORECASE),
    re.compile(r"/gp/product/([A-Z0-9]{10})", re.IGNORECASE),
    re.compile(r"asin=([A-Z0-9]{10})", re.IGNORECASE),
    re.compile(r"/([A-Z0-9]{10})(?:/|$|\?)", re.IGNORECASE),
)


def is_valid_asin(candidate: Optional[str]) -> bool:
    return bool(candidate) and ASIN_RE.match(candidate) is not None


class AsinExtractor:
    """Pulls an ASIN out of a request path or a full Amazon URL."""

    def __init__(self, short_links: Mapping[str, str] = DEFAULT_SHORT_LINKS):
        self.short_links = MappingProxyType(dict(short_links))

    def extract(self, path_segment: Optional[str], url_param: Optional[str]) -> Optional[str]:
        if url_param:
            return self.from_url(unquote(url_param))
        return self.from_path(path_segment)

    def from_url(self, url: str) -> Optional[str]:
        for short_url, asin in self.short_links.items():
            if short_url in url:
                logger.info(f"Matched known short link {short_url} -> {asin}")
                return asin

        for pattern in URL_PATTERNS:
            match = pattern.search(url)
            if match and is_valid_asin(match.group(1)):
                return match.group(1)

        logger.info(f"No ASIN found in url parameter: {url}")
        return None

    def from_path(self, path: Optional[str]) -> Optional[str]:
        if not path:
            return None
        candidate = path.lstrip("/").split("/")[0]
        if len(candidate) == 10 and is_valid_asin(candidate):
            return candidate
        return None
