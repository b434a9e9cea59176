import json
import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

AMAZON_IMAGE_HOSTS = ("images-na.ssl-images-amazon.com", "m.media-amazon.com")

# Size tokens rewritten to the 1500px rendition, applied in order
_SIZE_REWRITES = (
    (re.compile(r"\._[A-Z0-9,_]*\."), "._AC_SL1500_."),
    (re.compile(r"\._SX\d+_"), "._SX1500_"),
    (re.compile(r"\._SY\d+_"), "._SY1500_"),
    (re.compile(r"\._AC_UL\d+_"), "._AC_UL1500_"),
    (re.compile(r"\._AC_UY\d+_"), "._AC_UY1500_"),
    (re.compile(r"\._SS\d+_"), "._SL1500_"),
    (re.compile(r",\d+_"), "_"),
)

_QUOTED_IMAGE_RE = re.compile(r'"([^"]*\.(?:jpg|jpeg|png|webp)[^"]*)"', re.IGNORECASE)


def is_amazon_image(url: Optional[str]) -> bool:
    return bool(url) and any(host in url for host in AMAZON_IMAGE_HOSTS)


def _url_size(url: str, dims=None) -> int:
    match = re.search(r"_SX(\d+)_", url) or re.search(r"(\d+)x\d+", url)
    if match:
        return int(match.group(1))
    if isinstance(dims, (list, tuple)) and dims:
        try:
            return int(dims[0])
        except (TypeError, ValueError):
            return 0
    return 0


def pick_largest(blob: str) -> Optional[str]:
    """Choose the biggest URL from a data-a-dynamic-image JSON blob ({url: [w, h]})."""
    try:
        data = json.loads(blob)
    except ValueError:
        match = _QUOTED_IMAGE_RE.search(blob)
        return match.group(1) if match else None
    if not isinstance(data, dict) or not data:
        return None
    return max(data, key=lambda url: _url_size(url, data[url]))


def upscale(url: str) -> str:
    """Rewrite Amazon size suffixes so the URL points at a high resolution rendition."""
    if "amazon.com" not in url and "ssl-images-amazon" not in url:
        return url
    for pattern, replacement in _SIZE_REWRITES:
        url = pattern.sub(replacement, url)
    return url


def normalize_image(raw: Optional[str]) -> Optional[str]:
    if not raw:
        return None
    raw = raw.strip()
    image = pick_largest(raw) if raw.startswith("{") else raw
    if not image:
        logger.debug("Dynamic image blob held no usable URL")
        return None
    return upscale(image)
