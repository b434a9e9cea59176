from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from golink.utils import fallback_image, fallback_title


class RecordSource(str, Enum):
    PAAPI = "paapi"
    SCRAPE = "scrape"
    BLOCKED = "blocked"
    FALLBACK = "fallback"


class ProductRecord(BaseModel):
    """Product metadata handed to the page renderer.

    Title and image are always populated; price is display text and may be empty.
    """

    model_config = ConfigDict(frozen=True)

    asin: str
    title: str
    image: str
    price: str = ""
    source: RecordSource = RecordSource.FALLBACK

    @field_validator("title", "image")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    @classmethod
    def build(cls, asin: str, title: Optional[str], image: Optional[str],
              price: Optional[str], source: RecordSource) -> "ProductRecord":
        """Create a record, substituting placeholders for a missing title or image."""
        return cls(
            asin=asin,
            title=(title or "").strip() or fallback_title(asin),
            image=(image or "").strip() or fallback_image(asin),
            price=(price or "").strip(),
            source=source,
        )

    @classmethod
    def placeholder(cls, asin: str) -> "ProductRecord":
        return cls.build(asin, None, None, None, RecordSource.FALLBACK)

    @property
    def is_generic(self) -> bool:
        """True when the title or image is a synthesized placeholder."""
        return self.title == fallback_title(self.asin) or self.image == fallback_image(self.asin)


class StrategyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: bool
    record: Optional[ProductRecord] = None
    reason: str = ""

    @classmethod
    def success(cls, record: ProductRecord) -> "StrategyResult":
        return cls(ok=True, record=record)

    @classmethod
    def failure(cls, reason: str) -> "StrategyResult":
        return cls(ok=False, reason=reason)
