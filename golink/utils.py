# utils.py

FALLBACK_IMAGE_TEMPLATE = "https://images-na.ssl-images-amazon.com/images/P/{asin}.01._SL1500_.jpg"


# Function to construct the Amazon product URL from the ASIN
def get_amazon_url(asin: str) -> str:
    """
    Construct Amazon product URL from the provided ASIN.

    Args:
        asin (str): The Amazon Standard Identification Number (ASIN) of the product.

    Returns:
        str: The constructed Amazon product URL.
    """
    return f"https://www.amazon.com/dp/{asin}"


def get_affiliate_url(asin: str, partner_tag: str) -> str:
    """Amazon product URL carrying the affiliate partner tag."""
    return f"{get_amazon_url(asin)}?tag={partner_tag}"


def fallback_title(asin: str) -> str:
    return f"Amazon Product {asin}"


def fallback_image(asin: str) -> str:
    """Deterministic image URL Amazon serves for any ASIN."""
    return FALLBACK_IMAGE_TEMPLATE.format(asin=asin)
