"""AWS Signature Version 4 for the Product Advertising API 5.0.

PA-API recomputes the signature on its side, so the header set, their order
and casing below have to match exactly what the service expects.
"""
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Dict, Optional

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "ProductAdvertisingAPI"
CONTENT_TYPE = "application/json; charset=utf-8"
TARGET_PREFIX = "com.amazon.paapi5.v1.ProductAdvertisingAPIv1"


def _sign(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def get_signature_key(secret_key: str, date_stamp: str, region: str, service: str = SERVICE) -> bytes:
    k_date = _sign(("AWS4" + secret_key).encode("utf-8"), date_stamp)
    k_region = _sign(k_date, region)
    k_service = _sign(k_region, service)
    return _sign(k_service, "aws4_request")


def canonical_request(method: str, uri: str, query: str, headers: Dict[str, str], payload: bytes) -> str:
    names = sorted(name.lower() for name in headers)
    lowered = {name.lower(): value.strip() for name, value in headers.items()}
    canonical_headers = "".join(f"{name}:{lowered[name]}\n" for name in names)
    return "\n".join([
        method,
        uri,
        query,
        canonical_headers,
        ";".join(names),
        _sha256_hex(payload),
    ])


def string_to_sign(amz_date: str, credential_scope: str, request: str) -> str:
    return "\n".join([
        ALGORITHM,
        amz_date,
        credential_scope,
        _sha256_hex(request.encode("utf-8")),
    ])


def sign_request(
    access_key: str,
    secret_key: str,
    host: str,
    region: str,
    operation: str,
    payload: bytes,
    now: Optional[datetime] = None,
) -> Dict[str, str]:
    """Build the signed headers for a PA-API POST.

    operation is the PA-API operation name, "GetItems" here; the URI is /paapi5/<operation lowercased>.
    Returns the headers to send, Authorization included.
    """
    t = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    amz_date = t.strftime("%Y%m%dT%H%M%SZ")
    date_stamp = t.strftime("%Y%m%d")
    target = f"{TARGET_PREFIX}.{operation}"

    signed = {
        "content-type": CONTENT_TYPE,
        "host": host,
        "x-amz-date": amz_date,
        "x-amz-target": target,
    }
    request = canonical_request("POST", f"/paapi5/{operation.lower()}", "", signed, payload)
    credential_scope = f"{date_stamp}/{region}/{SERVICE}/aws4_request"
    key = get_signature_key(secret_key, date_stamp, region)
    signature = hmac.new(key, string_to_sign(amz_date, credential_scope, request).encode("utf-8"),
                         hashlib.sha256).hexdigest()

    return {
        "Authorization": (
            f"{ALGORITHM} Credential={access_key}/{credential_scope}, "
            f"SignedHeaders={';'.join(sorted(signed))}, Signature={signature}"
        ),
        "Content-Type": CONTENT_TYPE,
        "Host": host,
        "X-Amz-Date": amz_date,
        "X-Amz-Target": target,
    }
