"""
Visitor ID and QR access token helpers

The token is base64(JSON) with no signature or MAC. Anyone holding a token can
read and rewrite it, so it is only a carrier for the same-day check at the
gate, not an access credential.
"""

import base64
import binascii
import logging
import secrets
import string
import time
from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from vrms.utils.timeutils import get_current_date_time

logger = logging.getLogger(__name__)

VISITOR_ID_PREFIX = "VIS"

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_SUFFIX_LENGTH = 8


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id(prefix: str = VISITOR_ID_PREFIX) -> str:
    """
    Prefix + base36 epoch milliseconds + random base36 suffix, upper-cased.
    Unique with high probability only; callers that key by ID must check for
    collisions themselves.
    """
    timestamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(_RANDOM_SUFFIX_LENGTH))
    return f"{prefix}{timestamp}{suffix}".upper()


def generate_visitor_id() -> str:
    return generate_id(VISITOR_ID_PREFIX)


class TokenPayload(BaseModel):
    """Decoded QR token. JSON keys are camelCase on the wire."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    visitor_id: str = Field(alias="visitorId")
    visit_date: str = Field(alias="visitDate")
    unit: str
    timestamp: datetime
    access_key: str = Field(alias="accessKey")


def _b64(raw: str) -> str:
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def _date_str(value: Union[date, str]) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def generate_access_key(visitor_id: str, now: Optional[datetime] = None) -> str:
    """Reversible key bound to the visitor ID and generation time."""
    now = now or get_current_date_time()
    return _b64(f"{visitor_id}-{int(now.timestamp() * 1000)}")


def generate_qr_code(
    visitor_id: str,
    visit_date: Union[date, str],
    unit: str,
    now: Optional[datetime] = None,
) -> str:
    """Build the QR payload for a visit and serialize it to an ASCII token."""
    now = now or get_current_date_time()
    payload = TokenPayload(
        visitor_id=visitor_id,
        visit_date=_date_str(visit_date),
        unit=unit,
        timestamp=now,
        access_key=generate_access_key(visitor_id, now),
    )
    return _b64(payload.model_dump_json(by_alias=True))


def parse_qr_code(token: str) -> Optional[TokenPayload]:
    """
    Decode a token produced by generate_qr_code.
    Returns None for anything malformed; never raises.
    """
    if not isinstance(token, str) or not token.strip():
        logger.warning("QR_PARSE_FAIL | err=empty token")
        return None

    try:
        raw = base64.b64decode(token.strip(), validate=True)
        return TokenPayload.model_validate_json(raw)
    except (binascii.Error, ValueError) as e:
        # pydantic ValidationError and UnicodeDecodeError are ValueErrors
        logger.warning(f"QR_PARSE_FAIL | token_len={len(token)} err={e.__class__.__name__}")
        return None


def is_qr_code_valid(token: str, expected_date: Union[date, str]) -> bool:
    """Valid iff the token decodes and was issued for expected_date."""
    payload = parse_qr_code(token)
    if payload is None:
        return False
    return payload.visit_date == _date_str(expected_date)
