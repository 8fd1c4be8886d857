"""Preview-mode authorisation.

An editor opens a preview link carrying ``agilitypreviewkey``.  The key is a
SHA-512 digest of a string derived from the instance's security key, so it
can be checked locally without calling the CMS.
"""

import base64
import hashlib
import logging
from typing import Optional
from urllib.parse import urlparse

from itsdangerous import BadSignature, URLSafeTimedSerializer

from pageprops.config import Settings
from pageprops.models.preview import PreviewValidation

logger = logging.getLogger(__name__)

PREVIEW_COOKIE = "agility_preview"

# Preview sessions last one working day
PREVIEW_MAX_AGE = 8 * 60 * 60
_PREVIEW_SALT = "agility-preview-session"


def generate_preview_key(security_key: str) -> str:
    """Return the base64 SHA-512 preview key for *security_key*.

    The hashed bytes are each character code followed by a zero byte, which
    is UTF-16LE for the ASCII keys the CMS issues.
    """
    value = f"-1_{security_key}_Preview"

    data = bytearray()
    for char in value:
        data.append(ord(char) & 0xFF)
        data.append(0)

    digest = hashlib.sha512(bytes(data)).digest()
    return base64.b64encode(digest).decode("ascii")


async def validate_slug_for_preview(slug: Optional[str]) -> PreviewValidation:
    """Check that the page being previewed exists.

    Always succeeds: preview links for pages not yet in the synced sitemap
    (new drafts) must still open.
    """
    return PreviewValidation(error=False, message=None)


async def validate_preview(
    preview_key: Optional[str],
    slug: Optional[str],
    settings: Settings,
) -> PreviewValidation:
    """Validate an inbound preview key and the slug it targets."""
    if not preview_key:
        return PreviewValidation(error=True, message="Missing agilitypreviewkey.")

    # URL decoding turns '+' in the base64 key into spaces
    preview_key = preview_key.replace(" ", "+")

    if preview_key != generate_preview_key(settings.security_key):
        logger.warning("Rejected preview request for slug %s: invalid key", slug)
        return PreviewValidation(error=True, message="Invalid agilitypreviewkey.")

    slug_result = await validate_slug_for_preview(slug)
    if slug_result.error:
        return slug_result

    return PreviewValidation(error=False, message=None)


def _preview_serializer(settings: Settings) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.security_key, salt=_PREVIEW_SALT)


def issue_preview_token(settings: Settings) -> str:
    """Return the signed cookie value that marks a validated preview session."""
    return _preview_serializer(settings).dumps({"preview": True})


def verify_preview_token(
    token: Optional[str],
    settings: Settings,
    max_age: int = PREVIEW_MAX_AGE,
) -> bool:
    """Return *True* only for an unexpired token signed with the security key."""
    if not token or not settings.security_key:
        return False
    try:
        payload = _preview_serializer(settings).loads(token, max_age=max_age)
    except BadSignature:
        # SignatureExpired is a BadSignature too
        return False
    return isinstance(payload, dict) and payload.get("preview") is True


def safe_redirect_target(slug: Optional[str]) -> Optional[str]:
    """Turn *slug* into a same-site path, or *None* if it points off-site."""
    if not slug:
        return "/"
    # Browsers treat '\' like '/', so '/\evil.example' is protocol-relative too
    if "\\" in slug or slug.startswith("//"):
        return None
    parsed = urlparse(slug)
    if parsed.scheme or parsed.netloc:
        return None
    return slug if slug.startswith("/") else "/" + slug
