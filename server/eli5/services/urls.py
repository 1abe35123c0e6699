from __future__ import annotations

import logging
from typing import Iterable
from urllib.parse import urlparse

from ..core.errors import InvalidUrl

logger = logging.getLogger(__name__)

PRIMARY_CAST_DOMAIN = 'warpcast.com'
ALTERNATE_CAST_DOMAIN = 'farcaster.xyz'

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.webp')

# Hosts that serve images without a file extension in the path.
IMAGE_HOST_PATTERNS = (
    'imagedelivery.net',
    'wrpcd.net',
    'i.imgur.com',
    'res.cloudinary.com',
    'media.tenor.com',
    'i.giphy.com',
    'media.giphy.com',
    'pbs.twimg.com',
    'i.seadn.io',
)


def normalize_cast_url(raw_url: str) -> str:
    url = (raw_url or '').strip()
    is_primary = PRIMARY_CAST_DOMAIN in url
    is_alternate = ALTERNATE_CAST_DOMAIN in url
    if not is_primary and not is_alternate:
        raise InvalidUrl()
    if is_alternate:
        # The indexing API only understands the primary domain.
        url = url.replace(ALTERNATE_CAST_DOMAIN, PRIMARY_CAST_DOMAIN, 1)
    if not url.lower().startswith(('https://', 'http://')):
        url = f'https://{url}'
    return url


def build_share_url(username: str | None, fid: int, cast_hash: str) -> str:
    return f'https://{PRIMARY_CAST_DOMAIN}/{username or fid}/{cast_hash}'


def _safe_parse(url: str):
    try:
        return urlparse(url)
    except ValueError:
        return None


def has_image_extension(url: str) -> bool:
    parsed = _safe_parse(url)
    path = (parsed.path if parsed else url).lower()
    return path.endswith(IMAGE_EXTENSIONS)


def is_image_host(url: str) -> bool:
    parsed = _safe_parse(url)
    host = ((parsed.hostname if parsed else None) or '').lower()
    if not host:
        return False
    return any(host == pattern or host.endswith(f'.{pattern}') for pattern in IMAGE_HOST_PATTERNS)


def looks_like_http_url(value: str) -> bool:
    lowered = value.lower()
    return 'http://' in lowered or 'https://' in lowered


def is_valid_http_url(url: str) -> bool:
    if not isinstance(url, str):
        return False
    parsed = _safe_parse(url.strip())
    if parsed is None:
        return False
    return parsed.scheme in {'http', 'https'} and bool(parsed.netloc)


def validate_image_urls(images: Iterable[str] | None) -> list[str] | None:
    """Drop anything that is not an absolute http(s) URL.

    Returns ``None`` rather than an empty list when nothing survives, so
    callers fall back to a text-only request.
    """
    if not images:
        return None
    valid: list[str] = []
    for url in images:
        if is_valid_http_url(url):
            valid.append(url)
        else:
            logger.debug('Dropping invalid image URL: %r', url)
    return valid or None
