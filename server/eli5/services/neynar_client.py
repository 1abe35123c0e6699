from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from ..core.config import get_settings
from ..core.errors import (
    FETCH_FAILED_MESSAGE,
    RATE_LIMITED_MESSAGE,
    CastNotFound,
    ConfigMissing,
    UpstreamFailure
)
from ..schemas.cast import Cast, CastAuthor
from ..schemas.neynar import NeynarCast, NeynarCastResponse
from .embeds import extract_image_urls
from .merge import CastSource, merge_quote

logger = logging.getLogger(__name__)

SERVICE_NAME = 'Neynar'


def _to_source(cast: NeynarCast) -> CastSource:
    author = cast.author
    return CastSource(
        text=cast.text or '',
        author=CastAuthor.build(author.fid, author.username, author.display_name, author.pfp_url),
        images=extract_image_urls(cast.embeds),
    )


def build_cast(cast: NeynarCast) -> Cast:
    parent = cast.quoted_cast()
    merged = merge_quote(_to_source(cast), _to_source(parent) if parent else None)
    return Cast(
        hash=cast.hash,
        text=merged.text,
        images=merged.images or None,
        author=merged.author,
    )


class NeynarClient:
    def __init__(self, base_url: str, api_key: str, timeout: float = 15.0, transport: httpx.AsyncBaseTransport | None = None):
        normalized_base = base_url.rstrip('/') if base_url else 'https://api.neynar.com/v2'
        self._client = httpx.AsyncClient(base_url=normalized_base, timeout=timeout, transport=transport)
        self._api_key = api_key

    @classmethod
    async def create(
        cls,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None
    ) -> 'NeynarClient':
        settings = get_settings()
        key = (api_key or settings.neynar_api_key or '').strip()
        if not key:
            raise ConfigMissing.for_service(SERVICE_NAME)
        return cls(settings.neynar_base_url, key, timeout=settings.http_timeout, transport=transport)

    async def fetch_cast(self, normalized_url: str) -> Cast:
        try:
            response = await self._client.get(
                '/farcaster/cast',
                params={'identifier': normalized_url, 'type': 'url'},
                headers={'accept': 'application/json', 'x-api-key': self._api_key}
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning('Neynar cast lookup failed (%s): %s', status, exc.response.text[:500])
            if status in (401, 403):
                raise ConfigMissing.for_service(SERVICE_NAME) from exc
            if status == 429:
                raise UpstreamFailure(RATE_LIMITED_MESSAGE) from exc
            if status >= 500:
                raise UpstreamFailure(FETCH_FAILED_MESSAGE) from exc
            raise CastNotFound() from exc
        except httpx.HTTPError as exc:
            logger.warning('Neynar cast lookup transport error: %s', exc)
            raise UpstreamFailure(FETCH_FAILED_MESSAGE) from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning('Neynar returned a non-JSON body')
            raise UpstreamFailure(FETCH_FAILED_MESSAGE) from exc

        try:
            parsed = NeynarCastResponse.model_validate(data)
        except ValidationError as exc:
            logger.warning('Neynar cast payload did not validate: %s', exc.errors()[:3])
            raise CastNotFound() from exc
        if parsed.cast is None:
            raise CastNotFound()

        cast = build_cast(parsed.cast)
        logger.info('Resolved cast %s with %d image(s)', cast.hash, len(cast.images or []))
        return cast

    async def close(self) -> None:
        await self._client.aclose()
