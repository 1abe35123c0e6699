from __future__ import annotations

import logging
from typing import Sequence

from ..core.config import get_settings
from ..core.errors import ConfigMissing
from ..schemas.cast import DEFAULT_LANGUAGE, Cast
from .neynar_client import SERVICE_NAME as NEYNAR
from .neynar_client import NeynarClient
from .openai_client import SERVICE_NAME as OPENAI
from .openai_client import OpenAIClient
from .prompt import NO_CONTENT_MESSAGE, build_prompt
from .urls import normalize_cast_url, validate_image_urls

logger = logging.getLogger(__name__)


def ensure_configured() -> None:
    settings = get_settings()
    if not (settings.neynar_api_key or '').strip():
        raise ConfigMissing.for_service(NEYNAR)
    if not (settings.openai_api_key or '').strip():
        raise ConfigMissing.for_service(OPENAI)


async def resolve_cast(raw_url: str) -> Cast:
    ensure_configured()
    normalized = normalize_cast_url(raw_url)
    client = await NeynarClient.create()
    try:
        return await client.fetch_cast(normalized)
    finally:
        await client.close()


async def explain_cast(
    text: str | None,
    language: str = DEFAULT_LANGUAGE,
    images: Sequence[str] | None = None
) -> str:
    ensure_configured()
    prompt = build_prompt(text, validate_image_urls(images), language)
    if prompt is None:
        logger.info('Nothing to explain, skipping generation')
        return NO_CONTENT_MESSAGE
    client = await OpenAIClient.create()
    try:
        return await client.explain(prompt)
    finally:
        await client.close()
