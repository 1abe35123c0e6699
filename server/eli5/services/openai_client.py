from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.config import get_settings
from ..core.errors import (
    GENERATE_FAILED_MESSAGE,
    RATE_LIMITED_MESSAGE,
    ConfigMissing,
    EmptyGeneration,
    UpstreamFailure
)
from ..schemas.explain import PromptPayload

logger = logging.getLogger(__name__)

SERVICE_NAME = 'OpenAI'

# gpt-4o for vision support
EXPLAIN_MODEL = 'gpt-4o'
EXPLAIN_TEMPERATURE = 0.7
EXPLAIN_MAX_TOKENS = 300


class OpenAIClient:
    def __init__(self, base_url: str, api_key: str, timeout: float = 15.0, transport: httpx.AsyncBaseTransport | None = None):
        normalized_base = base_url.rstrip('/') if base_url else ''
        if not normalized_base:
            normalized_base = 'https://api.openai.com/v1'
        self._client = httpx.AsyncClient(base_url=normalized_base, timeout=timeout, transport=transport)
        self._api_key = api_key

    @classmethod
    async def create(
        cls,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None
    ) -> 'OpenAIClient':
        settings = get_settings()
        key = (api_key or settings.openai_api_key or '').strip()
        if not key:
            raise ConfigMissing.for_service(SERVICE_NAME)
        base = settings.openai_base_url.strip() if settings.openai_base_url else ''
        return cls(base, key, timeout=settings.http_timeout, transport=transport)

    def build_request(self, prompt: PromptPayload) -> dict[str, Any]:
        return {
            'model': EXPLAIN_MODEL,
            'messages': prompt.to_messages(),
            'temperature': EXPLAIN_TEMPERATURE,
            'max_tokens': EXPLAIN_MAX_TOKENS,
        }

    async def explain(self, prompt: PromptPayload) -> str:
        payload = self.build_request(prompt)
        logger.info(
            'Requesting explanation: model=%s parts=%d images=%d',
            payload['model'],
            len(prompt.content),
            prompt.image_count
        )
        try:
            response = await self._client.post(
                '/chat/completions',
                headers={'Authorization': f'Bearer {self._api_key}'},
                json=payload
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning('Explanation request failed (%s): %s', status, exc.response.text[:500])
            if status in (401, 403):
                raise ConfigMissing.for_service(SERVICE_NAME) from exc
            if status == 429:
                raise UpstreamFailure(RATE_LIMITED_MESSAGE) from exc
            raise UpstreamFailure(GENERATE_FAILED_MESSAGE) from exc
        except httpx.HTTPError as exc:
            logger.warning('Explanation request transport error: %s', exc)
            raise UpstreamFailure(GENERATE_FAILED_MESSAGE) from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning('Explanation response was not JSON')
            raise UpstreamFailure(GENERATE_FAILED_MESSAGE) from exc

        text = parse_output_text(data).strip()
        if not text:
            raise EmptyGeneration()
        return text

    async def close(self) -> None:
        await self._client.aclose()


def parse_output_text(payload: Any) -> str:
    """Text of the first choice's message, or ``''``."""
    if not isinstance(payload, dict):
        return ''
    choices = payload.get('choices')
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ''
    message = choices[0].get('message')
    if isinstance(message, dict) and isinstance(message.get('content'), str):
        return message['content']
    return ''
