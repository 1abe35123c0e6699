from __future__ import annotations

import json

import httpx
import pytest

from eli5.core.errors import (
    RATE_LIMITED_MESSAGE,
    ConfigMissing,
    EmptyGeneration,
    UpstreamFailure
)
from eli5.services.openai_client import OpenAIClient, parse_output_text
from eli5.services.prompt import build_prompt


def client_for(handler) -> OpenAIClient:
    return OpenAIClient('https://api.openai.com/v1', 'sk-test-key', transport=httpx.MockTransport(handler))


def completion(content) -> dict:
    return {'choices': [{'index': 0, 'message': {'role': 'assistant', 'content': content}}]}


@pytest.mark.asyncio
async def test_explain_posts_fixed_generation_params():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append({'path': request.url.path, 'auth': request.headers['authorization'], 'body': json.loads(request.content)})
        return httpx.Response(200, json=completion('  Imagine a lemonade stand.  '))

    prompt = build_prompt('gm', ['https://x.com/a.png'], 'es')
    client = client_for(handler)
    try:
        text = await client.explain(prompt)
    finally:
        await client.close()

    assert text == 'Imagine a lemonade stand.'
    request = seen[0]
    assert request['path'] == '/v1/chat/completions'
    assert request['auth'] == 'Bearer sk-test-key'
    body = request['body']
    assert body['model'] == 'gpt-4o'
    assert body['temperature'] == 0.7
    assert body['max_tokens'] == 300
    assert body['messages'][0]['content'].endswith('Respond ONLY in Spanish. Do not use any English.')
    assert [part['type'] for part in body['messages'][1]['content']] == ['text', 'image_url']


@pytest.mark.asyncio
@pytest.mark.parametrize('content', ['', '   ', None])
async def test_empty_generation(content):
    client = client_for(lambda request: httpx.Response(200, json=completion(content)))
    try:
        with pytest.raises(EmptyGeneration):
            await client.explain(build_prompt('gm', None, 'en'))
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_rate_limit_message():
    client = client_for(lambda request: httpx.Response(429, json={'error': {'message': 'slow down'}}))
    try:
        with pytest.raises(UpstreamFailure) as excinfo:
            await client.explain(build_prompt('gm', None, 'en'))
    finally:
        await client.close()
    assert excinfo.value.message == RATE_LIMITED_MESSAGE


@pytest.mark.asyncio
async def test_rejected_key_is_a_config_error():
    client = client_for(lambda request: httpx.Response(401, json={'error': {'message': 'bad key sk-test-key'}}))
    try:
        with pytest.raises(ConfigMissing) as excinfo:
            await client.explain(build_prompt('gm', None, 'en'))
    finally:
        await client.close()
    assert 'sk-test-key' not in excinfo.value.message


@pytest.mark.asyncio
async def test_server_error_is_upstream_failure():
    client = client_for(lambda request: httpx.Response(500, text='internal trace'))
    try:
        with pytest.raises(UpstreamFailure) as excinfo:
            await client.explain(build_prompt('gm', None, 'en'))
    finally:
        await client.close()
    assert 'internal trace' not in excinfo.value.message


def test_parse_output_text_reads_first_choice():
    assert parse_output_text(completion('first')) == 'first'
    assert parse_output_text(completion([{'type': 'text', 'text': 'parts'}])) == ''
    assert parse_output_text({'choices': [{'text': 'legacy'}]}) == ''
    assert parse_output_text({'choices': []}) == ''
    assert parse_output_text('nope') == ''
