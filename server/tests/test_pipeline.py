from __future__ import annotations

import pytest

from eli5.core.errors import ConfigMissing, InvalidUrl
from eli5.services import pipeline
from eli5.services.prompt import NO_CONTENT_MESSAGE


@pytest.fixture
def fake_openai(monkeypatch):
    class FakeOpenAIClient:
        instances: list['FakeOpenAIClient'] = []

        def __init__(self):
            self.prompts = []
            self.closed = False

        @classmethod
        async def create(cls):
            client = cls()
            cls.instances.append(client)
            return client

        async def explain(self, prompt):
            self.prompts.append(prompt)
            return 'A simple answer.'

        async def close(self):
            self.closed = True

    monkeypatch.setattr(pipeline, 'OpenAIClient', FakeOpenAIClient)
    return FakeOpenAIClient


@pytest.fixture
def forbid_neynar(monkeypatch):
    class NoNetwork:
        @classmethod
        async def create(cls):
            raise AssertionError('network client must not be created')

    monkeypatch.setattr(pipeline, 'NeynarClient', NoNetwork)


@pytest.mark.asyncio
async def test_no_content_never_calls_the_model(configured, fake_openai):
    explanation = await pipeline.explain_cast('', 'en', None)

    assert explanation == NO_CONTENT_MESSAGE
    assert fake_openai.instances == []


@pytest.mark.asyncio
async def test_all_invalid_images_fall_back_to_text_only(configured, fake_openai):
    explanation = await pipeline.explain_cast('gm', 'en', ['ftp://bad', 'not a url'])

    assert explanation == 'A simple answer.'
    client = fake_openai.instances[0]
    prompt = client.prompts[0]
    assert prompt.image_count == 0
    assert prompt.content[0].text == 'Explain this post in simple terms:\n\n"gm"'
    assert client.closed


@pytest.mark.asyncio
async def test_missing_keys_fail_before_any_network_call(unconfigured, fake_openai, forbid_neynar):
    with pytest.raises(ConfigMissing):
        await pipeline.resolve_cast('https://warpcast.com/a/0x1')
    with pytest.raises(ConfigMissing):
        await pipeline.explain_cast('gm', 'en', None)
    assert fake_openai.instances == []


@pytest.mark.asyncio
async def test_missing_generation_key_blocks_resolution(monkeypatch, configured, forbid_neynar):
    monkeypatch.setattr(configured, 'openai_api_key', None)
    with pytest.raises(ConfigMissing) as excinfo:
        await pipeline.resolve_cast('https://warpcast.com/a/0x1')
    assert excinfo.value.message.startswith('OpenAI')


@pytest.mark.asyncio
async def test_invalid_url_fails_before_network(configured, forbid_neynar):
    with pytest.raises(InvalidUrl):
        await pipeline.resolve_cast('https://example.com/a/0x1')
