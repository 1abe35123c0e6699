from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LanguageCode = Literal[
    'en', 'es', 'fr', 'de', 'pt', 'it', 'nl', 'ja',
    'ko', 'zh', 'ru', 'ar', 'hi', 'tr', 'pl',
]

SUPPORTED_LANGUAGES: dict[str, str] = {
    'en': 'English',
    'es': 'Spanish',
    'fr': 'French',
    'de': 'German',
    'pt': 'Portuguese',
    'it': 'Italian',
    'nl': 'Dutch',
    'ja': 'Japanese',
    'ko': 'Korean',
    'zh': 'Chinese',
    'ru': 'Russian',
    'ar': 'Arabic',
    'hi': 'Hindi',
    'tr': 'Turkish',
    'pl': 'Polish',
}

DEFAULT_LANGUAGE: LanguageCode = 'en'

AVATAR_URL_TEMPLATE = 'https://api.dicebear.com/9.x/lorelei/svg?seed={fid}'


class AppState(str, Enum):
    loading = 'loading'
    no_cast = 'no-cast'
    explaining = 'explaining'
    result = 'result'


class CastAuthor(BaseModel):
    model_config = ConfigDict(frozen=True)

    fid: int
    username: str = ''
    displayName: str = 'Unknown'
    pfpUrl: str = ''

    @model_validator(mode='before')
    @classmethod
    def _apply_fallbacks(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        username = data.get('username') or ''
        data['username'] = username
        data['displayName'] = data.get('displayName') or username or 'Unknown'
        if not data.get('pfpUrl') and data.get('fid') is not None:
            data['pfpUrl'] = AVATAR_URL_TEMPLATE.format(fid=data['fid'])
        return data

    @classmethod
    def build(
        cls,
        fid: int,
        username: str | None = None,
        display_name: str | None = None,
        pfp_url: str | None = None
    ) -> 'CastAuthor':
        return cls(fid=fid, username=username, displayName=display_name, pfpUrl=pfp_url)


class Cast(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash: str
    text: str = ''
    images: tuple[str, ...] | None = None
    author: CastAuthor

    @field_validator('text', mode='before')
    @classmethod
    def _text_or_empty(cls, value):
        return value or ''

    @field_validator('images')
    @classmethod
    def _empty_images_are_none(cls, value: tuple[str, ...] | None) -> tuple[str, ...] | None:
        return value or None


class LanguageOption(BaseModel):
    code: LanguageCode
    name: str


class LanguageCollection(BaseModel):
    languages: list[LanguageOption] = Field(default_factory=list)


class ResolveCastRequest(BaseModel):
    url: str
