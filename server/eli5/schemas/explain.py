from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field

from .cast import DEFAULT_LANGUAGE, LanguageCode


class TextPart(BaseModel):
    type: Literal['text'] = 'text'
    text: str


class ImageUrl(BaseModel):
    url: str


class ImagePart(BaseModel):
    type: Literal['image_url'] = 'image_url'
    image_url: ImageUrl


ContentPart = Union[TextPart, ImagePart]


class PromptPayload(BaseModel):
    system: str
    content: list[ContentPart] = Field(default_factory=list)

    @property
    def image_count(self) -> int:
        return sum(1 for part in self.content if isinstance(part, ImagePart))

    def to_messages(self) -> list[dict[str, Any]]:
        return [
            {'role': 'system', 'content': self.system},
            {'role': 'user', 'content': [part.model_dump() for part in self.content]},
        ]


class ExplainRequest(BaseModel):
    text: str = ''
    images: list[str] | None = None
    language: LanguageCode = DEFAULT_LANGUAGE


class ExplainResponse(BaseModel):
    explanation: str
    language: LanguageCode
