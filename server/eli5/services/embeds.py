from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Union

from .merge import merge_image_urls
from .urls import has_image_extension, is_image_host, looks_like_http_url


@dataclass(frozen=True)
class Url:
    """A bare string embed, as sent by the host on a share."""
    value: str


@dataclass(frozen=True)
class UrlField:
    """An ``{"url": ...}`` embed, optionally with a declared content type."""
    value: str
    content_type: str | None = None


@dataclass(frozen=True)
class MetadataImage:
    """An embed carrying ``metadata.image.url``."""
    value: str


EmbedShape = Union[Url, UrlField, MetadataImage]


def parse_embed(entry: Any) -> list[EmbedShape]:
    if isinstance(entry, str):
        return [Url(entry)] if entry.strip() else []
    if not isinstance(entry, dict):
        return []

    shapes: list[EmbedShape] = []
    metadata = entry.get('metadata')
    metadata = metadata if isinstance(metadata, dict) else {}

    url = entry.get('url')
    if isinstance(url, str) and url.strip():
        content_type = metadata.get('content_type')
        shapes.append(UrlField(url, content_type if isinstance(content_type, str) else None))

    image = metadata.get('image')
    if isinstance(image, dict):
        image_url = image.get('url')
        if isinstance(image_url, str) and image_url.strip():
            shapes.append(MetadataImage(image_url))
    return shapes


def is_image_candidate(shape: EmbedShape, share: bool = False) -> bool:
    value = shape.value
    if isinstance(shape, MetadataImage):
        return looks_like_http_url(value)
    if has_image_extension(value) or is_image_host(value):
        return True
    if isinstance(shape, UrlField) and shape.content_type:
        if shape.content_type.lower().startswith('image/'):
            return True
    # Share embeds from the host are almost always images.
    return share and looks_like_http_url(value)


def extract_image_urls(embeds: Iterable[Any] | None, share: bool = False) -> list[str]:
    candidates: list[str] = []
    for entry in embeds or []:
        for shape in parse_embed(entry):
            if is_image_candidate(shape, share=share):
                candidates.append(shape.value)
    return merge_image_urls(candidates)
