from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..schemas.cast import CastAuthor

QUOTE_SEPARATOR = '\n\nQuoted: '


@dataclass(frozen=True)
class CastSource:
    text: str
    author: CastAuthor
    images: list[str]


def merge_image_urls(*url_groups: Iterable[str]) -> list[str]:
    seen = set()
    merged: list[str] = []
    for group in url_groups:
        for url in group:
            if url in seen:
                continue
            seen.add(url)
            merged.append(url)
    return merged


def merge_quote(quote: CastSource, parent: CastSource | None) -> CastSource:
    """Combine a quote cast with the cast it quotes.

    The parent is usually the content being explained, so its author wins
    and its images come first.
    """
    if parent is None:
        return quote
    quote_text = quote.text or ''
    parent_text = parent.text or ''
    if quote_text.strip() and parent_text.strip():
        text = f'{quote_text}{QUOTE_SEPARATOR}{parent_text}'
    elif quote_text.strip():
        text = quote_text
    else:
        text = parent_text
    return CastSource(
        text=text,
        author=parent.author,
        images=merge_image_urls(parent.images, quote.images),
    )
