from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from pydantic import ValidationError

from ..schemas.cast import Cast, CastAuthor
from ..schemas.session import LaunchCast, LaunchContext
from .embeds import extract_image_urls

logger = logging.getLogger(__name__)


class LaunchContextProvider(Protocol):
    async def get_context(self) -> LaunchContext | None:
        ...


class StaticLaunchContextProvider:
    """Launch context handed over by the host when the session is opened."""

    def __init__(self, raw: Mapping[str, Any] | LaunchContext | None = None):
        self._raw = raw

    async def get_context(self) -> LaunchContext | None:
        if self._raw is None:
            return None
        if isinstance(self._raw, LaunchContext):
            return self._raw
        try:
            return LaunchContext.model_validate(self._raw)
        except ValidationError as exc:
            logger.warning('Ignoring undecodable launch context: %s', exc.errors()[:3])
            return None


def cast_from_launch(launch_cast: LaunchCast) -> Cast:
    author = launch_cast.author
    return Cast(
        hash=launch_cast.hash,
        text=launch_cast.text or '',
        images=extract_image_urls(launch_cast.embeds, share=True) or None,
        author=CastAuthor.build(author.fid, author.username, author.displayName, author.pfpUrl),
    )
