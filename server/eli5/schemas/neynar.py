from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError


class NeynarUser(BaseModel):
    fid: int
    username: str | None = None
    display_name: str | None = None
    pfp_url: str | None = None


class NeynarCast(BaseModel):
    hash: str
    text: str | None = None
    embeds: list[Any] = Field(default_factory=list)
    author: NeynarUser
    parent_cast: NeynarCast | None = None

    def quoted_cast(self) -> NeynarCast | None:
        """The cast this one quotes, if any.

        Neynar reports it either as ``parent_cast`` or as an embed of the form
        ``{"cast": {...}}``; the first one that validates wins.
        """
        if self.parent_cast is not None:
            return self.parent_cast
        for embed in self.embeds:
            if not isinstance(embed, dict) or not isinstance(embed.get('cast'), dict):
                continue
            try:
                return NeynarCast.model_validate(embed['cast'])
            except ValidationError:
                continue
        return None


class NeynarCastResponse(BaseModel):
    cast: NeynarCast | None = None


NeynarCast.model_rebuild()
