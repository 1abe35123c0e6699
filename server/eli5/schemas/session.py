from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from .cast import DEFAULT_LANGUAGE, AppState, Cast, LanguageCode

CAST_SHARE_LOCATION = 'cast_share'


class LaunchAuthor(BaseModel):
    fid: int
    username: str | None = None
    displayName: str | None = None
    pfpUrl: str | None = None


class LaunchCast(BaseModel):
    hash: str
    text: str | None = None
    embeds: list[Any] = Field(default_factory=list)
    author: LaunchAuthor


class LaunchLocation(BaseModel):
    type: str
    cast: LaunchCast | None = None


class LaunchContext(BaseModel):
    location: LaunchLocation | None = None

    @property
    def shared_cast(self) -> LaunchCast | None:
        if self.location is None or self.location.type != CAST_SHARE_LOCATION:
            return None
        return self.location.cast


class SessionView(BaseModel):
    id: str
    state: AppState
    cast: Cast | None = None
    explanation: str = ''
    error: str | None = None
    language: LanguageCode = DEFAULT_LANGUAGE
    castUrl: str = ''
    fromShare: bool = False


class CreateSessionRequest(BaseModel):
    launchContext: dict[str, Any] | None = None
    language: LanguageCode = DEFAULT_LANGUAGE


class SubmitUrlRequest(BaseModel):
    url: str


class ChangeLanguageRequest(BaseModel):
    language: LanguageCode
