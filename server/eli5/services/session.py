from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from time import monotonic
from typing import Awaitable, Callable, Sequence
from uuid import uuid4

from ..core.config import get_settings
from ..core.errors import (
    CastNotFound,
    ExplainError,
    InvalidUrl,
    SessionStateError,
    UpstreamFailure
)
from ..schemas.cast import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, AppState, Cast
from ..schemas.session import SessionView
from .launch import LaunchContextProvider, StaticLaunchContextProvider, cast_from_launch
from .pipeline import explain_cast, resolve_cast
from .urls import build_share_url, validate_image_urls

logger = logging.getLogger(__name__)

ResolveFn = Callable[[str], Awaitable[Cast]]
ExplainFn = Callable[[str, str, Sequence[str] | None], Awaitable[str]]

# Failures of the richer lookup that still leave the host's own cast usable.
SHARE_FALLBACK_ERRORS = (CastNotFound, UpstreamFailure, InvalidUrl)

SESSION_LIMIT = 1000
SESSION_IDLE_TTL = 3600.0


class ExplainSession:
    """One user's walk through loading -> no-cast/explaining -> result.

    Every action takes a fresh sequence number; a call that completes after
    a newer action started is dropped instead of overwriting fresher state.
    """

    def __init__(
        self,
        resolve: ResolveFn = resolve_cast,
        explain: ExplainFn = explain_cast,
        launch_context: LaunchContextProvider | None = None,
        language: str = DEFAULT_LANGUAGE,
        session_id: str | None = None
    ):
        self.id = session_id or uuid4().hex
        self.state = AppState.loading
        self.cast: Cast | None = None
        self.explanation = ''
        self.error: str | None = None
        self.language = _checked_language(language)
        self.cast_url = ''
        self.from_share = False
        self._resolve = resolve
        self._explain = explain
        self._launch_context = launch_context or StaticLaunchContextProvider()
        self._sequence = 0

    def _next_request(self) -> int:
        self._sequence += 1
        return self._sequence

    def _is_current(self, token: int) -> bool:
        if token != self._sequence:
            logger.debug('Session %s dropping stale result #%d (latest #%d)', self.id, token, self._sequence)
            return False
        return True

    def _fail(self, token: int, error: ExplainError) -> None:
        if not self._is_current(token):
            return
        logger.info('Session %s action #%d failed: %s', self.id, token, type(error).__name__)
        self.error = error.message
        self.explanation = ''
        self.state = AppState.no_cast

    async def start(self) -> SessionView:
        token = self._next_request()
        self.state = AppState.loading
        context = await self._launch_context.get_context()
        if not self._is_current(token):
            return self.view()

        shared = context.shared_cast if context else None
        if shared is None:
            self.state = AppState.no_cast
            return self.view()

        self.from_share = True
        share_url = build_share_url(shared.author.username, shared.author.fid, shared.hash)
        try:
            cast = await self._resolve(share_url)
        except SHARE_FALLBACK_ERRORS as exc:
            logger.info('Session %s using host cast %s: %s', self.id, shared.hash, type(exc).__name__)
            host_cast = cast_from_launch(shared)
            cast = Cast(
                hash=host_cast.hash,
                text=host_cast.text,
                images=validate_image_urls(host_cast.images),
                author=host_cast.author
            )
        except ExplainError as exc:
            self._fail(token, exc)
            return self.view()

        if self._is_current(token):
            await self._generate(token, cast)
        return self.view()

    async def submit(self, url: str) -> SessionView:
        if not (url or '').strip():
            return self.view()
        token = self._next_request()
        self.cast_url = url
        self.error = None
        self.state = AppState.loading
        try:
            cast = await self._resolve(url)
        except ExplainError as exc:
            self._fail(token, exc)
            return self.view()

        if self._is_current(token):
            await self._generate(token, cast)
        return self.view()

    async def regenerate(self) -> SessionView:
        if self.cast is None:
            raise SessionStateError('There is no cast to explain yet.')
        if self.state not in (AppState.result, AppState.explaining):
            raise SessionStateError(f'Cannot regenerate while {self.state.value}.')
        token = self._next_request()
        await self._generate(token, self.cast)
        return self.view()

    async def set_language(self, language: str) -> SessionView:
        self.language = _checked_language(language)
        if self.cast is not None and self.state in (AppState.result, AppState.explaining):
            return await self.regenerate()
        return self.view()

    def reset(self) -> SessionView:
        self._next_request()
        self.state = AppState.no_cast
        self.cast = None
        self.explanation = ''
        self.cast_url = ''
        self.error = None
        return self.view()

    async def _generate(self, token: int, cast: Cast) -> None:
        self.cast = cast
        self.error = None
        self.state = AppState.explaining
        try:
            explanation = await self._explain(cast.text, self.language, cast.images)
        except ExplainError as exc:
            self._fail(token, exc)
            return
        if not self._is_current(token):
            return
        self.explanation = explanation
        self.state = AppState.result

    def view(self) -> SessionView:
        return SessionView(
            id=self.id,
            state=self.state,
            cast=self.cast,
            explanation=self.explanation,
            error=self.error,
            language=self.language,
            castUrl=self.cast_url,
            fromShare=self.from_share,
        )


def _checked_language(language: str) -> str:
    if language not in SUPPORTED_LANGUAGES:
        raise ValueError(f'Unsupported language code: {language!r}')
    return language


class SessionStore:
    """In-memory sessions, least recently used first.

    A session idle for longer than ``idle_ttl`` seconds is dropped, and the
    store never holds more than ``limit`` sessions.
    """

    def __init__(
        self,
        limit: int = SESSION_LIMIT,
        idle_ttl: float = SESSION_IDLE_TTL,
        clock: Callable[[], float] = monotonic
    ) -> None:
        self._sessions: OrderedDict[str, tuple[ExplainSession, float]] = OrderedDict()
        self._limit = limit
        self._idle_ttl = idle_ttl
        self._clock = clock

    def _evict(self, now: float) -> None:
        while self._sessions:
            session_id, (_, touched_at) = next(iter(self._sessions.items()))
            if now - touched_at <= self._idle_ttl and len(self._sessions) <= self._limit:
                break
            del self._sessions[session_id]
            logger.debug('Evicted session %s', session_id)

    def add(self, session: ExplainSession) -> ExplainSession:
        now = self._clock()
        self._sessions[session.id] = (session, now)
        self._sessions.move_to_end(session.id)
        self._evict(now)
        return session

    def get(self, session_id: str) -> ExplainSession | None:
        now = self._clock()
        self._evict(now)
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        self._sessions[session_id] = (entry[0], now)
        self._sessions.move_to_end(session_id)
        return entry[0]

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)


session_store: SessionStore | None = None
store_lock = asyncio.Lock()


async def get_session_store() -> SessionStore:
    global session_store
    async with store_lock:
        if session_store is None:
            settings = get_settings()
            session_store = SessionStore(limit=settings.session_limit, idle_ttl=settings.session_idle_ttl)
    return session_store
