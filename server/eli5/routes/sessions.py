from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from ..schemas.cast import AppState
from ..schemas.session import ChangeLanguageRequest, CreateSessionRequest, SessionView, SubmitUrlRequest
from ..services.launch import StaticLaunchContextProvider
from ..services.session import ExplainSession, SessionStore, get_session_store

router = APIRouter(prefix='/sessions', tags=['sessions'])

SessionFactory = Callable[..., ExplainSession]


def get_session_factory() -> SessionFactory:
    return ExplainSession


def _require_session(session_id: str, store: SessionStore) -> ExplainSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail='Session not found')
    return session


@router.post('', response_model=SessionView)
async def create_session(
    request: CreateSessionRequest,
    store: SessionStore = Depends(get_session_store),
    factory: SessionFactory = Depends(get_session_factory)
) -> SessionView:
    session = factory(
        launch_context=StaticLaunchContextProvider(request.launchContext),
        language=request.language
    )
    store.add(session)
    return await session.start()


@router.get('/{session_id}', response_model=SessionView)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)) -> SessionView:
    session = _require_session(session_id, store)
    return session.view()


@router.post('/{session_id}/submit', response_model=SessionView)
async def submit_url(
    session_id: str,
    request: SubmitUrlRequest,
    store: SessionStore = Depends(get_session_store)
) -> SessionView:
    session = _require_session(session_id, store)
    return await session.submit(request.url)


@router.post('/{session_id}/language', response_model=SessionView)
async def change_language(
    session_id: str,
    request: ChangeLanguageRequest,
    store: SessionStore = Depends(get_session_store)
) -> SessionView:
    session = _require_session(session_id, store)
    return await session.set_language(request.language)


@router.post('/{session_id}/regenerate', response_model=SessionView)
async def regenerate(session_id: str, store: SessionStore = Depends(get_session_store)) -> SessionView:
    session = _require_session(session_id, store)
    return await session.regenerate()


@router.post('/{session_id}/reset', response_model=SessionView)
async def reset(session_id: str, store: SessionStore = Depends(get_session_store)) -> SessionView:
    session = _require_session(session_id, store)
    return session.reset()


@router.get('/{session_id}/explanation', response_class=PlainTextResponse)
async def copy_explanation(session_id: str, store: SessionStore = Depends(get_session_store)) -> str:
    session = _require_session(session_id, store)
    if session.state != AppState.result or not session.explanation:
        raise HTTPException(status_code=404, detail='No explanation yet')
    return session.explanation


@router.delete('/{session_id}')
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)) -> dict[str, Any]:
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail='Session not found')
    return {'ok': True}
