from __future__ import annotations

from fastapi import APIRouter

from ..schemas.cast import Cast, ResolveCastRequest
from ..services.pipeline import resolve_cast

router = APIRouter(prefix='/casts', tags=['casts'])


@router.post('/resolve', response_model=Cast)
async def post_resolve_cast(request: ResolveCastRequest) -> Cast:
    return await resolve_cast(request.url)
