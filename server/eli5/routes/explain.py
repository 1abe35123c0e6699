from __future__ import annotations

from fastapi import APIRouter

from ..schemas.cast import SUPPORTED_LANGUAGES, LanguageCollection, LanguageOption
from ..schemas.explain import ExplainRequest, ExplainResponse
from ..services.pipeline import explain_cast

router = APIRouter(tags=['explain'])


@router.post('/explain', response_model=ExplainResponse)
async def post_explain(request: ExplainRequest) -> ExplainResponse:
    explanation = await explain_cast(request.text, request.language, request.images)
    return ExplainResponse(explanation=explanation, language=request.language)


@router.get('/languages', response_model=LanguageCollection)
async def list_languages() -> LanguageCollection:
    return LanguageCollection(
        languages=[LanguageOption(code=code, name=name) for code, name in SUPPORTED_LANGUAGES.items()]
    )
