from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.ai.content import AIContentError, generate_content, generate_json
from app.ai.types import TextGenerator
from app.core.dependencies import get_text_generator
from app.core.rate_limit import rate_limit
from app.schemas.ai import GenerateJSONResponse, GenerateRequest, GenerateResponse

router = APIRouter()


def _upstream_error(exc: AIContentError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail={"code": exc.code, "message": str(exc)},
    )


@router.post("/ai/generate", response_model=GenerateResponse)
@rate_limit()
async def ai_generate(
    request: Request,
    payload: GenerateRequest,
    client: TextGenerator = Depends(get_text_generator),
):
    _ = request
    try:
        text = await generate_content(client, payload.prompt)
    except AIContentError as exc:
        raise _upstream_error(exc) from exc
    return GenerateResponse(text=text)


@router.post("/ai/generate-json", response_model=GenerateJSONResponse)
@rate_limit()
async def ai_generate_json(
    request: Request,
    payload: GenerateRequest,
    client: TextGenerator = Depends(get_text_generator),
):
    _ = request
    try:
        data = await generate_json(client, payload.prompt)
    except AIContentError as exc:
        raise _upstream_error(exc) from exc
    return GenerateJSONResponse(data=data)
